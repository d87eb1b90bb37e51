from django.urls import path
from . import views

app_name = 'lessons'

urlpatterns = [
    path('', views.LessonListView.as_view(), name='lesson_list'),
    path('tags/', views.TagListView.as_view(), name='tag_list'),
    path('resolve/<str:slug_param>/', views.resolve_lesson_url, name='resolve_lesson_url'),

    # Current user's edited material copies
    path('my-materials/<uuid:material_id>/', views.MyLessonMaterialDetailView.as_view(), name='my_material_detail'),

    # Lesson addressed by "<slug>-<short id>" (or any older URL form)
    path('<str:slug_param>/', views.LessonDetailView.as_view(), name='lesson_detail'),
    path('<str:slug_param>/materials/', views.LessonMaterialListView.as_view(), name='lesson_materials'),
    path('<str:slug_param>/materials/<uuid:material_id>/', views.LessonMaterialDetailView.as_view(), name='lesson_material_detail'),
    path('<str:slug_param>/activities/', views.AdditionalActivityListView.as_view(), name='lesson_activities'),
    path('<str:slug_param>/my-materials/', views.MyLessonMaterialListView.as_view(), name='my_lesson_materials'),
]
