from django.urls import path
from . import views

app_name = 'favorites'

urlpatterns = [
    path('', views.favorite_lessons, name='favorite_list'),
    path('<str:slug_param>/', views.FavoriteLessonView.as_view(), name='favorite_detail'),
    path('<str:slug_param>/toggle/', views.toggle_favorite, name='favorite_toggle'),
]
