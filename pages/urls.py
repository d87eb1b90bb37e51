from django.urls import path
from . import views

app_name = 'pages'

urlpatterns = [
    path('<str:page_slug>/', views.PageContentView.as_view(), name='page_content'),
]
