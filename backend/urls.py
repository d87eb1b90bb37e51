"""
URL configuration for backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse

from health_checks import health_check, database_health_check

urlpatterns = [
    path("admin/", admin.site.urls),

    # API endpoints
    path("api/lessons/", include('lessons.urls')),
    path("api/favorites/", include('favorites.urls')),
    path("api/newsletter/", include('newsletter.urls')),
    path("api/pages/", include('pages.urls')),

    # Health check endpoints
    path("health/", health_check, name="health_check"),
    path("health/db/", database_health_check, name="database_health_check"),

    # Root endpoint
    path("", lambda request: JsonResponse({
        "message": "StoryOn Lessons API",
        "status": "running",
    })),
]
