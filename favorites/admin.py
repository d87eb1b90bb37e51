from django.contrib import admin
from .models import FavoriteLesson


@admin.register(FavoriteLesson)
class FavoriteLessonAdmin(admin.ModelAdmin):
    list_display = ['user', 'lesson', 'created_at']
    raw_id_fields = ['user', 'lesson']
    search_fields = ['user__email', 'lesson__title']
