from django.contrib import admin
from django.utils.html import format_html

from .models import Tag, Lesson, LessonMaterial, AdditionalActivity, UserLessonMaterial


class LessonMaterialInline(admin.StackedInline):
    model = LessonMaterial
    extra = 0
    fields = ['title', 'description', 'content', 'specification', 'duration']


class AdditionalActivityInline(admin.TabularInline):
    model = AdditionalActivity
    extra = 0
    fields = ['title', 'description', 'image_url']


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ['title', 'short_id', 'published', 'publication_date', 'period', 'public_link', 'created_at']
    list_filter = ['published', 'period', 'target_group', 'tags']
    search_fields = ['title', 'description', 'short_id']
    readonly_fields = ['id', 'short_id', 'public_link', 'created_by', 'created_at', 'updated_at']
    filter_horizontal = ['tags']
    inlines = [LessonMaterialInline, AdditionalActivityInline]

    fieldsets = (
        ('Identity', {
            'fields': ('id', 'short_id', 'public_link')
        }),
        ('Content', {
            'fields': ('title', 'description', 'vimeo_video_url', 'duration', 'lesson_type')
        }),
        ('Classification', {
            'fields': ('period', 'target_group', 'rvp_connection', 'tags')
        }),
        ('Publishing', {
            'fields': ('published', 'publication_date', 'created_by', 'created_at', 'updated_at')
        }),
    )

    def public_link(self, obj):
        if not obj.pk or obj._state.adding:
            return '-'
        url = obj.get_absolute_url()
        return format_html('<a href="{}" target="_blank">{}</a>', url, url)
    public_link.short_description = 'URL'

    def save_model(self, request, obj, form, change):
        if not change and not obj.created_by:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ['title', 'created_at']
    search_fields = ['title']


@admin.register(UserLessonMaterial)
class UserLessonMaterialAdmin(admin.ModelAdmin):
    list_display = ['title', 'user', 'lesson', 'updated_at']
    search_fields = ['title', 'user__email', 'lesson__title']
    raw_id_fields = ['user', 'lesson', 'source_material']
