from django.contrib import admin
from .models import PageContent
from .services import invalidate_page_content


@admin.register(PageContent)
class PageContentAdmin(admin.ModelAdmin):
    list_display = ['page_slug', 'updated_by', 'updated_at']
    readonly_fields = ['updated_by', 'updated_at']

    def save_model(self, request, obj, form, change):
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)
        invalidate_page_content(obj.page_slug)
