from django.conf import settings
from django.db import models
import uuid


class PageContent(models.Model):
    """Admin-edited JSON content of a static page (one row per page)."""

    class Page(models.TextChoices):
        HOMEPAGE = 'homepage', 'Homepage'
        ABOUT = 'about', 'About'
        TERMS = 'terms', 'Terms'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    page_slug = models.CharField(max_length=20, choices=Page.choices, unique=True)
    content = models.JSONField(default=dict)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='edited_pages',
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Page content'
        verbose_name_plural = 'Page content'

    def __str__(self):
        return self.get_page_slug_display()
