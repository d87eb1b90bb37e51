from django.conf import settings
from django.db import models

from lessons.models import Lesson


class FavoriteLesson(models.Model):
    """A lesson bookmarked by a user."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='favorite_lessons',
    )
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='favorited_by')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'lesson'], name='unique_user_favorite_lesson'),
        ]

    def __str__(self):
        return f"{self.user} - {self.lesson}"

    @classmethod
    def toggle(cls, user, lesson):
        """Add or remove the favorite; returns True when the lesson is now a favorite."""
        deleted, _ = cls.objects.filter(user=user, lesson=lesson).delete()
        if deleted:
            return False
        cls.objects.get_or_create(user=user, lesson=lesson)
        return True
