from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.db.models import F
import uuid
import logging

from .identifiers import generate_short_code, lesson_url, slugify_title

logger = logging.getLogger(__name__)


class ShortCodeCollisionError(Exception):
    """No free short code was found within the configured number of attempts."""


class Tag(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['title']

    def __str__(self):
        return self.title


class Lesson(models.Model):
    """
    A teaching lesson (video, description and materials).

    ``id`` is the permanent identifier; ``short_id`` is a 10 character code
    used in public URLs. Both are assigned once on creation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    short_id = models.CharField(
        max_length=10,
        unique=True,
        null=True,
        blank=True,
        editable=False,
        help_text="Short code used in lesson URLs (generated on creation)"
    )

    title = models.CharField(max_length=500)
    description = models.TextField(max_length=5000, blank=True)
    vimeo_video_url = models.URLField(max_length=500, blank=True)
    duration = models.CharField(max_length=50, blank=True)
    period = models.CharField(max_length=200, blank=True, help_text="Historical period covered by the lesson")
    target_group = models.CharField(max_length=200, blank=True)
    lesson_type = models.CharField(max_length=200, blank=True)
    rvp_connection = models.JSONField(default=list, blank=True, help_text="Links to curriculum (RVP) outcomes")

    publication_date = models.DateField(null=True, blank=True)
    published = models.BooleanField(default=False)

    tags = models.ManyToManyField(Tag, related_name='lessons', blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_lessons',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = [F('publication_date').desc(nulls_last=True), '-created_at']

    def __str__(self):
        return self.title

    @property
    def slug(self):
        return slugify_title(self.title)

    def get_absolute_url(self):
        return lesson_url(self)

    def save(self, *args, **kwargs):
        if self.short_id or not self._state.adding:
            super().save(*args, **kwargs)
            return
        self._save_with_new_short_id(*args, **kwargs)

    def assign_short_id(self):
        """Give an already stored lesson a short code if it has none."""
        if not self.short_id:
            self._save_with_new_short_id(update_fields=['short_id'])
        return self.short_id

    def _save_with_new_short_id(self, *args, **kwargs):
        max_attempts = getattr(settings, 'LESSON_SHORT_ID_MAX_ATTEMPTS', 5)
        for attempt in range(1, max_attempts + 1):
            self.short_id = generate_short_code()
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                if not Lesson.objects.filter(short_id=self.short_id).exists():
                    self.short_id = None
                    raise
                logger.warning(
                    f"Short code collision for lesson '{self.title}' "
                    f"(attempt {attempt} of {max_attempts}): {self.short_id}"
                )

        self.short_id = None
        raise ShortCodeCollisionError(
            f"Could not assign a unique short code after {max_attempts} attempts"
        )


class LessonMaterial(models.Model):
    """Worksheet or methodology sheet attached to a lesson."""

    class Specification(models.TextChoices):
        FIRST_GRADE_ELEMENTARY = '1st_grade_elementary', '1st grade elementary'
        SECOND_GRADE_ELEMENTARY = '2nd_grade_elementary', '2nd grade elementary'
        HIGH_SCHOOL = 'high_school', 'High school'

    DURATION_CHOICES = [
        (30, '30 minutes'),
        (45, '45 minutes'),
        (90, '90 minutes'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='materials')
    title = models.CharField(max_length=500)
    description = models.TextField(max_length=5000, blank=True)
    content = models.TextField(max_length=10000, blank=True)
    specification = models.CharField(max_length=30, choices=Specification.choices, blank=True)
    duration = models.PositiveSmallIntegerField(choices=DURATION_CHOICES, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.lesson.title} - {self.title}"


class AdditionalActivity(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='additional_activities')
    title = models.CharField(max_length=500)
    description = models.TextField(max_length=5000, blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at']
        verbose_name_plural = 'Additional activities'

    def __str__(self):
        return self.title


class UserLessonMaterial(models.Model):
    """
    A user's own edited copy of a lesson material.
    Titles are unique per user and lesson ("Worksheet", "Worksheet (1)", ...).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='lesson_materials',
    )
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='user_materials')
    source_material = models.ForeignKey(
        LessonMaterial,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='user_copies',
    )
    title = models.CharField(max_length=500)
    content = models.TextField(blank=True)
    specification = models.CharField(max_length=30, choices=LessonMaterial.Specification.choices, blank=True)
    duration = models.PositiveSmallIntegerField(choices=LessonMaterial.DURATION_CHOICES, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} - {self.title}"
