"""
Lesson lookup and creation helpers shared by the API views and admin.
"""
import logging
import re

from django.db import transaction

from .identifiers import extract_identifier, is_uuid
from .models import Lesson, UserLessonMaterial

logger = logging.getLogger(__name__)

_TITLE_WITH_INDEX = re.compile(r'^(.*?)\s*\((\d+)\)$')


def resolve_lesson(slug_param, queryset=None):
    """
    Find the lesson addressed by a ``/lessons/<slug_param>/`` URL.

    The extracted identifier is tried as a short code first and then as a
    UUID primary key, because the extractor cannot always tell the two
    apart. Raises ``Lesson.DoesNotExist`` when neither matches.
    """
    if queryset is None:
        queryset = Lesson.objects.all()

    identifier = extract_identifier(slug_param)
    if not identifier:
        raise Lesson.DoesNotExist(f"No lesson for '{slug_param}'")

    lesson = queryset.filter(short_id=identifier).first()
    if lesson is not None:
        return lesson

    if is_uuid(identifier):
        lesson = queryset.filter(pk=identifier).first()
        if lesson is not None:
            return lesson

    raise Lesson.DoesNotExist(f"No lesson for '{slug_param}'")


@transaction.atomic
def create_lesson(created_by=None, tags=None, **fields):
    """Create a lesson with a fresh short code and attach its tags."""
    lesson = Lesson(created_by=created_by, **fields)
    lesson.save()
    if tags:
        lesson.tags.set(tags)
    logger.info(f"Lesson created: {lesson.id} ({lesson.short_id})")
    return lesson


@transaction.atomic
def update_lesson(lesson, tags=None, **fields):
    """Update lesson fields; ``tags`` replaces the whole tag set when given."""
    for name, value in fields.items():
        setattr(lesson, name, value)
    lesson.save()
    if tags is not None:
        lesson.tags.set(tags)
    return lesson


def parse_title_with_index(title):
    """
    Split ``"Worksheet (2)"`` into ``("Worksheet", 2)``.
    Titles without a trailing index return ``(title, None)``.
    """
    match = _TITLE_WITH_INDEX.match(title)
    if match:
        return match.group(1).strip(), int(match.group(2))
    return title, None


def unique_material_title(existing_titles, requested_title):
    """
    Return ``requested_title`` unless it is taken, otherwise the base name
    with the next free ``(N)`` suffix.
    """
    base_name, _ = parse_title_with_index(requested_title)
    matching = [
        title for title in existing_titles
        if parse_title_with_index(title)[0] == base_name
    ]
    if requested_title not in matching:
        return requested_title

    max_index = 0
    for title in matching:
        _, index = parse_title_with_index(title)
        if index is not None and index > max_index:
            max_index = index
    return f"{base_name} ({max_index + 1})"


def create_user_material(user, lesson, title, **fields):
    existing_titles = UserLessonMaterial.objects.filter(
        user=user, lesson=lesson
    ).values_list('title', flat=True)
    return UserLessonMaterial.objects.create(
        user=user,
        lesson=lesson,
        title=unique_material_title(list(existing_titles), title),
        **fields,
    )
