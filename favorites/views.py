import logging

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from lessons.models import Lesson
from lessons.serializers import LessonListSerializer
from lessons.services import resolve_lesson
from lessons.views import visible_lessons, lesson_not_found
from .models import FavoriteLesson

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def favorite_lessons(request):
    """
    GET: Current user's favorite lessons, most recently added first
    """
    favorites = (
        FavoriteLesson.objects
        .filter(user=request.user, lesson__in=visible_lessons(request.user))
        .select_related('lesson')
        .order_by('-created_at')
    )
    lessons = [favorite.lesson for favorite in favorites]
    return Response(LessonListSerializer(lessons, many=True).data, status=status.HTTP_200_OK)


class FavoriteLessonView(APIView):
    """
    GET: Whether the lesson is a favorite of the current user
    POST: Add to favorites (no-op when already added)
    DELETE: Remove from favorites
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()
        is_favorited = FavoriteLesson.objects.filter(user=request.user, lesson=lesson).exists()
        return Response({'is_favorited': is_favorited}, status=status.HTTP_200_OK)

    def post(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()
        _, created = FavoriteLesson.objects.get_or_create(user=request.user, lesson=lesson)
        return Response(
            {'success': True, 'is_favorited': True},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def delete(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()
        FavoriteLesson.objects.filter(user=request.user, lesson=lesson).delete()
        return Response({'success': True, 'is_favorited': False}, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def toggle_favorite(request, slug_param):
    """
    POST: Flip the favorite state of a lesson for the current user
    """
    try:
        lesson = resolve_lesson(slug_param, visible_lessons(request.user))
    except Lesson.DoesNotExist:
        return lesson_not_found()

    try:
        is_favorited = FavoriteLesson.toggle(request.user, lesson)
    except Exception as e:
        logger.error(f"Error toggling favorite for lesson {lesson.id}: {e}", exc_info=True)
        return Response(
            {'success': False, 'error': 'Failed to update favorites', 'details': str(e)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return Response({'success': True, 'is_favorited': is_favorited}, status=status.HTTP_200_OK)
