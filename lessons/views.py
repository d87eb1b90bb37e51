import logging

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from .identifiers import is_uuid, lesson_url, resolve_identifier
from .models import Lesson, LessonMaterial, Tag, UserLessonMaterial, ShortCodeCollisionError
from .serializers import (
    TagSerializer,
    LessonListSerializer,
    LessonDetailSerializer,
    LessonWriteSerializer,
    LessonMaterialSerializer,
    AdditionalActivitySerializer,
    UserLessonMaterialSerializer,
)
from .services import resolve_lesson, create_user_material

logger = logging.getLogger(__name__)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read; only staff users may write."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


def visible_lessons(user):
    """Staff see every lesson; everyone else only published ones."""
    queryset = Lesson.objects.prefetch_related('tags')
    if user and user.is_staff:
        return queryset
    return queryset.filter(published=True)


def lesson_not_found():
    return Response({'error': 'Lesson not found'}, status=status.HTTP_404_NOT_FOUND)


class LessonListView(APIView):
    """
    GET: List lessons (filters: period, target_group, tag)
    POST: Create lesson (admin only)
    """
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):
        tag = request.query_params.get('tag')
        if tag and not is_uuid(tag):
            return Response({'error': 'Invalid tag'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            lessons = visible_lessons(request.user)

            period = request.query_params.get('period')
            target_group = request.query_params.get('target_group')
            if period:
                lessons = lessons.filter(period=period)
            if target_group:
                lessons = lessons.filter(target_group=target_group)
            if tag:
                lessons = lessons.filter(tags__id=tag)

            serializer = LessonListSerializer(lessons, many=True)
            return Response(serializer.data, status=status.HTTP_200_OK)
        except Exception as e:
            logger.error(f"Error fetching lessons: {e}", exc_info=True)
            return Response(
                {'error': 'Failed to retrieve lessons', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    def post(self, request):
        serializer = LessonWriteSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            lesson = serializer.save()
        except ShortCodeCollisionError as e:
            logger.error(f"Error creating lesson: {e}")
            try:
                from slack_notifications import send_system_notification
                send_system_notification('⚠️ Lesson short code collision', str(e))
            except Exception as notify_error:
                logger.warning(f"Failed to send Slack notification: {notify_error}")
            return Response(
                {'error': 'Failed to create lesson', 'details': str(e)},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        return Response(LessonDetailSerializer(lesson).data, status=status.HTTP_201_CREATED)


class LessonDetailView(APIView):
    """
    GET: Lesson detail by URL segment ("<slug>-<short id>", "<slug>-<uuid>" or bare id)
    PATCH: Update lesson (admin only)
    DELETE: Delete lesson (admin only)
    """
    permission_classes = [IsAdminOrReadOnly]

    def get_lesson(self, request, slug_param):
        queryset = visible_lessons(request.user).prefetch_related('materials', 'additional_activities')
        return resolve_lesson(slug_param, queryset)

    def get(self, request, slug_param):
        try:
            lesson = self.get_lesson(request, slug_param)
        except Lesson.DoesNotExist:
            return lesson_not_found()
        serializer = LessonDetailSerializer(lesson, context={'request': request, 'slug_param': slug_param})
        return Response(serializer.data, status=status.HTTP_200_OK)

    def patch(self, request, slug_param):
        try:
            lesson = self.get_lesson(request, slug_param)
        except Lesson.DoesNotExist:
            return lesson_not_found()

        serializer = LessonWriteSerializer(lesson, data=request.data, partial=True, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        lesson = serializer.save()
        return Response(LessonDetailSerializer(lesson).data, status=status.HTTP_200_OK)

    def delete(self, request, slug_param):
        try:
            lesson = self.get_lesson(request, slug_param)
        except Lesson.DoesNotExist:
            return lesson_not_found()
        lesson_id = lesson.id
        lesson.delete()
        logger.info(f"Lesson deleted: {lesson_id}")
        return Response({'message': 'Lesson deleted successfully'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def resolve_lesson_url(request, slug_param):
    """
    GET: Show how a lesson URL segment is resolved.
    Returns the extracted identifier, the rule that matched and the lesson's
    canonical URL (lesson fields are null when nothing matches).
    """
    rule, identifier = resolve_identifier(slug_param)
    try:
        lesson = resolve_lesson(slug_param, visible_lessons(request.user))
    except Lesson.DoesNotExist:
        lesson = None

    return Response({
        'identifier': identifier,
        'rule': rule,
        'lesson_id': str(lesson.id) if lesson else None,
        'url': lesson_url(lesson) if lesson else None,
    }, status=status.HTTP_200_OK)


class TagListView(APIView):
    """
    GET: List tags
    POST: Create tag (admin only)
    """
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):
        serializer = TagSerializer(Tag.objects.all(), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    def post(self, request):
        serializer = TagSerializer(data=request.data)
        if serializer.is_valid():
            tag = serializer.save()
            return Response(TagSerializer(tag).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class LessonChildListView(APIView):
    """Shared GET/POST for collections that hang off a lesson."""
    permission_classes = [IsAdminOrReadOnly]
    serializer_class = None
    related_name = None

    def get(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()
        items = getattr(lesson, self.related_name).all()
        return Response(self.serializer_class(items, many=True).data, status=status.HTTP_200_OK)

    def post(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()
        serializer = self.serializer_class(data=request.data)
        if serializer.is_valid():
            item = serializer.save(lesson=lesson)
            return Response(self.serializer_class(item).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class LessonMaterialListView(LessonChildListView):
    """
    GET: Materials of a lesson
    POST: Add material (admin only)
    """
    serializer_class = LessonMaterialSerializer
    related_name = 'materials'


class AdditionalActivityListView(LessonChildListView):
    """
    GET: Additional activities of a lesson
    POST: Add activity (admin only)
    """
    serializer_class = AdditionalActivitySerializer
    related_name = 'additional_activities'


class LessonMaterialDetailView(APIView):
    """
    GET / PATCH / DELETE a single material (writes admin only)
    """
    permission_classes = [IsAdminOrReadOnly]

    def get_material(self, request, slug_param, material_id):
        lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        return get_object_or_404(LessonMaterial, id=material_id, lesson=lesson)

    def get(self, request, slug_param, material_id):
        try:
            material = self.get_material(request, slug_param, material_id)
        except Lesson.DoesNotExist:
            return lesson_not_found()
        return Response(LessonMaterialSerializer(material).data, status=status.HTTP_200_OK)

    def patch(self, request, slug_param, material_id):
        try:
            material = self.get_material(request, slug_param, material_id)
        except Lesson.DoesNotExist:
            return lesson_not_found()
        serializer = LessonMaterialSerializer(material, data=request.data, partial=True)
        if serializer.is_valid():
            material = serializer.save()
            return Response(LessonMaterialSerializer(material).data, status=status.HTTP_200_OK)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, slug_param, material_id):
        try:
            material = self.get_material(request, slug_param, material_id)
        except Lesson.DoesNotExist:
            return lesson_not_found()
        material.delete()
        return Response({'message': 'Material deleted successfully'}, status=status.HTTP_200_OK)


class MyLessonMaterialListView(APIView):
    """
    GET: Current user's edited copies of this lesson's materials
    POST: Save a new copy (title gets a "(N)" suffix when already used).
          Title and content missing from the payload are copied from
          ``source_material``.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()
        materials = UserLessonMaterial.objects.filter(user=request.user, lesson=lesson)
        return Response(UserLessonMaterialSerializer(materials, many=True).data, status=status.HTTP_200_OK)

    def post(self, request, slug_param):
        try:
            lesson = resolve_lesson(slug_param, visible_lessons(request.user))
        except Lesson.DoesNotExist:
            return lesson_not_found()

        serializer = UserLessonMaterialSerializer(data=request.data, context={'lesson': lesson})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = dict(serializer.validated_data)
        source = data.get('source_material')
        if source is not None:
            data.setdefault('title', source.title)
            data.setdefault('content', source.content)
        title = data.pop('title')
        material = create_user_material(request.user, lesson, title, **data)
        return Response(UserLessonMaterialSerializer(material).data, status=status.HTTP_201_CREATED)


class MyLessonMaterialDetailView(APIView):
    """
    GET / PATCH / DELETE one of the current user's material copies
    """
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self, request, material_id):
        return get_object_or_404(UserLessonMaterial, id=material_id, user=request.user)

    def get(self, request, material_id):
        material = self.get_object(request, material_id)
        return Response(UserLessonMaterialSerializer(material).data, status=status.HTTP_200_OK)

    def patch(self, request, material_id):
        material = self.get_object(request, material_id)
        serializer = UserLessonMaterialSerializer(
            material, data=request.data, partial=True, context={'lesson': material.lesson}
        )
        if serializer.is_valid():
            material = serializer.save()
            return Response(UserLessonMaterialSerializer(material).data, status=status.HTTP_200_OK)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, material_id):
        material = self.get_object(request, material_id)
        material.delete()
        return Response({'message': 'Material deleted successfully'}, status=status.HTTP_200_OK)
