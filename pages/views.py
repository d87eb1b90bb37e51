import logging

from rest_framework import permissions, serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .defaults import PAGE_DEFAULTS
from .services import get_page_content, save_page_content

logger = logging.getLogger(__name__)


class PageContentSerializer(serializers.Serializer):
    content = serializers.DictField()


class PageContentView(APIView):
    """
    GET: Page content merged over defaults (public)
    PUT: Replace stored page content (admin only)
    """

    def get_permissions(self):
        if self.request.method == 'PUT':
            return [permissions.IsAdminUser()]
        return [permissions.AllowAny()]

    def get(self, request, page_slug):
        if page_slug not in PAGE_DEFAULTS:
            return Response({'error': 'Page not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(
            {'page_slug': page_slug, 'content': get_page_content(page_slug)},
            status=status.HTTP_200_OK
        )

    def put(self, request, page_slug):
        if page_slug not in PAGE_DEFAULTS:
            return Response({'error': 'Page not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = PageContentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            page = save_page_content(page_slug, serializer.validated_data['content'], request.user)
        except Exception as e:
            logger.error(f"Error saving page content for {page_slug}: {e}", exc_info=True)
            return Response(
                {'error': 'Failed to save page content', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({
            'page_slug': page.page_slug,
            'content': get_page_content(page_slug),
            'updated_at': page.updated_at,
        }, status=status.HTTP_200_OK)
