"""
Health check endpoints for monitoring system health
"""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.utils import timezone
from django.db import connection
from lessons.models import Lesson
import logging

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def health_check(request):
    """Basic liveness check"""
    return JsonResponse({
        'status': 'ok',
        'timestamp': timezone.now().isoformat(),
    })


@require_http_methods(["GET"])
def database_health_check(request):
    """Check database connectivity and lesson catalog"""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'database': 'connected',
            'lessons': {
                'total': Lesson.objects.count(),
                'published': Lesson.objects.filter(published=True).count(),
                'without_short_id': Lesson.objects.filter(short_id__isnull=True).count(),
            }
        })
    except Exception as e:
        logger.error("Health check failed", extra={'error': str(e)})
        return JsonResponse({
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat()
        }, status=500)
