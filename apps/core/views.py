"""
Core Views for E-Life Admin Backend

- GET /api/health - liveness plus database and cache reachability
"""
import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny

logger = logging.getLogger(__name__)

SERVICE_NAME = 'elife-admin-backend'
HEALTH_CACHE_KEY = 'health:ping'


def _database_status() -> str:
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f'Health check database error: {e}')
        return f'error: {e}'
    return 'connected'


def _cache_status() -> str:
    cache.set(HEALTH_CACHE_KEY, 1, 5)
    return 'ok' if cache.get(HEALTH_CACHE_KEY) == 1 else 'unavailable'


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """
    Health check endpoint for deployment verification.

    Returns:
        - 200: database reachable
        - 503: database connection failed
    """
    database = _database_status()
    healthy = database == 'connected'

    return JsonResponse(
        {
            'status': 'healthy' if healthy else 'unhealthy',
            'service': SERVICE_NAME,
            'database': database,
            'cache': _cache_status(),
        },
        status=200 if healthy else 503,
    )
