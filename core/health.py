"""
Health checks for load balancers and uptime monitors.

API Endpoints:
- /api/health/ - Overall status (database and cache), 503 when unhealthy
- /api/health/live/ - Liveness, the process answers requests
- /api/health/ready/ - Readiness, the database accepts queries
- /api/health/database/ - Database connectivity with response time
"""

import logging
import time

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger(__name__)

HEALTHY = 'healthy'
UNHEALTHY = 'unhealthy'


def check_database():
    """Run ``SELECT 1`` and report the round trip in milliseconds."""
    started = time.monotonic()
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as exc:
        logger.error(f"Database health check failed: {exc}")
        return {'status': UNHEALTHY, 'error': str(exc)}
    return {
        'status': HEALTHY,
        'response_time_ms': round((time.monotonic() - started) * 1000, 2),
    }


def check_cache():
    try:
        cache.set('health_check', 'ok', 10)
        ok = cache.get('health_check') == 'ok'
    except Exception as exc:
        logger.error(f"Cache health check failed: {exc}")
        return {'status': UNHEALTHY, 'error': str(exc)}
    if not ok:
        return {'status': UNHEALTHY, 'error': 'cache not responding'}
    return {'status': HEALTHY}


def health_response(payload, healthy):
    payload['status'] = HEALTHY if healthy else UNHEALTHY
    payload['is_healthy'] = healthy
    payload['timestamp'] = timezone.now().isoformat()
    return Response(
        payload,
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    )


class HealthView(APIView):
    """
    GET /api/health/

    Anonymous. The database decides the overall status; a failing cache
    is reported but only degrades it.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        checks = {'database': check_database(), 'cache': check_cache()}
        healthy = checks['database']['status'] == HEALTHY
        response = health_response({'checks': checks}, healthy)
        if healthy and checks['cache']['status'] != HEALTHY:
            response.data['status'] = 'degraded'
        return response


class LivenessView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return health_response({'alive': True}, True)


class ReadinessView(APIView):
    """Ready once the database accepts queries."""
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        database = check_database()
        ready = database['status'] == HEALTHY
        return health_response({'ready': ready, 'database': database}, ready)


class DatabaseHealthView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        database = check_database()
        return health_response(
            {'database': database, 'vendor': connection.vendor},
            database['status'] == HEALTHY
        )
