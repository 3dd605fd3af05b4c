"""
Operational views: liveness, database readiness and the Prometheus scrape.
"""

import logging

from django.db import connection
from django.http import HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Liveness probe."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": "therapy-tracker-service"})


@method_decorator(csrf_exempt, name="dispatch")
class HealthDBView(View):
    """Readiness probe; 503 when the database cannot answer."""

    def get(self, _request):
        """Run a trivial query on the default connection."""
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Details stay in the log, never in the response
            logger.error("Database health check failed: %s", e, exc_info=True)
            return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)
        return JsonResponse({"status": "healthy", "database": "connected"})


class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
