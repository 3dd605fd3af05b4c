"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""

import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import (
    errors_total,
    http_request_duration_seconds,
    http_requests_total,
)


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and record metrics."""
        start_time = time.time()

        try:
            response = self.get_response(request)
        except Exception as e:
            endpoint = self._endpoint(request)
            http_requests_total.labels(
                method=request.method, endpoint=endpoint, status_code=500
            ).inc()
            errors_total.labels(error_type=type(e).__name__, endpoint=endpoint).inc()
            raise

        endpoint = self._endpoint(request)
        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        http_request_duration_seconds.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(time.time() - start_time)
        return response

    @staticmethod
    def _endpoint(request: HttpRequest) -> str:
        # Route patterns keep tenant names and ids out of label values
        match = getattr(request, "resolver_match", None)
        if match is not None and match.route:
            return "/" + match.route
        return "unmatched"
