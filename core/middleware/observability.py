"""
Observability middleware.

Gives every request a correlation id, logs its start and outcome as
structured records and echoes the ids back in response headers. Request
bodies are never logged: they carry passwords and license keys.
"""

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def current_trace_ids() -> Dict[str, str]:
    """Trace and span id of the active span, empty when tracing is off."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": format_trace_id(span_context.trace_id),
        "span_id": format_span_id(span_context.span_id),
    }


def outcome_for(status_code: int) -> str:
    """Bucket an HTTP status into success, client_error or server_error."""
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


class ObservabilityMiddleware:
    """Correlation ids, request logging and timing headers."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore
        ids = current_trace_ids()
        if ids:
            request.trace_id = ids["trace_id"]  # type: ignore

        context = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
            **ids,
        }
        logger.info(
            "Request started",
            extra={**context, "remote_addr": request.META.get("REMOTE_ADDR")},
        )

        started = time.perf_counter()
        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    **context,
                    "request_status": "exception",
                    "error_type": type(e).__name__,
                    "duration_ms": self._elapsed_ms(started),
                },
                exc_info=True,
            )
            raise

        duration_ms = self._elapsed_ms(started)
        request_status = outcome_for(response.status_code)
        self._log_outcome(request, response, context, request_status, duration_ms)

        response[CORRELATION_HEADER] = correlation_id
        response["X-Request-Status"] = request_status
        response["X-Request-Duration"] = f"{duration_ms / 1000:.3f}"
        if ids:
            response["X-Trace-ID"] = ids["trace_id"]
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    def _log_outcome(
        self,
        request: HttpRequest,
        response: HttpResponse,
        context: Dict[str, Optional[str]],
        request_status: str,
        duration_ms: float,
    ) -> None:
        extra = {
            **context,
            "request_status": request_status,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        match = getattr(request, "resolver_match", None)
        if match is not None and "tenant_name" in match.kwargs:
            extra["tenant"] = match.kwargs["tenant_name"]

        if request_status == "server_error":
            logger.error("Request completed with server error", extra=extra)
        elif request_status == "client_error":
            logger.warning("Request completed with client error", extra=extra)
        else:
            logger.info("Request completed successfully", extra=extra)
