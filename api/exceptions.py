"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every error body has the shape ``{"error": {"code", "message"}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    InternalServiceError,
    InvalidCredentialsError,
    InvalidLicenseKeyError,
    LicenseNotFoundError,
    LicenseNotRedeemableError,
    LicenseNotRevocableError,
    ProfessionalUserExistsError,
    ProfessionalUserNotFoundError,
    TenantNameTakenError,
    TenantNotFoundError,
    UserLimitReachedError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

DOMAIN_STATUS_CODES = (
    (InvalidLicenseKeyError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (UserLimitReachedError, status.HTTP_403_FORBIDDEN),
    (
        (LicenseNotFoundError, TenantNotFoundError, ProfessionalUserNotFoundError),
        status.HTTP_404_NOT_FOUND,
    ),
    (
        (
            LicenseNotRedeemableError,
            LicenseNotRevocableError,
            TenantNameTakenError,
            ProfessionalUserExistsError,
        ),
        status.HTTP_409_CONFLICT,
    ),
    (InternalServiceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, ValidationError):
        response = _handle_validation_error(exc, context)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        response.data = {
            "error": {"code": code, "message": response.data.get("detail", exc.default_detail)}
        }
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    match = getattr(request, "resolver_match", None) if request else None
    return "/" + match.route if match is not None and match.route else "unmatched"


def domain_status_code(exc: DomainException) -> int:
    """Map a domain exception to its HTTP status code."""
    for exc_types, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_types):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = domain_status_code(exc)
    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()

    if status_code >= 500:
        logger.error(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_validation_error(exc: ValidationError, context: Dict[str, Any]) -> Response:
    """Render serializer errors as INVALID_INPUT, keeping the field details."""
    response = exception_handler(exc, context)
    response.data = {
        "error": {
            "code": "INVALID_INPUT",
            "message": "Invalid input",
            "fields": exc.detail,
        }
    }
    return response


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions without leaking details."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def validation_error_response(errors: Dict[str, Any]) -> Response:
    """Build the INVALID_INPUT response for serializer errors."""
    return Response(
        {"error": {"code": "INVALID_INPUT", "message": "Invalid input", "fields": errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )
