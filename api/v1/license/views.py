"""
License API views.

Generation, lookup and revocation are back-office operations guarded by
AdminTokenMiddleware; validation is public.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.dependencies import get_lifecycle_manager
from api.v1.license.serializers import (
    GeneratedLicenseSerializer,
    GenerateLicenseRequestSerializer,
    LicenseSerializer,
    LicenseValidationSerializer,
    RevokeLicenseRequestSerializer,
    ValidateLicenseRequestSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from core.metrics import license_validations_total
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.handlers.generate_license_handler import GenerateLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    GetLicenseHandler,
    RevokeLicenseHandler,
)
from licenses.application.handlers.validate_license_handler import ValidateLicenseHandler
from licenses.application.queries.get_license import GetLicenseQuery
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.services import ValidationOutcome

tracer = get_tracer(__name__)

VALIDATION_STATUS_CODES = {
    ValidationOutcome.REDEEMABLE.value: status.HTTP_200_OK,
    ValidationOutcome.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ValidationOutcome.EXPIRED.value: status.HTTP_410_GONE,
    ValidationOutcome.ALREADY_REDEEMED.value: status.HTTP_409_CONFLICT,
    ValidationOutcome.REVOKED.value: status.HTTP_403_FORBIDDEN,
}


class GenerateLicenseView(APIView):
    """View for generating license keys."""

    @extend_schema(
        operation_id="generate_license",
        summary="Generate License",
        description=(
            "Generate a pending license key. The plaintext key is returned only in "
            "this response. Requires the X-Admin-Token header."
        ),
        tags=["Licenses"],
        request=GenerateLicenseRequestSerializer,
        responses={
            201: GeneratedLicenseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized - Missing or invalid admin token"},
        },
    )
    def post(self, request: Request) -> Response:
        """Generate a license key."""
        return async_to_sync(self._handle_generate_license)(request)

    async def _handle_generate_license(self, request: Request) -> Response:
        """Async handler for generate license."""
        with tracer.start_as_current_span("generate_license") as span:
            span.set_attribute("operation", "generate_license")

            serializer = GenerateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            command = GenerateLicenseCommand(
                kind=serializer.validated_data["kind"],
                max_users=serializer.validated_data.get("max_users"),
                notes=serializer.validated_data.get("notes", ""),
            )
            span.set_attribute("license.kind", command.kind.value)

            handler = GenerateLicenseHandler(lifecycle_manager=get_lifecycle_manager())
            result = await handler.handle(command)

            span.set_attribute("license.id", str(result.license_id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                GeneratedLicenseSerializer(result).data,
                status=status.HTTP_201_CREATED,
            )


class ValidateLicenseView(APIView):
    """View for validating license keys."""

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Classify a license key as redeemable, already_redeemed, expired, revoked "
            "or not_found. Only redeemable keys answer 200."
        ),
        tags=["Licenses"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: LicenseValidationSerializer,
            400: {"description": "Bad Request"},
            403: LicenseValidationSerializer,
            404: LicenseValidationSerializer,
            409: LicenseValidationSerializer,
            410: LicenseValidationSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Validate a license key."""
        return async_to_sync(self._handle_validate_license)(request)

    async def _handle_validate_license(self, request: Request) -> Response:
        """Async handler for validate license."""
        with tracer.start_as_current_span("validate_license") as span:
            span.set_attribute("operation", "validate_license")

            serializer = ValidateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = ValidateLicenseHandler(lifecycle_manager=get_lifecycle_manager())
            result = await handler.handle(
                ValidateLicenseQuery(license_key=serializer.validated_data["license_key"])
            )

            license_validations_total.labels(outcome=result.outcome).inc()
            span.set_attribute("license.outcome", result.outcome)
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseValidationSerializer(result).data,
                status=VALIDATION_STATUS_CODES[result.outcome],
            )


class LicenseDetailView(APIView):
    """View for looking up a license by id."""

    @extend_schema(
        operation_id="get_license",
        summary="Get License",
        description="Return a license with lazy expiry applied. Requires X-Admin-Token.",
        tags=["Licenses"],
        responses={
            200: LicenseSerializer,
            401: {"description": "Unauthorized - Missing or invalid admin token"},
            404: {"description": "License not found"},
        },
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """Get a license."""
        return async_to_sync(self._handle_get_license)(request, license_id)

    async def _handle_get_license(self, _request: Request, license_id: uuid.UUID) -> Response:
        """Async handler for get license."""
        with tracer.start_as_current_span("get_license") as span:
            span.set_attribute("license.id", str(license_id))

            handler = GetLicenseHandler(lifecycle_manager=get_lifecycle_manager())
            result = await handler.handle(GetLicenseQuery(license_id=license_id))

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result).data, status=status.HTTP_200_OK)


class RevokeLicenseView(APIView):
    """View for revoking pending licenses."""

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description=(
            "Revoke a pending license so its key can no longer be redeemed. "
            "Active licenses cannot be revoked. Requires X-Admin-Token."
        ),
        tags=["Licenses"],
        request=RevokeLicenseRequestSerializer,
        responses={
            200: LicenseSerializer,
            401: {"description": "Unauthorized - Missing or invalid admin token"},
            404: {"description": "License not found"},
            409: {"description": "License is not pending"},
        },
    )
    def post(self, request: Request, license_id: uuid.UUID) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke_license)(request, license_id)

    async def _handle_revoke_license(self, request: Request, license_id: uuid.UUID) -> Response:
        """Async handler for revoke license."""
        with tracer.start_as_current_span("revoke_license") as span:
            span.set_attribute("operation", "revoke_license")
            span.set_attribute("license.id", str(license_id))

            serializer = RevokeLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = RevokeLicenseHandler(lifecycle_manager=get_lifecycle_manager())
            result = await handler.handle(
                RevokeLicenseCommand(
                    license_id=license_id,
                    reason=serializer.validated_data.get("reason"),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result).data, status=status.HTTP_200_OK)
