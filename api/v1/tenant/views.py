"""
Tenant API views.

Registration redeems a license key; the remaining endpoints manage the
professional users of a tenant within its effective user limit.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.dependencies import get_lifecycle_manager, get_provisioning_service
from api.v1.tenant.serializers import (
    AddProfessionalUserRequestSerializer,
    ChangePasswordRequestSerializer,
    LoginRequestSerializer,
    ProfessionalLoginRequestSerializer,
    ProfessionalLoginSerializer,
    ProfessionalUserListSerializer,
    ProfessionalUserSerializer,
    RegisteredTenantSerializer,
    RegisterTenantRequestSerializer,
    TenantLoginSerializer,
    UserLimitSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from tenants.application.commands.add_professional_user import AddProfessionalUserCommand
from tenants.application.commands.authenticate import (
    AuthenticateProfessionalCommand,
    AuthenticateTenantCommand,
)
from tenants.application.commands.change_professional_password import (
    ChangeProfessionalPasswordCommand,
)
from tenants.application.commands.register_tenant import RegisterTenantCommand
from tenants.application.handlers.authentication_handlers import (
    AuthenticateProfessionalHandler,
    AuthenticateTenantHandler,
)
from tenants.application.handlers.professional_user_handlers import (
    AddProfessionalUserHandler,
    ChangeProfessionalPasswordHandler,
    GetUserLimitHandler,
    ListProfessionalUsersHandler,
)
from tenants.application.handlers.register_tenant_handler import RegisterTenantHandler
from tenants.application.queries.get_user_limit import GetUserLimitQuery
from tenants.application.queries.list_professional_users import ListProfessionalUsersQuery

tracer = get_tracer(__name__)


class RegisterTenantView(APIView):
    """View for registering a tenant with a license key."""

    @extend_schema(
        operation_id="register_tenant",
        summary="Register Tenant",
        description=(
            "Create a tenant by redeeming a pending license key. The tenant row and "
            "the license activation are committed together or not at all."
        ),
        tags=["Tenants"],
        request=RegisterTenantRequestSerializer,
        responses={
            201: RegisteredTenantSerializer,
            400: {"description": "Bad Request or invalid license key"},
            409: {"description": "Name taken or license not redeemable"},
        },
    )
    def post(self, request: Request) -> Response:
        """Register a tenant."""
        return async_to_sync(self._handle_register_tenant)(request)

    async def _handle_register_tenant(self, request: Request) -> Response:
        """Async handler for register tenant."""
        with tracer.start_as_current_span("register_tenant") as span:
            span.set_attribute("operation", "register_tenant")

            serializer = RegisterTenantRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            span.set_attribute("tenant.name", data["name"])

            handler = RegisterTenantHandler(provisioning_service=get_provisioning_service())
            result = await handler.handle(
                RegisterTenantCommand(
                    name=data["name"],
                    password=data["password"],
                    license_key=data["license_key"],
                )
            )

            span.set_attribute("license.id", result.license_id)
            span.set_status(Status(StatusCode.OK))
            return Response(
                RegisteredTenantSerializer(result).data,
                status=status.HTTP_201_CREATED,
            )


class TenantLoginView(APIView):
    """View for tenant login."""

    @extend_schema(
        operation_id="tenant_login",
        summary="Tenant Login",
        description="Check tenant credentials and report the kind of its active license.",
        tags=["Tenants"],
        request=LoginRequestSerializer,
        responses={
            200: TenantLoginSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid credentials"},
        },
    )
    def post(self, request: Request) -> Response:
        """Log a tenant in."""
        return async_to_sync(self._handle_tenant_login)(request)

    async def _handle_tenant_login(self, request: Request) -> Response:
        """Async handler for tenant login."""
        with tracer.start_as_current_span("tenant_login") as span:
            serializer = LoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = AuthenticateTenantHandler(
                provisioning_service=get_provisioning_service(),
                lifecycle_manager=get_lifecycle_manager(),
                admin_user=settings.ADMIN_USER,
            )
            result = await handler.handle(
                AuthenticateTenantCommand(
                    name=serializer.validated_data["name"],
                    password=serializer.validated_data["password"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(TenantLoginSerializer(result).data, status=status.HTTP_200_OK)


class ProfessionalUsersView(APIView):
    """View for listing and adding the professional users of a tenant."""

    @extend_schema(
        operation_id="list_professional_users",
        summary="List Professional Users",
        tags=["Tenants"],
        responses={
            200: ProfessionalUserListSerializer,
            404: {"description": "Tenant not found"},
        },
    )
    def get(self, request: Request, tenant_name: str) -> Response:
        """List the users of a tenant."""
        return async_to_sync(self._handle_list_users)(request, tenant_name)

    @extend_schema(
        operation_id="add_professional_user",
        summary="Add Professional User",
        description=(
            "Create a professional user. Rejected with 403 once the tenant has as "
            "many users as its effective limit."
        ),
        tags=["Tenants"],
        request=AddProfessionalUserRequestSerializer,
        responses={
            201: ProfessionalUserSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "User limit reached"},
            404: {"description": "Tenant not found"},
            409: {"description": "Username already exists in tenant"},
        },
    )
    def post(self, request: Request, tenant_name: str) -> Response:
        """Add a user to a tenant."""
        return async_to_sync(self._handle_add_user)(request, tenant_name)

    async def _handle_list_users(self, _request: Request, tenant_name: str) -> Response:
        """Async handler for list users."""
        with tracer.start_as_current_span("list_professional_users") as span:
            span.set_attribute("tenant.name", tenant_name)

            handler = ListProfessionalUsersHandler(provisioning_service=get_provisioning_service())
            result = await handler.handle(ListProfessionalUsersQuery(tenant_name=tenant_name))

            span.set_attribute("users.count", len(result.users))
            span.set_status(Status(StatusCode.OK))
            return Response(ProfessionalUserListSerializer(result).data, status=status.HTTP_200_OK)

    async def _handle_add_user(self, request: Request, tenant_name: str) -> Response:
        """Async handler for add user."""
        with tracer.start_as_current_span("add_professional_user") as span:
            span.set_attribute("operation", "add_professional_user")
            span.set_attribute("tenant.name", tenant_name)

            serializer = AddProfessionalUserRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = AddProfessionalUserHandler(provisioning_service=get_provisioning_service())
            result = await handler.handle(
                AddProfessionalUserCommand(
                    tenant_name=tenant_name,
                    username=data["username"],
                    real_name=data["real_name"],
                    password=data["password"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(ProfessionalUserSerializer(result).data, status=status.HTTP_201_CREATED)


class UserLimitView(APIView):
    """View for the effective user limit of a tenant."""

    @extend_schema(
        operation_id="get_user_limit",
        summary="Get User Limit",
        description="Effective user limit, resolved fresh from the tenant's license.",
        tags=["Tenants"],
        responses={
            200: UserLimitSerializer,
            404: {"description": "Tenant not found"},
        },
    )
    def get(self, request: Request, tenant_name: str) -> Response:
        """Get a tenant's user limit."""
        return async_to_sync(self._handle_get_user_limit)(request, tenant_name)

    async def _handle_get_user_limit(self, _request: Request, tenant_name: str) -> Response:
        """Async handler for get user limit."""
        with tracer.start_as_current_span("get_user_limit") as span:
            span.set_attribute("tenant.name", tenant_name)

            handler = GetUserLimitHandler(provisioning_service=get_provisioning_service())
            result = await handler.handle(GetUserLimitQuery(tenant_name=tenant_name))

            span.set_status(Status(StatusCode.OK))
            return Response(UserLimitSerializer(result).data, status=status.HTTP_200_OK)


class ProfessionalPasswordView(APIView):
    """View for a tenant resetting a professional user's password."""

    @extend_schema(
        operation_id="change_professional_password",
        summary="Change Professional Password",
        description="The tenant's own password authorizes the change.",
        tags=["Tenants"],
        request=ChangePasswordRequestSerializer,
        responses={
            200: {"description": "Password updated"},
            400: {"description": "Bad Request"},
            401: {"description": "Invalid tenant credentials"},
            404: {"description": "Tenant or user not found"},
        },
    )
    def put(self, request: Request, tenant_name: str, username: str) -> Response:
        """Change a user's password."""
        return async_to_sync(self._handle_change_password)(request, tenant_name, username)

    async def _handle_change_password(
        self, request: Request, tenant_name: str, username: str
    ) -> Response:
        """Async handler for change password."""
        with tracer.start_as_current_span("change_professional_password") as span:
            span.set_attribute("tenant.name", tenant_name)

            serializer = ChangePasswordRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = ChangeProfessionalPasswordHandler(
                provisioning_service=get_provisioning_service()
            )
            await handler.handle(
                ChangeProfessionalPasswordCommand(
                    tenant_name=tenant_name,
                    tenant_password=serializer.validated_data["tenant_password"],
                    username=username,
                    new_password=serializer.validated_data["new_password"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"message": "Password updated successfully"}, status=status.HTTP_200_OK)


class ProfessionalLoginView(APIView):
    """View for professional user login."""

    @extend_schema(
        operation_id="professional_login",
        summary="Professional Login",
        description="Check a professional user's credentials and return its tenant.",
        tags=["Professionals"],
        request=ProfessionalLoginRequestSerializer,
        responses={
            200: ProfessionalLoginSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid credentials"},
        },
    )
    def post(self, request: Request) -> Response:
        """Log a professional user in."""
        return async_to_sync(self._handle_professional_login)(request)

    async def _handle_professional_login(self, request: Request) -> Response:
        """Async handler for professional login."""
        with tracer.start_as_current_span("professional_login") as span:
            serializer = ProfessionalLoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = AuthenticateProfessionalHandler(
                provisioning_service=get_provisioning_service()
            )
            result = await handler.handle(
                AuthenticateProfessionalCommand(
                    username=data["username"],
                    password=data["password"],
                    tenant_name=data.get("tenant") or None,
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(ProfessionalLoginSerializer(result).data, status=status.HTTP_200_OK)
