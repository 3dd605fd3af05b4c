"""
Authentication handlers.

Tenant and professional logins. A tenant login also reports the kind of
its current license, with lazy expiry applied.
"""

import logging
from typing import Optional

from core.domain.value_objects import LicenseState
from licenses.domain.services import LicenseLifecycleManager
from tenants.application.commands.authenticate import (
    AuthenticateProfessionalCommand,
    AuthenticateTenantCommand,
)
from tenants.application.dto.tenant_dto import ProfessionalLoginDTO, TenantLoginDTO
from tenants.domain.services import TenantProvisioningService

logger = logging.getLogger(__name__)


class AuthenticateTenantHandler:
    """Handler for AuthenticateTenantCommand."""

    def __init__(
        self,
        provisioning_service: TenantProvisioningService,
        lifecycle_manager: LicenseLifecycleManager,
        admin_user: Optional[str] = None,
    ):
        """
        Initialize handler.

        Args:
            provisioning_service: Tenant provisioning service
            lifecycle_manager: License lifecycle manager
            admin_user: Name of the administrator tenant, if configured
        """
        self.provisioning_service = provisioning_service
        self.lifecycle_manager = lifecycle_manager
        self.admin_user = admin_user

    async def handle(self, command: AuthenticateTenantCommand) -> TenantLoginDTO:
        """
        Handle tenant login.

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        tenant = await self.provisioning_service.authenticate_tenant(
            command.name, command.password
        )

        kind = None
        license = await self.lifecycle_manager.find_active_for_tenant(tenant.name)
        if license is not None and license.state == LicenseState.ACTIVE:
            kind = license.kind.value

        logger.info("Tenant %s logged in", tenant.name)
        return TenantLoginDTO(
            name=tenant.name,
            kind=kind,
            is_admin=bool(self.admin_user) and tenant.name == self.admin_user,
        )


class AuthenticateProfessionalHandler:
    """Handler for AuthenticateProfessionalCommand."""

    def __init__(self, provisioning_service: TenantProvisioningService):
        self.provisioning_service = provisioning_service

    async def handle(self, command: AuthenticateProfessionalCommand) -> ProfessionalLoginDTO:
        user = await self.provisioning_service.authenticate_professional(
            command.username, command.password, tenant_name=command.tenant_name
        )
        return ProfessionalLoginDTO(username=user.username, tenant=user.tenant_name)
