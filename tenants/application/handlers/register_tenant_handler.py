"""
RegisterTenantHandler.

Handles the register tenant command.
"""

from core.infrastructure.events import event_bus
from licenses.domain.events import LicenseRedeemed
from tenants.application.commands.register_tenant import RegisterTenantCommand
from tenants.application.dto.tenant_dto import RegisteredTenantDTO
from tenants.domain.events import TenantRegistered
from tenants.domain.services import TenantProvisioningService


class RegisterTenantHandler:
    """Handler for RegisterTenantCommand."""

    def __init__(self, provisioning_service: TenantProvisioningService):
        """Initialize handler with the provisioning service."""
        self.provisioning_service = provisioning_service

    async def handle(self, command: RegisterTenantCommand) -> RegisteredTenantDTO:
        """
        Handle register tenant command.

        Args:
            command: RegisterTenantCommand

        Returns:
            RegisteredTenantDTO

        Raises:
            InvalidLicenseKeyError: If no license matches the key
            LicenseNotRedeemableError: If the license is not pending
            TenantNameTakenError: If the name is already registered
        """
        result = await self.provisioning_service.register_tenant(
            name=command.name,
            password=command.password,
            plaintext_key=command.license_key,
        )
        tenant, license = result.tenant, result.license

        await event_bus.publish(
            LicenseRedeemed(
                aggregate_id=str(license.id),
                license_id=license.id,
                tenant_id=tenant.name,
                kind=license.kind.value,
            )
        )
        await event_bus.publish(
            TenantRegistered(
                aggregate_id=tenant.name,
                tenant_name=tenant.name,
                license_id=license.id,
            )
        )

        return RegisteredTenantDTO(
            name=tenant.name,
            license_id=str(license.id),
            kind=license.kind.value,
            max_users=license.max_users,
            activated_at=license.activated_at,
            expires_at=license.expires_at,
        )
