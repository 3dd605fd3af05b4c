"""
License lifecycle handlers.

Handlers for the revoke command and the admin license lookup.
"""

from core.infrastructure.events import event_bus
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.queries.get_license import GetLicenseQuery
from licenses.domain.events import LicenseRevoked
from licenses.domain.services import LicenseLifecycleManager


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: RevokeLicenseCommand) -> LicenseDTO:
        """
        Handle revoke license command.

        Args:
            command: RevokeLicenseCommand

        Returns:
            Revoked license

        Raises:
            LicenseNotFoundError: If license not found
            LicenseNotRevocableError: If license is not pending
        """
        revoked = await self.lifecycle_manager.revoke(command.license_id)

        await event_bus.publish(
            LicenseRevoked(
                aggregate_id=str(revoked.id),
                license_id=revoked.id,
                reason=command.reason,
            )
        )

        return LicenseDTO.from_entity(revoked)


class GetLicenseHandler:
    """Handler for GetLicenseQuery."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, query: GetLicenseQuery) -> LicenseDTO:
        """
        Handle get license query.

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.lifecycle_manager.get(query.license_id)
        return LicenseDTO.from_entity(license)
