"""
GenerateLicenseHandler.

Handles the generate license command.
"""

from core.infrastructure.events import event_bus
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.dto.license_dto import GeneratedLicenseDTO
from licenses.domain.events import LicenseGenerated
from licenses.domain.services import LicenseLifecycleManager


class GenerateLicenseHandler:
    """Handler for GenerateLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: GenerateLicenseCommand) -> GeneratedLicenseDTO:
        """
        Handle generate license command.

        Args:
            command: GenerateLicenseCommand

        Returns:
            GeneratedLicenseDTO with the plaintext key (shown only once)

        Raises:
            InternalServiceError: If no unique key could be allocated
        """
        generated = await self.lifecycle_manager.generate(
            kind=command.kind,
            max_users_override=command.max_users,
            notes=command.notes,
        )
        license = generated.license

        await event_bus.publish(
            LicenseGenerated(
                aggregate_id=str(license.id),
                license_id=license.id,
                kind=license.kind.value,
                max_users=license.max_users,
            )
        )

        return GeneratedLicenseDTO(
            license_key=generated.plaintext_key,
            license_id=license.id,
            kind=license.kind.value,
            max_users=license.max_users,
        )
