"""
ValidateLicenseHandler.

Handler for the validate license query.
"""

from licenses.application.dto.license_dto import LicenseValidationDTO
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.services import LicenseLifecycleManager


class ValidateLicenseHandler:
    """Handler for ValidateLicenseQuery."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, query: ValidateLicenseQuery) -> LicenseValidationDTO:
        """
        Handle validate license query.

        Args:
            query: ValidateLicenseQuery

        Returns:
            LicenseValidationDTO carrying exactly one outcome
        """
        result = await self.lifecycle_manager.validate(query.license_key)
        license = result.license

        if license is None:
            return LicenseValidationDTO(outcome=result.outcome.value, is_valid=False)

        return LicenseValidationDTO(
            outcome=result.outcome.value,
            is_valid=result.is_redeemable,
            kind=license.kind.value,
            max_users=license.max_users,
            expires_at=license.expires_at,
            assigned=license.tenant_id is not None,
        )
