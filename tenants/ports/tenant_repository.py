"""
Tenant repository port (interface).

This defines the contract for tenant persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from licenses.domain.license import License
from tenants.domain.tenant import Tenant


class TenantRepository(ABC):
    """
    Abstract repository for Tenant entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Tenant]:
        """
        Find a tenant by name.

        Args:
            name: Tenant name

        Returns:
            Tenant entity or None if not found
        """
        pass

    @abstractmethod
    async def register_with_license(self, tenant: Tenant, license: License) -> Tenant:
        """
        Insert a tenant and activate its license in one transaction.

        The license write only succeeds if the stored license is still
        pending; otherwise nothing is written.

        Args:
            tenant: Tenant to insert
            license: License already transitioned to active

        Returns:
            Saved tenant entity

        Raises:
            LicenseNotRedeemableError: If the license stopped being pending
            TenantNameTakenError: If the tenant name already exists
        """
        pass

    @abstractmethod
    async def create_legacy(self, tenant: Tenant) -> Tenant:
        """
        Insert a tenant without a license.

        Raises:
            TenantNameTakenError: If the tenant name already exists
        """
        pass
