"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional
import uuid

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            DuplicateLicenseKeyError: If another license has the same key digest
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key_digest(self, key_digest: str) -> Optional[License]:
        """
        Find a license by the digest of its plaintext key.

        Args:
            key_digest: Keyed digest of the license key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_active_for_tenant(self, tenant_id: str) -> Optional[License]:
        """
        Find the most recently activated active license bound to a tenant.

        Args:
            tenant_id: Tenant name

        Returns:
            License entity or None if the tenant has no active license
        """
        pass

    @abstractmethod
    async def mark_expired(self, license_id: uuid.UUID) -> bool:
        """
        Record the expired state of a license.

        Args:
            license_id: License UUID

        Returns:
            True if a row changed state
        """
        pass

    @abstractmethod
    async def revoke_if_pending(self, license_id: uuid.UUID) -> bool:
        """
        Atomically move a pending license to revoked.

        Args:
            license_id: License UUID

        Returns:
            True if the license was pending and is now revoked
        """
        pass
