"""
ProfessionalUser repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from core.domain.value_objects import UserLimit
from tenants.domain.professional_user import ProfessionalUser


class ProfessionalUserRepository(ABC):
    """Abstract repository for ProfessionalUser entities."""

    @abstractmethod
    async def find(self, tenant_name: str, username: str) -> Optional[ProfessionalUser]:
        """
        Find a professional user within a tenant.

        Args:
            tenant_name: Owning tenant
            username: Username

        Returns:
            ProfessionalUser entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[ProfessionalUser]:
        """
        Find the first professional user with a username, across tenants.

        Args:
            username: Username

        Returns:
            ProfessionalUser entity or None if not found
        """
        pass

    @abstractmethod
    async def list_for_tenant(self, tenant_name: str) -> List[ProfessionalUser]:
        """List the professional users of a tenant."""
        pass

    @abstractmethod
    async def count_for_tenant(self, tenant_name: str) -> int:
        """Count the professional users of a tenant."""
        pass

    @abstractmethod
    async def add_within_limit(self, user: ProfessionalUser, limit: UserLimit) -> ProfessionalUser:
        """
        Insert a user if the tenant is still under ``limit``.

        The count and the insert run in one transaction.

        Args:
            user: User to insert
            limit: Effective user limit of the tenant

        Returns:
            Saved user

        Raises:
            TenantNotFoundError: If the tenant does not exist
            ProfessionalUserExistsError: If the username exists in the tenant
            UserLimitReachedError: If the tenant is at its limit
        """
        pass

    @abstractmethod
    async def update_password(self, tenant_name: str, username: str, password_digest: str) -> bool:
        """
        Replace the password digest of a user.

        Returns:
            True if the user exists
        """
        pass
