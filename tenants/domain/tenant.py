"""
Tenant domain entity.

A tenant is an institution account that owns professional users.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from licenses.domain.license import License


@dataclass(frozen=True)
class Tenant:
    """
    Tenant domain entity.

    ``legacy_user_limit`` holds the user cap recorded at registration; when a
    license is attached, the license's ``max_users`` takes precedence.
    """

    name: str
    password_digest: str
    legacy_user_limit: Optional[int] = None
    license_id: Optional[uuid.UUID] = None

    def __post_init__(self):
        """Validate tenant entity."""
        if not self.name or not self.name.strip():
            raise ValueError("Tenant name cannot be empty")
        if not self.password_digest:
            raise ValueError("Password digest is required")
        if self.legacy_user_limit is not None and self.legacy_user_limit < 0:
            raise ValueError("User limit cannot be negative")

    @classmethod
    def create(
        cls,
        name: str,
        password_digest: str,
        license: Optional[License] = None,
        legacy_user_limit: Optional[int] = None,
    ) -> "Tenant":
        """
        Create a new Tenant entity.

        Args:
            name: Unique tenant name
            password_digest: Hashed password
            license: License provisioning the tenant, if any
            legacy_user_limit: User cap for tenants without a license

        Returns:
            Tenant entity instance
        """
        if license is not None:
            return cls(
                name=name,
                password_digest=password_digest,
                legacy_user_limit=license.max_users,
                license_id=license.id,
            )
        return cls(
            name=name,
            password_digest=password_digest,
            legacy_user_limit=legacy_user_limit,
        )
