"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    kind: str
    max_users: Optional[int]
    state: str
    created_at: datetime
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    tenant_id: Optional[str]
    notes: str

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build the DTO from a License entity."""
        return cls(
            id=license.id,
            kind=license.kind.value,
            max_users=license.max_users,
            state=license.state.value,
            created_at=license.created_at,
            activated_at=license.activated_at,
            expires_at=license.expires_at,
            tenant_id=license.tenant_id,
            notes=license.notes,
        )


@dataclass
class GeneratedLicenseDTO:
    """DTO returned once after generation; the only place the key appears."""

    license_key: str
    license_id: uuid.UUID
    kind: str
    max_users: Optional[int]


@dataclass
class LicenseValidationDTO:
    """DTO for license validation response."""

    outcome: str
    is_valid: bool
    kind: Optional[str] = None
    max_users: Optional[int] = None
    expires_at: Optional[datetime] = None
    assigned: bool = False
