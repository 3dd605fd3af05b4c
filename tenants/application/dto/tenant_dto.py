"""
Tenant DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from tenants.domain.professional_user import ProfessionalUser


@dataclass
class RegisteredTenantDTO:
    """DTO returned after a successful registration."""

    name: str
    license_id: str
    kind: str
    max_users: Optional[int]
    activated_at: datetime
    expires_at: datetime


@dataclass
class ProfessionalUserDTO:
    """DTO for professional user information (never carries the digest)."""

    username: str
    tenant: str
    real_name: str

    @classmethod
    def from_entity(cls, user: ProfessionalUser) -> "ProfessionalUserDTO":
        """Build the DTO from a ProfessionalUser entity."""
        return cls(username=user.username, tenant=user.tenant_name, real_name=user.real_name)


@dataclass
class ProfessionalUserListDTO:
    """DTO listing the users of a tenant."""

    tenant: str
    users: List[ProfessionalUserDTO]


@dataclass
class UserLimitDTO:
    """DTO for a tenant's effective user limit."""

    tenant: str
    max_users: Optional[int]
    unlimited: bool
    current_users: int
    can_add_user: bool


@dataclass
class TenantLoginDTO:
    """DTO returned after a tenant logs in."""

    name: str
    kind: Optional[str]
    is_admin: bool


@dataclass
class ProfessionalLoginDTO:
    """DTO returned after a professional user logs in."""

    username: str
    tenant: str
