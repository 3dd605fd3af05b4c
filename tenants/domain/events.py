"""
Tenant domain events.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class TenantRegistered(DomainEvent):
    """Event raised when a tenant is created by redeeming a license."""

    tenant_name: str
    license_id: Optional[uuid.UUID] = None


@dataclass(frozen=True, kw_only=True)
class ProfessionalUserAdded(DomainEvent):
    """Event raised when a professional user is added to a tenant."""

    tenant_name: str
    username: str
