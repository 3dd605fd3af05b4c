"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseGenerated(DomainEvent):
    """Event raised when a license key is generated."""

    license_id: uuid.UUID
    kind: str
    max_users: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class LicenseRedeemed(DomainEvent):
    """Event raised when a pending license provisions a tenant."""

    license_id: uuid.UUID
    tenant_id: str
    kind: str


@dataclass(frozen=True, kw_only=True)
class LicenseRevoked(DomainEvent):
    """Event raised when a pending license is revoked."""

    license_id: uuid.UUID
    reason: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class LicenseExpired(DomainEvent):
    """Event raised when a license past its term is recorded as expired."""

    license_id: uuid.UUID
