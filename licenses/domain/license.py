"""
License domain entity.

This is the core domain entity representing a redeemable license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.exceptions import LicenseNotRedeemableError, LicenseNotRevocableError
from core.domain.value_objects import LicenseKind, LicenseState


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def add_license_term(activated_at: datetime) -> datetime:
    """
    Compute the expiration of a license activated at ``activated_at``.

    The term is one calendar year; February 29th rolls over to March 1st.
    """
    try:
        return activated_at.replace(year=activated_at.year + 1)
    except ValueError:
        return activated_at.replace(year=activated_at.year + 1, month=3, day=1)


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A license provisions exactly one tenant and bounds the number of
    professional users that tenant may create. The stored ``state`` is the
    last recorded transition; ``classify`` gives the effective state.
    """

    id: uuid.UUID
    key_digest: Optional[str]
    kind: LicenseKind
    max_users: Optional[int]
    state: LicenseState
    created_at: datetime
    activated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    tenant_id: Optional[str] = None
    notes: str = ""

    def __post_init__(self):
        """Validate license entity."""
        if self.key_digest is not None and len(self.key_digest) != 64:
            raise ValueError("Invalid license key digest")
        if self.max_users is not None and self.max_users < 0:
            raise ValueError("Max users cannot be negative")
        if (self.activated_at is None) != (self.expires_at is None):
            raise ValueError("Activation and expiration dates must be set together")
        if self.state == LicenseState.PENDING and self.tenant_id is not None:
            raise ValueError("A pending license cannot be bound to a tenant")

    @classmethod
    def generate(
        cls,
        kind: LicenseKind,
        key_digest: str,
        max_users_override: Optional[int] = None,
        notes: str = "",
        license_id: Optional[uuid.UUID] = None,
        current_time: Optional[datetime] = None,
    ) -> "License":
        """
        Create a new pending License entity.

        Args:
            kind: License kind
            key_digest: Keyed digest of the plaintext key
            max_users_override: Explicit user cap (kind preset otherwise)
            notes: Free text notes
            license_id: Optional UUID (generated if not provided)
            current_time: Creation time (defaults to now)

        Returns:
            License entity instance
        """
        max_users = (
            max_users_override if max_users_override is not None else kind.preset_max_users
        )
        return cls(
            id=license_id or uuid.uuid4(),
            key_digest=key_digest,
            kind=kind,
            max_users=max_users,
            state=LicenseState.PENDING,
            created_at=current_time or utc_now(),
            notes=notes or "",
        )

    @classmethod
    def legacy(
        cls,
        tenant_id: str,
        kind: LicenseKind,
        max_users: Optional[int] = None,
        current_time: Optional[datetime] = None,
    ) -> "License":
        """
        Create a keyless active license bound directly to a tenant.

        Legacy licenses are never redeemed, so they carry no term.
        """
        return cls(
            id=uuid.uuid4(),
            key_digest=None,
            kind=kind,
            max_users=max_users,
            state=LicenseState.ACTIVE,
            created_at=current_time or utc_now(),
            tenant_id=tenant_id,
        )

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check whether the license term has run out.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if an expiration is set and lies in the past
        """
        if self.expires_at is None:
            return False
        return self.expires_at < (current_time or utc_now())

    def classify(self, current_time: Optional[datetime] = None) -> LicenseState:
        """
        Return the effective state of the license at ``current_time``.

        Expiry takes precedence over whatever state was last stored.
        """
        if self.is_expired(current_time):
            return LicenseState.EXPIRED
        return self.state

    def redeem(self, tenant_id: str, current_time: Optional[datetime] = None) -> "License":
        """
        Create a new License instance bound to ``tenant_id``.

        Args:
            tenant_id: Name of the tenant being provisioned
            current_time: Activation time (defaults to now)

        Returns:
            New License instance in active state

        Raises:
            LicenseNotRedeemableError: If the license is not pending
        """
        activated_at = current_time or utc_now()
        effective = self.classify(activated_at)
        if effective != LicenseState.PENDING:
            raise LicenseNotRedeemableError(f"License is {effective.value} and cannot be redeemed")

        return replace(
            self,
            state=LicenseState.ACTIVE,
            activated_at=activated_at,
            expires_at=add_license_term(activated_at),
            tenant_id=tenant_id,
        )

    def revoke(self) -> "License":
        """
        Create a new License instance with revoked state.

        Raises:
            LicenseNotRevocableError: If the license is not pending
        """
        if self.state != LicenseState.PENDING:
            raise LicenseNotRevocableError(
                f"License is {self.state.value}; only pending licenses can be revoked"
            )
        return replace(self, state=LicenseState.REVOKED)

    def mark_expired(self) -> "License":
        """Create a new License instance with expired state."""
        return replace(self, state=LicenseState.EXPIRED)
