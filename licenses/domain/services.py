"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from core.domain.events import EventBus
from core.domain.exceptions import (
    DuplicateLicenseKeyError,
    InternalServiceError,
    LicenseNotFoundError,
    LicenseNotRevocableError,
)
from core.domain.value_objects import LicenseKind, LicenseState
from licenses.domain.events import LicenseExpired
from licenses.domain.license import License, utc_now
from licenses.domain.license_key import LicenseKeyCodec
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ValidationOutcome(Enum):
    """Classification of a plaintext key, checked in declaration order."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    REDEEMABLE = "redeemable"
    ALREADY_REDEEMED = "already_redeemed"
    REVOKED = "revoked"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a license key plus the license it resolved to."""

    outcome: ValidationOutcome
    license: Optional[License] = None

    @property
    def is_redeemable(self) -> bool:
        return self.outcome == ValidationOutcome.REDEEMABLE


@dataclass(frozen=True)
class GeneratedLicense:
    """A freshly generated license and its plaintext key (never stored)."""

    plaintext_key: str
    license: License


class LicenseLifecycleManager:
    """
    Domain service owning license state transitions.

    Expiry is evaluated lazily: every read that surfaces a license runs
    ``check_expiry`` and there is no background sweeper. The read that
    writes the expired state publishes ``LicenseExpired`` on ``event_bus``.
    """

    MAX_GENERATION_ATTEMPTS = 3

    def __init__(
        self,
        repository: LicenseRepository,
        codec: LicenseKeyCodec,
        clock: Callable[[], datetime] = utc_now,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize manager with its repository, key codec, clock and event bus."""
        self.repository = repository
        self.codec = codec
        self.clock = clock
        self.event_bus = event_bus

    async def generate(
        self,
        kind: LicenseKind,
        max_users_override: Optional[int] = None,
        notes: str = "",
    ) -> GeneratedLicense:
        """
        Generate and persist a new pending license.

        Args:
            kind: License kind
            max_users_override: Explicit user cap (kind preset otherwise)
            notes: Free text notes

        Returns:
            GeneratedLicense carrying the plaintext key

        Raises:
            InternalServiceError: If no unique key could be allocated
        """
        for attempt in range(1, self.MAX_GENERATION_ATTEMPTS + 1):
            plaintext_key = self.codec.generate()
            license = License.generate(
                kind=kind,
                key_digest=self.codec.digest(plaintext_key),
                max_users_override=max_users_override,
                notes=notes,
                current_time=self.clock(),
            )
            try:
                saved = await self.repository.save(license)
            except DuplicateLicenseKeyError:
                logger.warning(
                    "License key digest collision on attempt %s, regenerating", attempt
                )
                continue
            logger.info(
                "Generated %s license %s (max_users=%s)", kind.value, saved.id, saved.max_users
            )
            return GeneratedLicense(plaintext_key=plaintext_key, license=saved)

        raise InternalServiceError("Could not allocate a unique license key")

    async def lookup(self, plaintext_key: str) -> Optional[License]:
        """
        Find the license for a plaintext key.

        Args:
            plaintext_key: Key as typed by the user

        Returns:
            License entity (expiry applied) or None if not found
        """
        license = await self.repository.find_by_key_digest(self.codec.digest(plaintext_key))
        if license is None:
            return None
        return await self.check_expiry(license)

    async def get(self, license_id: uuid.UUID) -> License:
        """
        Load a license by ID with expiry applied.

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.find(license_id)
        if license is None:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return license

    async def find(self, license_id: uuid.UUID) -> Optional[License]:
        """Load a license by ID with expiry applied, or None if it does not exist."""
        license = await self.repository.find_by_id(license_id)
        if license is None:
            return None
        return await self.check_expiry(license)

    async def find_active_for_tenant(self, tenant_name: str) -> Optional[License]:
        """
        Find the license a tenant currently runs on.

        The result has expiry applied, so it may come back expired.
        """
        license = await self.repository.find_active_for_tenant(tenant_name)
        if license is None:
            return None
        return await self.check_expiry(license)

    async def check_expiry(self, license: License) -> License:
        """
        Apply lazy expiry to a license that was just read.

        The write-back is best-effort: if it fails the caller still
        receives the license in expired state. Only the call whose write
        moves the stored row to expired publishes ``LicenseExpired``.

        Args:
            license: License as read from storage

        Returns:
            The same license, or an expired copy if its term ran out
        """
        if license.state == LicenseState.EXPIRED or not license.is_expired(self.clock()):
            return license

        expired = license.mark_expired()
        try:
            transitioned = await self.repository.mark_expired(license.id)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Error marking license %s as expired: %s", license.id, e, exc_info=True
            )
            return expired

        if transitioned:
            logger.info("License %s marked as expired", license.id)
            if self.event_bus is not None:
                await self.event_bus.publish(
                    LicenseExpired(aggregate_id=str(license.id), license_id=license.id)
                )
        return expired

    async def validate(self, plaintext_key: str) -> ValidationResult:
        """
        Classify a plaintext key.

        Exactly one outcome is returned; expiry is checked before state.

        Args:
            plaintext_key: Key as typed by the user

        Returns:
            ValidationResult
        """
        license = await self.lookup(plaintext_key)
        if license is None:
            return ValidationResult(outcome=ValidationOutcome.NOT_FOUND)
        if license.state == LicenseState.EXPIRED:
            return ValidationResult(outcome=ValidationOutcome.EXPIRED, license=license)
        if license.state == LicenseState.PENDING:
            return ValidationResult(outcome=ValidationOutcome.REDEEMABLE, license=license)
        if license.state == LicenseState.ACTIVE:
            return ValidationResult(outcome=ValidationOutcome.ALREADY_REDEEMED, license=license)
        return ValidationResult(outcome=ValidationOutcome.REVOKED, license=license)

    async def revoke(self, license_id: uuid.UUID) -> License:
        """
        Revoke a pending license.

        Args:
            license_id: License UUID

        Returns:
            Revoked License entity

        Raises:
            LicenseNotFoundError: If license not found
            LicenseNotRevocableError: If license is not pending
        """
        license = await self.get(license_id)
        revoked = license.revoke()

        if not await self.repository.revoke_if_pending(license.id):
            # Redeemed or revoked between our read and the write.
            raise LicenseNotRevocableError(f"License {license_id} is no longer pending")

        logger.info("Revoked license %s", license_id)
        return revoked
