"""
Unit tests for LicenseLifecycleManager.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.events import EventBus
from core.domain.exceptions import (
    DuplicateLicenseKeyError,
    InternalServiceError,
    LicenseNotFoundError,
    LicenseNotRevocableError,
)
from core.domain.value_objects import LicenseKind, LicenseState
from licenses.domain.events import LicenseExpired
from licenses.domain.license_key import LicenseKeyCodec
from licenses.domain.services import LicenseLifecycleManager, ValidationOutcome
from licenses.ports.license_repository import LicenseRepository

NOW = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


class InMemoryLicenseRepository(LicenseRepository):
    """Dictionary backed repository for unit tests."""

    def __init__(self):
        self.licenses = {}
        self.duplicates_left = 0
        self.fail_mark_expired = False

    async def save(self, license):
        if self.duplicates_left:
            self.duplicates_left -= 1
            raise DuplicateLicenseKeyError()
        self.licenses[license.id] = license
        return license

    async def find_by_id(self, license_id):
        return self.licenses.get(license_id)

    async def find_by_key_digest(self, key_digest):
        for license in self.licenses.values():
            if license.key_digest == key_digest:
                return license
        return None

    async def find_active_for_tenant(self, tenant_id):
        for license in self.licenses.values():
            if license.tenant_id == tenant_id and license.state == LicenseState.ACTIVE:
                return license
        return None

    async def mark_expired(self, license_id):
        if self.fail_mark_expired:
            raise RuntimeError("storage unavailable")
        license = self.licenses[license_id]
        self.licenses[license_id] = license.mark_expired()
        return license.state != LicenseState.EXPIRED

    async def revoke_if_pending(self, license_id):
        license = self.licenses.get(license_id)
        if license is None or license.state != LicenseState.PENDING:
            return False
        self.licenses[license_id] = license.revoke()
        return True


class Clock:
    """Settable clock."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class RecordingEventBus(EventBus):
    """Keeps published events in order."""

    def __init__(self):
        self.events = []

    async def publish(self, event):
        self.events.append(event)

    def subscribe(self, event_type, handler):
        pass


@pytest.fixture
def repository():
    return InMemoryLicenseRepository()


@pytest.fixture
def clock():
    return Clock(NOW)


@pytest.fixture
def bus():
    return RecordingEventBus()


@pytest.fixture
def manager(repository, clock, bus):
    return LicenseLifecycleManager(
        repository, LicenseKeyCodec("unit-secret"), clock=clock, event_bus=bus
    )


class TestGenerate:
    """Tests for license generation."""

    @pytest.mark.asyncio
    async def test_generate_stores_digest_only(self, manager, repository):
        """Test the plaintext key is returned but never stored."""
        generated = await manager.generate(LicenseKind.MEDIUM)

        stored = repository.licenses[generated.license.id]
        assert stored.state == LicenseState.PENDING
        assert stored.max_users == 7
        assert stored.key_digest == manager.codec.digest(generated.plaintext_key)
        assert stored.key_digest != generated.plaintext_key
        assert stored.created_at == NOW

    @pytest.mark.asyncio
    async def test_generate_retries_on_collision(self, manager, repository):
        """Test a digest collision triggers a new key."""
        repository.duplicates_left = 2

        generated = await manager.generate(LicenseKind.PRO, max_users_override=12)

        assert generated.license.max_users == 12
        assert len(repository.licenses) == 1

    @pytest.mark.asyncio
    async def test_generate_gives_up(self, manager, repository):
        """Test generation fails after repeated collisions."""
        repository.duplicates_left = LicenseLifecycleManager.MAX_GENERATION_ATTEMPTS

        with pytest.raises(InternalServiceError):
            await manager.generate(LicenseKind.BASIC)
        assert repository.licenses == {}


class TestValidate:
    """Tests for key validation."""

    @pytest.mark.asyncio
    async def test_unknown_key(self, manager):
        """Test an unknown key is not found."""
        result = await manager.validate("DEAD-BEEF-0000")

        assert result.outcome == ValidationOutcome.NOT_FOUND
        assert result.license is None

    @pytest.mark.asyncio
    async def test_pending_is_redeemable(self, manager):
        """Test a pending key is redeemable, including surrounding whitespace."""
        generated = await manager.generate(LicenseKind.BASIC)

        result = await manager.validate(f"  {generated.plaintext_key} ")

        assert result.outcome == ValidationOutcome.REDEEMABLE
        assert result.is_redeemable

    @pytest.mark.asyncio
    async def test_active_is_already_redeemed(self, manager, repository):
        """Test an active key is already redeemed."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)

        result = await manager.validate(generated.plaintext_key)

        assert result.outcome == ValidationOutcome.ALREADY_REDEEMED

    @pytest.mark.asyncio
    async def test_revoked(self, manager):
        """Test a revoked key reports revoked."""
        generated = await manager.generate(LicenseKind.BASIC)
        await manager.revoke(generated.license.id)

        result = await manager.validate(generated.plaintext_key)

        assert result.outcome == ValidationOutcome.REVOKED

    @pytest.mark.asyncio
    async def test_expiry_checked_before_state(self, manager, repository, clock):
        """Test an active license past its term validates as expired and is persisted."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        clock.now = NOW + timedelta(days=366)

        result = await manager.validate(generated.plaintext_key)

        assert result.outcome == ValidationOutcome.EXPIRED
        assert repository.licenses[license.id].state == LicenseState.EXPIRED

    @pytest.mark.asyncio
    async def test_expired_even_if_write_back_fails(self, manager, repository, clock):
        """Test a failed expiry write still reports the license as expired."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        repository.fail_mark_expired = True
        clock.now = NOW + timedelta(days=400)

        result = await manager.validate(generated.plaintext_key)

        assert result.outcome == ValidationOutcome.EXPIRED
        assert result.license.state == LicenseState.EXPIRED
        assert repository.licenses[license.id].state == LicenseState.ACTIVE


class TestRevoke:
    """Tests for license revocation."""

    @pytest.mark.asyncio
    async def test_revoke_pending(self, manager, repository):
        """Test revoking a pending license."""
        generated = await manager.generate(LicenseKind.BASIC)

        revoked = await manager.revoke(generated.license.id)

        assert revoked.state == LicenseState.REVOKED
        assert repository.licenses[revoked.id].state == LicenseState.REVOKED

    @pytest.mark.asyncio
    async def test_revoke_unknown(self, manager):
        """Test revoking an unknown license."""
        with pytest.raises(LicenseNotFoundError):
            await manager.revoke(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_revoke_active(self, manager, repository):
        """Test an active license cannot be revoked."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)

        with pytest.raises(LicenseNotRevocableError):
            await manager.revoke(license.id)

    @pytest.mark.asyncio
    async def test_revoke_loses_race(self, manager, repository):
        """Test a license redeemed between read and write is not revoked."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license

        async def redeemed_meanwhile(license_id):
            repository.licenses[license_id] = license.redeem("ClinicA", current_time=NOW)
            return False

        repository.revoke_if_pending = redeemed_meanwhile

        with pytest.raises(LicenseNotRevocableError):
            await manager.revoke(license.id)
        assert repository.licenses[license.id].state == LicenseState.ACTIVE


class TestGet:
    """Tests for license lookup by ID."""

    @pytest.mark.asyncio
    async def test_get_applies_expiry(self, manager, repository, clock):
        """Test reading a license past its term returns it expired."""
        generated = await manager.generate(LicenseKind.PRO)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        clock.now = NOW + timedelta(days=800)

        fetched = await manager.get(license.id)

        assert fetched.state == LicenseState.EXPIRED

    @pytest.mark.asyncio
    async def test_find_missing(self, manager):
        """Test an unknown ID finds nothing."""
        assert await manager.find(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_find_active_for_tenant(self, manager, repository, clock):
        """Test the tenant's license is returned with expiry applied."""
        generated = await manager.generate(LicenseKind.MEDIUM)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)

        current = await manager.find_active_for_tenant("ClinicA")
        assert current.state == LicenseState.ACTIVE
        assert await manager.find_active_for_tenant("ClinicB") is None

        clock.now = NOW + timedelta(days=366)
        assert (await manager.find_active_for_tenant("ClinicA")).state == LicenseState.EXPIRED


class TestExpiryEvents:
    """Tests for LicenseExpired publication."""

    @pytest.mark.asyncio
    async def test_published_once_per_transition(self, manager, repository, clock, bus):
        """Test only the read that records the expiry publishes it."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        clock.now = NOW + timedelta(days=366)

        await manager.get(license.id)
        await manager.validate(generated.plaintext_key)
        await manager.get(license.id)

        assert len(bus.events) == 1
        assert isinstance(bus.events[0], LicenseExpired)
        assert bus.events[0].license_id == license.id

    @pytest.mark.asyncio
    async def test_published_from_tenant_lookup(self, manager, repository, clock, bus):
        """Test expiry found through the tenant's license is published."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        clock.now = NOW + timedelta(days=366)

        await manager.find_active_for_tenant("ClinicA")

        assert [event.license_id for event in bus.events] == [license.id]

    @pytest.mark.asyncio
    async def test_not_published_when_write_fails(self, manager, repository, clock, bus):
        """Test nothing is published if the expired state was not recorded."""
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        repository.fail_mark_expired = True
        clock.now = NOW + timedelta(days=366)

        await manager.get(license.id)

        assert bus.events == []

    @pytest.mark.asyncio
    async def test_without_bus(self, repository, clock):
        """Test expiry works when no bus is wired."""
        manager = LicenseLifecycleManager(repository, LicenseKeyCodec("unit-secret"), clock=clock)
        generated = await manager.generate(LicenseKind.BASIC)
        license = generated.license
        repository.licenses[license.id] = license.redeem("ClinicA", current_time=NOW)
        clock.now = NOW + timedelta(days=366)

        assert (await manager.get(license.id)).state == LicenseState.EXPIRED
