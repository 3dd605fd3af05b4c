"""
Integration tests for repository implementations.
"""

import uuid

import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import (
    DuplicateLicenseKeyError,
    LicenseNotRedeemableError,
    ProfessionalUserExistsError,
    TenantNameTakenError,
    TenantNotFoundError,
    UserLimitReachedError,
)
from core.domain.value_objects import LicenseKind, LicenseState, UserLimit
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from tenants.domain.professional_user import ProfessionalUser
from tenants.domain.tenant import Tenant
from tenants.infrastructure.models import Tenant as TenantModel


def pending_license(digest_char="c", kind=LicenseKind.BASIC):
    return License.generate(kind=kind, key_digest=digest_char * 64)


def professional(username, tenant_name="ClinicA"):
    return ProfessionalUser(
        username=username,
        tenant_name=tenant_name,
        real_name="Real Name",
        password_digest="digest",
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_save_and_find(self, license_repository):
        """Test saving and finding a license by ID and digest."""
        license = pending_license()

        async_to_sync(license_repository.save)(license)

        by_id = async_to_sync(license_repository.find_by_id)(license.id)
        by_digest = async_to_sync(license_repository.find_by_key_digest)("c" * 64)
        assert by_id == by_digest
        assert by_id.kind == LicenseKind.BASIC
        assert by_id.state == LicenseState.PENDING
        assert by_id.max_users == 3

    def test_find_missing(self, license_repository):
        """Test missing licenses return None."""
        assert async_to_sync(license_repository.find_by_id)(uuid.uuid4()) is None
        assert async_to_sync(license_repository.find_by_key_digest)("0" * 64) is None

    def test_duplicate_digest(self, license_repository):
        """Test a second license with the same digest is rejected."""
        async_to_sync(license_repository.save)(pending_license("d"))

        with pytest.raises(DuplicateLicenseKeyError):
            async_to_sync(license_repository.save)(pending_license("d"))
        assert LicenseModel.objects.count() == 1

    def test_save_updates_existing(self, license_repository):
        """Test saving an existing license updates it in place."""
        license = pending_license()
        async_to_sync(license_repository.save)(license)

        async_to_sync(license_repository.save)(license.revoke())

        assert LicenseModel.objects.get(id=license.id).state == "revoked"

    def test_revoke_if_pending(self, license_repository):
        """Test the revoke compare-and-set only succeeds once."""
        license = pending_license()
        async_to_sync(license_repository.save)(license)

        assert async_to_sync(license_repository.revoke_if_pending)(license.id) is True
        assert async_to_sync(license_repository.revoke_if_pending)(license.id) is False

    def test_mark_expired(self, license_repository):
        """Test marking a license expired is recorded once."""
        license = pending_license()
        async_to_sync(license_repository.save)(license)

        assert async_to_sync(license_repository.mark_expired)(license.id) is True
        assert async_to_sync(license_repository.mark_expired)(license.id) is False


@pytest.mark.django_db
@pytest.mark.integration
class TestTenantRepository:
    """Integration tests for TenantRepository."""

    def test_register_with_license(self, license_repository, tenant_repository):
        """Test the tenant is created and the license activated together."""
        license = pending_license()
        async_to_sync(license_repository.save)(license)
        redeemed = license.redeem("ClinicA")
        tenant = Tenant.create(name="ClinicA", password_digest="digest", license=redeemed)

        async_to_sync(tenant_repository.register_with_license)(tenant, redeemed)

        stored = async_to_sync(license_repository.find_by_id)(license.id)
        assert stored.state == LicenseState.ACTIVE
        assert stored.tenant_id == "ClinicA"
        assert stored.expires_at is not None
        found = async_to_sync(tenant_repository.find_by_name)("ClinicA")
        assert found.license_id == license.id
        assert async_to_sync(license_repository.find_active_for_tenant)("ClinicA") == stored

    def test_stale_license_creates_no_tenant(self, license_repository, tenant_repository):
        """Test a license that stopped being pending rolls the tenant back."""
        license = pending_license()
        async_to_sync(license_repository.save)(license)
        redeemed = license.redeem("ClinicA")
        async_to_sync(license_repository.revoke_if_pending)(license.id)
        tenant = Tenant.create(name="ClinicA", password_digest="digest", license=redeemed)

        with pytest.raises(LicenseNotRedeemableError):
            async_to_sync(tenant_repository.register_with_license)(tenant, redeemed)

        assert not TenantModel.objects.filter(name="ClinicA").exists()
        assert LicenseModel.objects.get(id=license.id).state == "revoked"

    def test_name_taken_keeps_license_pending(self, license_repository, tenant_repository):
        """Test a duplicate name leaves the license untouched."""
        async_to_sync(tenant_repository.create_legacy)(
            Tenant.create(name="ClinicA", password_digest="digest")
        )
        license = pending_license()
        async_to_sync(license_repository.save)(license)
        redeemed = license.redeem("ClinicA")
        tenant = Tenant.create(name="ClinicA", password_digest="other", license=redeemed)

        with pytest.raises(TenantNameTakenError):
            async_to_sync(tenant_repository.register_with_license)(tenant, redeemed)

        assert LicenseModel.objects.get(id=license.id).state == "pending"
        assert TenantModel.objects.get(name="ClinicA").password_digest == "digest"

    def test_create_legacy_duplicate(self, tenant_repository):
        """Test legacy tenants also have unique names."""
        tenant = Tenant.create(name="admin", password_digest="digest", legacy_user_limit=2)
        async_to_sync(tenant_repository.create_legacy)(tenant)

        with pytest.raises(TenantNameTakenError):
            async_to_sync(tenant_repository.create_legacy)(tenant)


@pytest.mark.django_db
@pytest.mark.integration
class TestProfessionalUserRepository:
    """Integration tests for ProfessionalUserRepository."""

    @pytest.fixture
    def clinic(self, tenant_repository):
        return async_to_sync(tenant_repository.create_legacy)(
            Tenant.create(name="ClinicA", password_digest="digest", legacy_user_limit=2)
        )

    def test_add_and_list(self, clinic, user_repository):
        """Test users are listed by username."""
        add = async_to_sync(user_repository.add_within_limit)
        add(professional("zoe"), UserLimit(2))
        add(professional("ana"), UserLimit(2))

        users = async_to_sync(user_repository.list_for_tenant)("ClinicA")

        assert [u.username for u in users] == ["ana", "zoe"]
        assert async_to_sync(user_repository.count_for_tenant)("ClinicA") == 2

    def test_limit_enforced(self, clinic, user_repository):
        """Test no user is inserted past the limit."""
        add = async_to_sync(user_repository.add_within_limit)
        add(professional("ana"), UserLimit(2))
        add(professional("bob"), UserLimit(2))

        with pytest.raises(UserLimitReachedError):
            add(professional("eve"), UserLimit(2))
        assert async_to_sync(user_repository.count_for_tenant)("ClinicA") == 2

    def test_duplicate_username(self, clinic, user_repository):
        """Test a username cannot repeat within a tenant."""
        add = async_to_sync(user_repository.add_within_limit)
        add(professional("ana"), UserLimit.unlimited())

        with pytest.raises(ProfessionalUserExistsError):
            add(professional("ana"), UserLimit.unlimited())

    def test_unknown_tenant(self, user_repository):
        """Test users need an existing tenant."""
        with pytest.raises(TenantNotFoundError):
            async_to_sync(user_repository.add_within_limit)(
                professional("ana", tenant_name="Ghost"), UserLimit.unlimited()
            )

    def test_find_and_update_password(self, clinic, user_repository):
        """Test finding users and resetting their password."""
        async_to_sync(user_repository.add_within_limit)(professional("ana"), UserLimit(2))

        assert async_to_sync(user_repository.find)("ClinicA", "ana").real_name == "Real Name"
        assert async_to_sync(user_repository.find)("ClinicB", "ana") is None
        assert async_to_sync(user_repository.find_by_username)("ana").tenant_name == "ClinicA"
        assert async_to_sync(user_repository.update_password)("ClinicA", "ana", "new") is True
        assert async_to_sync(user_repository.find)("ClinicA", "ana").password_digest == "new"
        assert async_to_sync(user_repository.update_password)("ClinicA", "bob", "new") is False
