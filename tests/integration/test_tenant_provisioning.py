"""
Integration tests for license redemption and user-limit enforcement.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from prometheus_client import REGISTRY

from core.domain.exceptions import (
    InvalidLicenseKeyError,
    LicenseNotRedeemableError,
    TenantNameTakenError,
    UserLimitReachedError,
)
from core.domain.value_objects import LicenseKind, LicenseState
from licenses.domain.license import utc_now
from licenses.domain.services import ValidationOutcome
from licenses.infrastructure.models import License as LicenseModel
from tenants.domain.tenant import Tenant
from tenants.infrastructure.models import ProfessionalUser as ProfessionalUserModel
from tenants.infrastructure.models import Tenant as TenantModel


@pytest.mark.django_db
@pytest.mark.integration
class TestTenantProvisioning:
    """End-to-end provisioning against the database."""

    def test_basic_license_allows_three_users(self, registered_tenant, provisioning_service):
        """Test a basic tenant takes three users and refuses the fourth."""
        registered_tenant(name="ClinicA", kind=LicenseKind.BASIC)
        add_user = async_to_sync(provisioning_service.add_professional_user)

        for username in ("ana", "bob", "cid"):
            add_user("ClinicA", username, "Real Name", "pw1234")

        with pytest.raises(UserLimitReachedError):
            add_user("ClinicA", "dan", "Real Name", "pw1234")
        assert ProfessionalUserModel.objects.filter(tenant_id="ClinicA").count() == 3
        assert async_to_sync(provisioning_service.can_add_user)("ClinicA") is False

    def test_key_redeems_once(self, generate_license, provisioning_service):
        """Test a second redemption of a key is rejected and creates nothing."""
        generated = generate_license()
        register = async_to_sync(provisioning_service.register_tenant)
        register("ClinicA", "pw123456", generated.plaintext_key)

        with pytest.raises(LicenseNotRedeemableError):
            register("ClinicB", "pw123456", generated.plaintext_key)

        assert list(TenantModel.objects.values_list("name", flat=True)) == ["ClinicA"]
        license = LicenseModel.objects.get(id=generated.license.id)
        assert license.state == "active"
        assert license.tenant_id == "ClinicA"

    def test_unknown_key(self, provisioning_service, db):
        """Test an unknown key leaves no tenant behind."""
        with pytest.raises(InvalidLicenseKeyError):
            async_to_sync(provisioning_service.register_tenant)("ClinicA", "pw123456", "NO-KEY")
        assert not TenantModel.objects.exists()

    def test_name_taken_keeps_second_key(self, generate_license, provisioning_service):
        """Test a taken name rolls back and the key stays redeemable."""
        first = generate_license()
        second = generate_license(kind=LicenseKind.PRO)
        register = async_to_sync(provisioning_service.register_tenant)
        register("ClinicA", "pw123456", first.plaintext_key)

        with pytest.raises(TenantNameTakenError):
            register("ClinicA", "pw123456", second.plaintext_key)

        validation = async_to_sync(provisioning_service.lifecycle_manager.validate)(
            second.plaintext_key
        )
        assert validation.outcome == ValidationOutcome.REDEEMABLE

        result = register("ClinicB", "pw123456", second.plaintext_key)
        assert result.license.kind == LicenseKind.PRO

    def test_revoked_key(self, generate_license, provisioning_service):
        """Test a revoked key cannot provision a tenant."""
        generated = generate_license()
        async_to_sync(provisioning_service.lifecycle_manager.revoke)(generated.license.id)

        with pytest.raises(LicenseNotRedeemableError):
            async_to_sync(provisioning_service.register_tenant)(
                "ClinicA", "pw123456", generated.plaintext_key
            )
        assert not TenantModel.objects.exists()

    def test_expired_key(self, generate_license, provisioning_service):
        """Test an expired key cannot provision a tenant."""
        generated = generate_license()
        past = utc_now() - timedelta(days=400)
        LicenseModel.objects.filter(id=generated.license.id).update(
            activated_at=past, expires_at=past + timedelta(days=365)
        )

        with pytest.raises(LicenseNotRedeemableError):
            async_to_sync(provisioning_service.register_tenant)(
                "ClinicA", "pw123456", generated.plaintext_key
            )
        assert LicenseModel.objects.get(id=generated.license.id).state == "expired"

    def test_custom_license_is_unlimited(self, registered_tenant, provisioning_service):
        """Test a custom license without cap admits any number of users."""
        registered_tenant(name="ClinicA", kind=LicenseKind.CUSTOM)
        add_user = async_to_sync(provisioning_service.add_professional_user)

        for index in range(15):
            add_user("ClinicA", f"user{index}", "Real Name", "pw1234")

        limit = async_to_sync(provisioning_service.effective_user_limit)("ClinicA")
        assert limit.is_unlimited

    def test_max_users_override(self, registered_tenant, provisioning_service):
        """Test the generated max users override is the tenant limit."""
        registered_tenant(name="ClinicA", kind=LicenseKind.BASIC, max_users=1)
        add_user = async_to_sync(provisioning_service.add_professional_user)
        add_user("ClinicA", "ana", "Real Name", "pw1234")

        with pytest.raises(UserLimitReachedError):
            add_user("ClinicA", "bob", "Real Name", "pw1234")

    def test_legacy_tenant_limit(self, tenant_repository, provisioning_service, db):
        """Test tenants without a license use their recorded limit."""
        async_to_sync(tenant_repository.create_legacy)(
            Tenant.create(name="Legacy", password_digest="digest", legacy_user_limit=1)
        )
        add_user = async_to_sync(provisioning_service.add_professional_user)
        add_user("Legacy", "ana", "Real Name", "pw1234")

        with pytest.raises(UserLimitReachedError):
            add_user("Legacy", "bob", "Real Name", "pw1234")

    def test_password_is_hashed(self, registered_tenant, provisioning_service):
        """Test only password digests are stored."""
        registered_tenant(name="ClinicA", password="pw123456")

        stored = TenantModel.objects.get(name="ClinicA").password_digest
        assert stored != "pw123456"
        tenant = async_to_sync(provisioning_service.authenticate_tenant)("ClinicA", "pw123456")
        assert tenant.name == "ClinicA"


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseLifecycle:
    """Lifecycle manager against the database."""

    def test_validate_outcomes(self, generate_license, lifecycle_manager):
        """Test each stored state maps to its validation outcome."""
        validate = async_to_sync(lifecycle_manager.validate)
        pending = generate_license()
        revoked = generate_license()
        async_to_sync(lifecycle_manager.revoke)(revoked.license.id)

        assert validate(pending.plaintext_key).outcome == ValidationOutcome.REDEEMABLE
        assert validate(revoked.plaintext_key).outcome == ValidationOutcome.REVOKED
        assert validate("UNKNOWN-KEY").outcome == ValidationOutcome.NOT_FOUND

    def test_active_then_expired(self, generate_license, provisioning_service, lifecycle_manager):
        """Test a redeemed key reports redeemed until its term runs out."""
        generated = generate_license()
        async_to_sync(provisioning_service.register_tenant)(
            "ClinicA", "pw123456", generated.plaintext_key
        )
        validate = async_to_sync(lifecycle_manager.validate)
        assert validate(generated.plaintext_key).outcome == ValidationOutcome.ALREADY_REDEEMED

        past = utc_now() - timedelta(days=1)
        LicenseModel.objects.filter(id=generated.license.id).update(expires_at=past)

        result = validate(generated.plaintext_key)
        assert result.outcome == ValidationOutcome.EXPIRED
        assert result.license.state == LicenseState.EXPIRED
        assert LicenseModel.objects.get(id=generated.license.id).state == "expired"

    def test_expired_license_still_limits(self, registered_tenant, provisioning_service):
        """Test an expired license keeps supplying the tenant limit."""
        result = registered_tenant(name="ClinicA", kind=LicenseKind.MEDIUM)
        LicenseModel.objects.filter(id=result.license.id).update(state="expired")

        limit = async_to_sync(provisioning_service.effective_user_limit)("ClinicA")

        assert limit.maximum == 7

    def test_expiry_on_tenant_read_is_counted(
        self, registered_tenant, provisioning_service, lifecycle_manager
    ):
        """Test expiry found while resolving a tenant limit is published once."""
        result = registered_tenant(name="ClinicA", kind=LicenseKind.BASIC)
        past = utc_now() - timedelta(days=1)
        LicenseModel.objects.filter(id=result.license.id).update(expires_at=past)
        before = REGISTRY.get_sample_value("licenses_expired_total") or 0.0

        async_to_sync(provisioning_service.effective_user_limit)("ClinicA")
        async_to_sync(lifecycle_manager.get)(result.license.id)

        assert LicenseModel.objects.get(id=result.license.id).state == "expired"
        assert REGISTRY.get_sample_value("licenses_expired_total") == before + 1
