"""
Pytest configuration and shared fixtures.
"""

import pytest
from asgiref.sync import async_to_sync

from core.domain.value_objects import LicenseKind
from core.infrastructure.event_handlers import register_event_handlers
from core.infrastructure.events import event_bus
from licenses.domain.license_key import LicenseKeyCodec
from licenses.domain.services import LicenseLifecycleManager
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from tenants.domain.services import TenantProvisioningService
from tenants.infrastructure.hashers import DjangoPasswordHasher
from tenants.infrastructure.repositories.django_professional_user_repository import (
    DjangoProfessionalUserRepository,
)
from tenants.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository

TEST_LICENSE_SECRET = "test-license-secret"
ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(autouse=True, scope="session")
def event_handlers():
    """Make sure audit and metrics handlers are subscribed."""
    register_event_handlers()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def tenant_repository():
    """Fixture for TenantRepository."""
    return DjangoTenantRepository()


@pytest.fixture
def user_repository():
    """Fixture for ProfessionalUserRepository."""
    return DjangoProfessionalUserRepository()


@pytest.fixture
def password_hasher():
    """Fixture for PasswordHasher."""
    return DjangoPasswordHasher()


@pytest.fixture
def codec():
    """Fixture for the license key codec."""
    return LicenseKeyCodec(TEST_LICENSE_SECRET)


@pytest.fixture
def lifecycle_manager(license_repository, codec):
    """Fixture for LicenseLifecycleManager backed by the database."""
    return LicenseLifecycleManager(
        repository=license_repository, codec=codec, event_bus=event_bus
    )


@pytest.fixture
def provisioning_service(tenant_repository, user_repository, lifecycle_manager, password_hasher):
    """Fixture for TenantProvisioningService backed by the database."""
    return TenantProvisioningService(
        tenant_repository=tenant_repository,
        user_repository=user_repository,
        lifecycle_manager=lifecycle_manager,
        password_hasher=password_hasher,
    )


@pytest.fixture
def generate_license(db, lifecycle_manager):
    """Factory fixture generating a pending license saved in database."""

    def _generate(kind=LicenseKind.BASIC, max_users=None, notes=""):
        return async_to_sync(lifecycle_manager.generate)(
            kind, max_users_override=max_users, notes=notes
        )

    return _generate


@pytest.fixture
def registered_tenant(generate_license, provisioning_service):
    """Factory fixture registering a tenant from a freshly generated license."""

    def _register(name="ClinicA", password="pw123456", kind=LicenseKind.BASIC, max_users=None):
        generated = generate_license(kind=kind, max_users=max_users)
        return async_to_sync(provisioning_service.register_tenant)(
            name, password, generated.plaintext_key
        )

    return _register


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_headers():
    """Headers accepted by AdminTokenMiddleware."""
    return {"HTTP_X_ADMIN_TOKEN": ADMIN_TOKEN}
