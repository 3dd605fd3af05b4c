"""
Wiring of repositories and domain services for the API views.

Repositories are stateless and shared; services are built per call so
that settings overrides (secret, admin user) take effect immediately.
"""

from django.conf import settings

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

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_tenant_repo = DjangoTenantRepository()
_user_repo = DjangoProfessionalUserRepository()
_password_hasher = DjangoPasswordHasher()


def get_lifecycle_manager() -> LicenseLifecycleManager:
    """Build the license lifecycle manager keyed by LICENSE_SECRET."""
    return LicenseLifecycleManager(
        repository=_license_repo,
        codec=LicenseKeyCodec(settings.LICENSE_SECRET),
        event_bus=event_bus,
    )


def get_provisioning_service() -> TenantProvisioningService:
    """Build the tenant provisioning service."""
    return TenantProvisioningService(
        tenant_repository=_tenant_repo,
        user_repository=_user_repo,
        lifecycle_manager=get_lifecycle_manager(),
        password_hasher=_password_hasher,
    )
