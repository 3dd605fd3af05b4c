"""
Django implementation of TenantRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import LicenseNotRedeemableError, TenantNameTakenError
from core.domain.value_objects import LicenseState
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from tenants.domain.tenant import Tenant
from tenants.infrastructure.models import Tenant as TenantModel
from tenants.ports.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


class DjangoTenantRepository(TenantRepository):
    """Django ORM implementation of TenantRepository."""

    def _to_domain(self, model: TenantModel) -> Tenant:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Tenant model

        Returns:
            Tenant domain entity
        """
        return Tenant(
            name=model.name,
            password_digest=model.password_digest,
            legacy_user_limit=model.legacy_user_limit,
            license_id=model.license_id,
        )

    def _insert(self, tenant: Tenant) -> TenantModel:
        # force_insert so an existing name raises instead of being overwritten
        model = TenantModel(
            name=tenant.name,
            password_digest=tenant.password_digest,
            legacy_user_limit=tenant.legacy_user_limit,
            license_id=tenant.license_id,
        )
        model.save(force_insert=True)
        return model

    @sync_to_async
    def find_by_name(self, name: str) -> Optional[Tenant]:
        """
        Find a tenant by name.

        Args:
            name: Tenant name

        Returns:
            Tenant entity or None if not found
        """
        model = TenantModel.objects.filter(name=name).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def register_with_license(self, tenant: Tenant, license: License) -> Tenant:
        """
        Insert a tenant and activate its license in one transaction.

        The license write is a compare-and-set on the pending state, so
        of two concurrent redemptions of one license only one commits.

        Raises:
            TenantNameTakenError: If the tenant name already exists
            LicenseNotRedeemableError: If the license is no longer pending
        """
        try:
            with transaction.atomic():
                model = self._insert(tenant)
                activated = LicenseModel.objects.filter(
                    id=license.id, state=LicenseState.PENDING.value
                ).update(
                    state=LicenseState.ACTIVE.value,
                    activated_at=license.activated_at,
                    expires_at=license.expires_at,
                    tenant_id=tenant.name,
                )
                if activated != 1:
                    raise LicenseNotRedeemableError(
                        f"License {license.id} was redeemed or revoked concurrently"
                    )
        except IntegrityError as e:
            logger.warning("Tenant name %s already registered", tenant.name)
            raise TenantNameTakenError(f"Tenant name '{tenant.name}' is already taken") from e
        return self._to_domain(model)

    @sync_to_async
    def create_legacy(self, tenant: Tenant) -> Tenant:
        """
        Insert a tenant without redeeming a license.

        Raises:
            TenantNameTakenError: If the tenant name already exists
        """
        try:
            with transaction.atomic():
                model = self._insert(tenant)
        except IntegrityError as e:
            raise TenantNameTakenError(f"Tenant name '{tenant.name}' is already taken") from e
        return self._to_domain(model)
