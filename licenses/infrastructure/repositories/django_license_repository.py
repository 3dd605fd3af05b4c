"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import DuplicateLicenseKeyError
from core.domain.value_objects import LicenseKind, LicenseState
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            key_digest=model.key_digest,
            kind=LicenseKind(model.kind),
            max_users=model.max_users,
            state=LicenseState(model.state),
            created_at=model.created_at,
            activated_at=model.activated_at,
            expires_at=model.expires_at,
            tenant_id=model.tenant_id,
            notes=model.notes,
        )

    def _to_model(self, license: License) -> LicenseModel:
        """
        Convert domain entity to Django model.

        Args:
            license: License domain entity

        Returns:
            Django License model (unsaved)
        """
        return LicenseModel(
            id=license.id,
            key_digest=license.key_digest,
            kind=license.kind.value,
            max_users=license.max_users,
            state=license.state.value,
            created_at=license.created_at,
            activated_at=license.activated_at,
            expires_at=license.expires_at,
            tenant_id=license.tenant_id,
            notes=license.notes,
        )

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            DuplicateLicenseKeyError: If the key digest is already stored
        """
        model = self._to_model(license)
        # pylint: disable=protected-access
        model._state.adding = not LicenseModel.objects.filter(id=license.id).exists()
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError as e:
            if license.key_digest and (
                LicenseModel.objects.filter(key_digest=license.key_digest)
                .exclude(id=license.id)
                .exists()
            ):
                raise DuplicateLicenseKeyError() from e
            raise
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(id=license_id)
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_key_digest(self, key_digest: str) -> Optional[License]:
        """
        Find a license by key digest.

        Args:
            key_digest: Keyed digest of the license key

        Returns:
            License entity or None if not found
        """
        model = LicenseModel.objects.filter(key_digest=key_digest).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_active_for_tenant(self, tenant_id: str) -> Optional[License]:
        """
        Find the latest active license bound to a tenant.

        Args:
            tenant_id: Tenant name

        Returns:
            License entity or None
        """
        model = (
            LicenseModel.objects.filter(tenant_id=tenant_id, state=LicenseState.ACTIVE.value)
            .order_by("-activated_at", "-created_at")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def mark_expired(self, license_id: uuid.UUID) -> bool:
        """
        Record the expired state of a license.

        Args:
            license_id: License UUID

        Returns:
            True if a row changed state
        """
        updated = (
            LicenseModel.objects.filter(id=license_id)
            .exclude(state=LicenseState.EXPIRED.value)
            .update(state=LicenseState.EXPIRED.value)
        )
        return updated == 1

    @sync_to_async
    def revoke_if_pending(self, license_id: uuid.UUID) -> bool:
        """
        Atomically move a pending license to revoked.

        Args:
            license_id: License UUID

        Returns:
            True if the license was pending and is now revoked
        """
        updated = LicenseModel.objects.filter(
            id=license_id, state=LicenseState.PENDING.value
        ).update(state=LicenseState.REVOKED.value)
        return updated == 1
