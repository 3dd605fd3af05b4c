"""
Django implementation of ProfessionalUserRepository port.
"""
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import (
    ProfessionalUserExistsError,
    TenantNotFoundError,
    UserLimitReachedError,
)
from core.domain.value_objects import UserLimit
from tenants.domain.professional_user import ProfessionalUser
from tenants.infrastructure.models import ProfessionalUser as ProfessionalUserModel
from tenants.infrastructure.models import Tenant as TenantModel
from tenants.ports.professional_user_repository import ProfessionalUserRepository


class DjangoProfessionalUserRepository(ProfessionalUserRepository):
    """Django ORM implementation of ProfessionalUserRepository."""

    def _to_domain(self, model: ProfessionalUserModel) -> ProfessionalUser:
        """
        Convert Django model to domain entity.

        Args:
            model: Django ProfessionalUser model

        Returns:
            ProfessionalUser domain entity
        """
        return ProfessionalUser(
            username=model.username,
            tenant_name=model.tenant_id,
            real_name=model.real_name,
            password_digest=model.password_digest,
        )

    @sync_to_async
    def find(self, tenant_name: str, username: str) -> Optional[ProfessionalUser]:
        model = ProfessionalUserModel.objects.filter(
            tenant_id=tenant_name, username=username
        ).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_username(self, username: str) -> Optional[ProfessionalUser]:
        model = ProfessionalUserModel.objects.filter(username=username).order_by("id").first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_for_tenant(self, tenant_name: str) -> List[ProfessionalUser]:
        models = ProfessionalUserModel.objects.filter(tenant_id=tenant_name).order_by("username")
        return [self._to_domain(m) for m in models]

    @sync_to_async
    def count_for_tenant(self, tenant_name: str) -> int:
        return ProfessionalUserModel.objects.filter(tenant_id=tenant_name).count()

    @sync_to_async
    def add_within_limit(self, user: ProfessionalUser, limit: UserLimit) -> ProfessionalUser:
        """
        Insert a user if the tenant is still under ``limit``.

        The tenant row is locked for the count and the insert, so concurrent
        additions cannot push the tenant past its limit.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            ProfessionalUserExistsError: If the username exists in the tenant
            UserLimitReachedError: If the tenant is at its limit
        """
        try:
            with transaction.atomic():
                tenant = (
                    TenantModel.objects.select_for_update().filter(name=user.tenant_name).first()
                )
                if tenant is None:
                    raise TenantNotFoundError(f"Tenant '{user.tenant_name}' not found")

                users = ProfessionalUserModel.objects.filter(tenant_id=user.tenant_name)
                if users.filter(username=user.username).exists():
                    raise ProfessionalUserExistsError(
                        f"User '{user.username}' already exists in tenant '{user.tenant_name}'"
                    )

                current = users.count()
                if not limit.allows(current):
                    raise UserLimitReachedError(
                        f"Tenant '{user.tenant_name}' reached its limit of {limit} users"
                    )

                model = ProfessionalUserModel.objects.create(
                    username=user.username,
                    tenant_id=user.tenant_name,
                    real_name=user.real_name,
                    password_digest=user.password_digest,
                )
        except IntegrityError as e:
            raise ProfessionalUserExistsError(
                f"User '{user.username}' already exists in tenant '{user.tenant_name}'"
            ) from e
        return self._to_domain(model)

    @sync_to_async
    def update_password(self, tenant_name: str, username: str, password_digest: str) -> bool:
        updated = ProfessionalUserModel.objects.filter(
            tenant_id=tenant_name, username=username
        ).update(password_digest=password_digest)
        return updated == 1
