"""
Tenant provisioning domain services.

Redemption of a license and creation of the tenant it provisions happen
in one unit of work owned by the tenant repository. This service decides
whether that unit may run and classifies its failures.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from django.db import DatabaseError

from core.domain.exceptions import (
    DomainException,
    InternalServiceError,
    InvalidCredentialsError,
    InvalidLicenseKeyError,
    LicenseNotRedeemableError,
    ProfessionalUserNotFoundError,
    TenantNotFoundError,
)
from core.domain.value_objects import LicenseState, UserLimit
from licenses.domain.license import License, utc_now
from licenses.domain.services import LicenseLifecycleManager
from tenants.domain.professional_user import ProfessionalUser
from tenants.domain.tenant import Tenant
from tenants.ports.password_hasher import PasswordHasher
from tenants.ports.professional_user_repository import ProfessionalUserRepository
from tenants.ports.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


def resolve_user_limit(tenant: Tenant, license: Optional[License]) -> UserLimit:
    """
    Resolve the effective user limit of a tenant.

    The license that provisioned the tenant wins when it still exists
    (a null ``max_users`` meaning unlimited); otherwise the legacy limit
    recorded on the tenant applies.

    Args:
        tenant: Tenant entity
        license: License referenced by ``tenant.license_id``, if found

    Returns:
        UserLimit value object
    """
    if tenant.license_id is not None and license is not None:
        return UserLimit(license.max_users)
    return UserLimit(tenant.legacy_user_limit)


@dataclass(frozen=True)
class RegistrationResult:
    """A newly registered tenant and the license it redeemed."""

    tenant: Tenant
    license: License


class TenantProvisioningService:
    """
    Domain service for tenant registration and user-limit enforcement.

    Recognized conditions surface as DomainException subclasses; storage
    failures are logged and downgraded to InternalServiceError.
    """

    def __init__(
        self,
        tenant_repository: TenantRepository,
        user_repository: ProfessionalUserRepository,
        lifecycle_manager: LicenseLifecycleManager,
        password_hasher: PasswordHasher,
        clock: Callable = utc_now,
    ):
        self.tenant_repository = tenant_repository
        self.user_repository = user_repository
        self.lifecycle_manager = lifecycle_manager
        self.password_hasher = password_hasher
        self.clock = clock

    async def register_tenant(
        self, name: str, password: str, plaintext_key: str
    ) -> RegistrationResult:
        """
        Redeem a license key and create the tenant it provisions.

        Args:
            name: Tenant name
            password: Plaintext password
            plaintext_key: License key as typed by the user

        Returns:
            RegistrationResult

        Raises:
            InvalidLicenseKeyError: If no license matches the key
            LicenseNotRedeemableError: If the license is not pending
            TenantNameTakenError: If the name is already registered
            InternalServiceError: On unexpected storage failures
        """
        try:
            license = await self.lifecycle_manager.lookup(plaintext_key)
            if license is None:
                raise InvalidLicenseKeyError()
            if license.state != LicenseState.PENDING:
                raise LicenseNotRedeemableError(
                    f"License is {license.state.value} and cannot be redeemed"
                )

            password_digest = await self.password_hasher.hash(password)
            redeemed = license.redeem(tenant_id=name, current_time=self.clock())
            tenant = Tenant.create(name=name, password_digest=password_digest, license=redeemed)
            saved = await self.tenant_repository.register_with_license(tenant, redeemed)
        except DomainException:
            raise
        except DatabaseError as e:
            logger.error("Database error registering tenant %s: %s", name, e, exc_info=True)
            raise InternalServiceError() from e

        logger.info(
            "Registered tenant %s with %s license %s", saved.name, redeemed.kind.value, redeemed.id
        )
        return RegistrationResult(tenant=saved, license=redeemed)

    async def get_tenant(self, tenant_name: str) -> Tenant:
        """
        Load a tenant by name.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        tenant = await self.tenant_repository.find_by_name(tenant_name)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant '{tenant_name}' not found")
        return tenant

    async def effective_user_limit(self, tenant_name: str) -> UserLimit:
        """
        Compute the effective user limit of a tenant.

        Always read from storage; nothing is cached between calls.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        tenant = await self.get_tenant(tenant_name)
        license = None
        if tenant.license_id is not None:
            license = await self.lifecycle_manager.find(tenant.license_id)
        return resolve_user_limit(tenant, license)

    async def can_add_user(self, tenant_name: str) -> bool:
        """True if the tenant may create one more professional user."""
        limit = await self.effective_user_limit(tenant_name)
        if limit.is_unlimited:
            return True
        count = await self.user_repository.count_for_tenant(tenant_name)
        return limit.allows(count)

    async def add_professional_user(
        self, tenant_name: str, username: str, real_name: str, password: str
    ) -> ProfessionalUser:
        """
        Create a professional user under a tenant.

        The limit is resolved first; the repository then re-counts and
        inserts in one transaction.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            ProfessionalUserExistsError: If the username exists in the tenant
            UserLimitReachedError: If the tenant is at its limit
        """
        try:
            limit = await self.effective_user_limit(tenant_name)
            password_digest = await self.password_hasher.hash(password)
            user = ProfessionalUser(
                username=username,
                tenant_name=tenant_name,
                real_name=real_name,
                password_digest=password_digest,
            )
            saved = await self.user_repository.add_within_limit(user, limit)
        except DomainException:
            raise
        except DatabaseError as e:
            logger.error(
                "Database error adding user %s to tenant %s: %s",
                username,
                tenant_name,
                e,
                exc_info=True,
            )
            raise InternalServiceError() from e

        logger.info("Added professional user %s to tenant %s", username, tenant_name)
        return saved

    async def list_professional_users(self, tenant_name: str) -> List[ProfessionalUser]:
        """
        List the professional users of a tenant.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        await self.get_tenant(tenant_name)
        return await self.user_repository.list_for_tenant(tenant_name)

    async def authenticate_tenant(self, name: str, password: str) -> Tenant:
        """
        Check a tenant's credentials.

        Raises:
            InvalidCredentialsError: If the name is unknown or the password is wrong
        """
        tenant = await self.tenant_repository.find_by_name(name)
        if tenant is None or not await self.password_hasher.verify(
            password, tenant.password_digest
        ):
            raise InvalidCredentialsError()
        return tenant

    async def authenticate_professional(
        self, username: str, password: str, tenant_name: Optional[str] = None
    ) -> ProfessionalUser:
        """
        Check a professional user's credentials.

        Without ``tenant_name`` the first user registered with the username
        is used.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        if tenant_name:
            user = await self.user_repository.find(tenant_name, username)
        else:
            user = await self.user_repository.find_by_username(username)
        if user is None or not await self.password_hasher.verify(password, user.password_digest):
            raise InvalidCredentialsError()
        return user

    async def change_professional_password(
        self, tenant_name: str, tenant_password: str, username: str, new_password: str
    ) -> None:
        """
        Let a tenant reset the password of one of its users.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            InvalidCredentialsError: If the tenant password is wrong
            ProfessionalUserNotFoundError: If the user is not in the tenant
        """
        tenant = await self.get_tenant(tenant_name)
        if not await self.password_hasher.verify(tenant_password, tenant.password_digest):
            raise InvalidCredentialsError("Invalid tenant credentials")

        password_digest = await self.password_hasher.hash(new_password)
        if not await self.user_repository.update_password(tenant_name, username, password_digest):
            raise ProfessionalUserNotFoundError(
                f"User '{username}' not found in tenant '{tenant_name}'"
            )
        logger.info("Tenant %s changed password of user %s", tenant_name, username)
