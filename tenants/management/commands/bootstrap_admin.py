"""
Django management command to bootstrap the administrator tenant.

Creates, when missing:
- The tenant named by ADMIN_USER, with password ADMIN_PASS
- A keyless active license bound to it (kind ADMIN_LICENSE_TYPE)

Running it again is a no-op.
"""

import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import TenantNameTakenError
from core.domain.value_objects import LicenseKind
from licenses.domain.license import License
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from tenants.domain.tenant import Tenant
from tenants.infrastructure.hashers import DjangoPasswordHasher
from tenants.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to create the administrator tenant and its license."""

    help = "Create the administrator tenant and its keyless license if they do not exist"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--username",
            type=str,
            default=None,
            help="Administrator tenant name (default: ADMIN_USER)",
        )
        parser.add_argument(
            "--password",
            type=str,
            default=None,
            help="Administrator password (default: ADMIN_PASS)",
        )
        parser.add_argument(
            "--max-users",
            type=int,
            default=None,
            help="User limit of the administrator tenant (default: ADMIN_MAX_USERS, unlimited)",
        )
        parser.add_argument(
            "--license-type",
            type=str,
            default=None,
            help="Kind of the keyless license (default: ADMIN_LICENSE_TYPE or basica)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        username = options["username"] or settings.ADMIN_USER
        password = options["password"] or settings.ADMIN_PASS
        if not username or not password:
            # pylint: disable=no-member
            self.stdout.write(
                self.style.WARNING("ADMIN_USER/ADMIN_PASS not set; nothing to bootstrap")
            )
            return

        max_users = options["max_users"]
        if max_users is None:
            max_users = settings.ADMIN_MAX_USERS

        try:
            kind = LicenseKind.from_value(options["license_type"] or settings.ADMIN_LICENSE_TYPE)
        except ValueError as e:
            raise CommandError(str(e)) from e

        async_to_sync(self.bootstrap)(username, password, max_users, kind)

    async def bootstrap(self, username: str, password: str, max_users, kind: LicenseKind):
        """Create whatever part of the administrator setup is missing."""
        tenant_repo = DjangoTenantRepository()
        license_repo = DjangoLicenseRepository()

        if await tenant_repo.find_by_name(username) is None:
            digest = await DjangoPasswordHasher().hash(password)
            tenant = Tenant.create(
                name=username, password_digest=digest, legacy_user_limit=max_users
            )
            try:
                await tenant_repo.create_legacy(tenant)
                logger.info("Created administrator tenant %s", username)
                # pylint: disable=no-member
                self.stdout.write(self.style.SUCCESS(f"Created administrator tenant: {username}"))
            except TenantNameTakenError:
                # pylint: disable=no-member
                self.stdout.write(self.style.WARNING(f"Tenant '{username}' already exists"))
        else:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"Tenant '{username}' already exists"))

        if await license_repo.find_active_for_tenant(username) is None:
            license = License.legacy(tenant_id=username, kind=kind, max_users=max_users)
            await license_repo.save(license)
            logger.info("Created %s license %s for %s", kind.value, license.id, username)
            # pylint: disable=no-member
            self.stdout.write(
                self.style.SUCCESS(f"Created {kind.value} license for tenant: {username}")
            )
        else:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"Tenant '{username}' already has a license"))
