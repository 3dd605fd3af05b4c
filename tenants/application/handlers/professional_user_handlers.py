"""
Professional user handlers.

Handlers for adding users, listing them, reading the effective user
limit and resetting passwords.
"""

from core.infrastructure.events import event_bus
from tenants.application.commands.add_professional_user import AddProfessionalUserCommand
from tenants.application.commands.change_professional_password import (
    ChangeProfessionalPasswordCommand,
)
from tenants.application.dto.tenant_dto import (
    ProfessionalUserDTO,
    ProfessionalUserListDTO,
    UserLimitDTO,
)
from tenants.application.queries.get_user_limit import GetUserLimitQuery
from tenants.application.queries.list_professional_users import ListProfessionalUsersQuery
from tenants.domain.events import ProfessionalUserAdded
from tenants.domain.services import TenantProvisioningService


class AddProfessionalUserHandler:
    """Handler for AddProfessionalUserCommand."""

    def __init__(self, provisioning_service: TenantProvisioningService):
        """Initialize handler with the provisioning service."""
        self.provisioning_service = provisioning_service

    async def handle(self, command: AddProfessionalUserCommand) -> ProfessionalUserDTO:
        """
        Handle add professional user command.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            ProfessionalUserExistsError: If the username exists in the tenant
            UserLimitReachedError: If the tenant is at its limit
        """
        user = await self.provisioning_service.add_professional_user(
            tenant_name=command.tenant_name,
            username=command.username,
            real_name=command.real_name,
            password=command.password,
        )

        await event_bus.publish(
            ProfessionalUserAdded(
                aggregate_id=user.tenant_name,
                tenant_name=user.tenant_name,
                username=user.username,
            )
        )

        return ProfessionalUserDTO.from_entity(user)


class ListProfessionalUsersHandler:
    """Handler for ListProfessionalUsersQuery."""

    def __init__(self, provisioning_service: TenantProvisioningService):
        self.provisioning_service = provisioning_service

    async def handle(self, query: ListProfessionalUsersQuery) -> ProfessionalUserListDTO:
        users = await self.provisioning_service.list_professional_users(query.tenant_name)
        return ProfessionalUserListDTO(
            tenant=query.tenant_name,
            users=[ProfessionalUserDTO.from_entity(u) for u in users],
        )


class GetUserLimitHandler:
    """Handler for GetUserLimitQuery."""

    def __init__(self, provisioning_service: TenantProvisioningService):
        self.provisioning_service = provisioning_service

    async def handle(self, query: GetUserLimitQuery) -> UserLimitDTO:
        """
        Handle get user limit query.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        limit = await self.provisioning_service.effective_user_limit(query.tenant_name)
        current = await self.provisioning_service.user_repository.count_for_tenant(
            query.tenant_name
        )
        return UserLimitDTO(
            tenant=query.tenant_name,
            max_users=limit.maximum,
            unlimited=limit.is_unlimited,
            current_users=current,
            can_add_user=limit.allows(current),
        )


class ChangeProfessionalPasswordHandler:
    """Handler for ChangeProfessionalPasswordCommand."""

    def __init__(self, provisioning_service: TenantProvisioningService):
        self.provisioning_service = provisioning_service

    async def handle(self, command: ChangeProfessionalPasswordCommand) -> None:
        """
        Handle change password command.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            InvalidCredentialsError: If the tenant password is wrong
            ProfessionalUserNotFoundError: If the user is not in the tenant
        """
        await self.provisioning_service.change_professional_password(
            tenant_name=command.tenant_name,
            tenant_password=command.tenant_password,
            username=command.username,
            new_password=command.new_password,
        )
