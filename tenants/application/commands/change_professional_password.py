"""
ChangeProfessionalPasswordCommand.
"""

from dataclasses import dataclass


@dataclass
class ChangeProfessionalPasswordCommand:
    """
    Command for a tenant to reset one of its users' password.

    The tenant's own password authorizes the change.
    """

    tenant_name: str
    tenant_password: str
    username: str
    new_password: str
