"""
AddProfessionalUserCommand.
"""

from dataclasses import dataclass


@dataclass
class AddProfessionalUserCommand:
    """Command to add a professional user to a tenant."""

    tenant_name: str
    username: str
    real_name: str
    password: str
