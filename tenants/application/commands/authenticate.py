"""
Authentication commands.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AuthenticateTenantCommand:
    """Command to check a tenant's credentials."""

    name: str
    password: str


@dataclass
class AuthenticateProfessionalCommand:
    """Command to check a professional user's credentials."""

    username: str
    password: str
    tenant_name: Optional[str] = None
