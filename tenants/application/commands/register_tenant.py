"""
RegisterTenantCommand.

Command to create a tenant by redeeming a license key.
"""

from dataclasses import dataclass


@dataclass
class RegisterTenantCommand:
    """Command to register a tenant."""

    name: str
    password: str
    license_key: str
