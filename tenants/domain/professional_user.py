"""
ProfessionalUser domain entity.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ProfessionalUser:
    """
    A professional working under a tenant.

    Identity is the pair (username, tenant_name).
    """

    username: str
    tenant_name: str
    real_name: str
    password_digest: str

    def __post_init__(self):
        """Validate professional user entity."""
        if not self.username or not self.username.strip():
            raise ValueError("Username cannot be empty")
        if not self.tenant_name:
            raise ValueError("Tenant name is required")
        if not self.password_digest:
            raise ValueError("Password digest is required")
