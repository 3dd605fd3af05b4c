"""
ListProfessionalUsersQuery.
"""

from dataclasses import dataclass


@dataclass
class ListProfessionalUsersQuery:
    """Query to list the professional users of a tenant."""

    tenant_name: str
