"""
GetUserLimitQuery.
"""

from dataclasses import dataclass


@dataclass
class GetUserLimitQuery:
    """Query for a tenant's effective user limit and current user count."""

    tenant_name: str
