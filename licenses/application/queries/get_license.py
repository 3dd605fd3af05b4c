"""
GetLicenseQuery.

Query to load a license by ID.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetLicenseQuery:
    """Query for a single license."""

    license_id: uuid.UUID
