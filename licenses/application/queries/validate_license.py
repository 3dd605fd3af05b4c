"""
ValidateLicenseQuery.

Query to classify a plaintext license key.
"""

from dataclasses import dataclass


@dataclass
class ValidateLicenseQuery:
    """Query to validate a license key before registration."""

    license_key: str
