"""
GenerateLicenseCommand.

Command to generate a new pending license key.
"""

from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import LicenseKind


@dataclass
class GenerateLicenseCommand:
    """
    Command to generate a license.

    ``max_users`` overrides the preset of ``kind`` when given.
    """

    kind: LicenseKind = LicenseKind.BASIC
    max_users: Optional[int] = None
    notes: str = ""
