"""
RevokeLicenseCommand.

Command to revoke a pending license.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license that was never redeemed."""

    license_id: uuid.UUID
    reason: Optional[str] = None
