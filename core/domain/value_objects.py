"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


class LicenseState(Enum):
    """License state value object."""

    PENDING = "pending"
    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


class LicenseKind(Enum):
    """
    License kind value object.

    The stored values are the ones the client application sends
    ("basica", "mediana", ...); English aliases are accepted on input.
    """

    BASIC = "basica"
    MEDIUM = "mediana"
    PRO = "pro"
    CUSTOM = "custom"

    @classmethod
    def from_value(cls, value: str) -> "LicenseKind":
        """
        Parse a license kind, accepting English aliases.

        Args:
            value: Kind as received from a caller

        Returns:
            LicenseKind member

        Raises:
            ValueError: If the kind is unknown
        """
        normalized = (value or "").strip().lower()
        aliases = {"basic": cls.BASIC, "medium": cls.MEDIUM}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown license kind: {value}") from None

    @property
    def preset_max_users(self) -> Optional[int]:
        """Professional users granted by default for this kind (None = unlimited)."""
        return LICENSE_PRESETS[self]

    def __str__(self) -> str:
        """Return kind as string."""
        return self.value


LICENSE_PRESETS = {
    LicenseKind.BASIC: 3,
    LicenseKind.MEDIUM: 7,
    LicenseKind.PRO: 10,
    LicenseKind.CUSTOM: None,
}


@dataclass(frozen=True)
class UserLimit(ValueObject):
    """
    Effective cap on the professional users of a tenant.

    A ``maximum`` of None means the tenant is unlimited.
    """

    maximum: Optional[int]

    def __post_init__(self):
        """Validate limit."""
        if self.maximum is not None and self.maximum < 0:
            raise ValueError(f"User limit cannot be negative: {self.maximum}")

    @classmethod
    def unlimited(cls) -> "UserLimit":
        """Return a limit without an upper bound."""
        return cls(maximum=None)

    @property
    def is_unlimited(self) -> bool:
        """True when no upper bound applies."""
        return self.maximum is None

    def allows(self, current_count: int) -> bool:
        """
        Check whether one more user fits under the limit.

        Args:
            current_count: Users the tenant already has

        Returns:
            True if a new user may be created
        """
        if self.is_unlimited:
            return True
        return current_count < self.maximum

    def __str__(self) -> str:
        """Return limit as string."""
        return "unlimited" if self.is_unlimited else str(self.maximum)
