"""
Password hasher port (interface).
"""
from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """One-way salted password hashing."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """
        Hash a password.

        Args:
            plaintext: Password as typed

        Returns:
            Salted digest
        """
        pass

    @abstractmethod
    async def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a password against a digest.

        Args:
            plaintext: Password as typed
            digest: Stored digest

        Returns:
            True if the password matches
        """
        pass
