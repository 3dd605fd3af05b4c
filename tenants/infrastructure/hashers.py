"""
Password hashing adapters.
"""
from asgiref.sync import sync_to_async
from django.conf import settings
from django.contrib.auth.hashers import (
    BCryptSHA256PasswordHasher,
    check_password,
    make_password,
)

from tenants.ports.password_hasher import PasswordHasher


class TherapyBCryptPasswordHasher(BCryptSHA256PasswordHasher):
    """BCrypt-SHA256 hasher whose cost factor comes from BCRYPT_SALT_ROUNDS."""

    @property
    def rounds(self):
        return int(getattr(settings, "BCRYPT_SALT_ROUNDS", 10))


class DjangoPasswordHasher(PasswordHasher):
    """
    PasswordHasher backed by Django's configured PASSWORD_HASHERS.

    Hashing is CPU bound, so it runs off the thread-sensitive executor.
    """

    async def hash(self, plaintext: str) -> str:
        return await sync_to_async(make_password, thread_sensitive=False)(plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        if not digest:
            return False
        return await sync_to_async(check_password, thread_sensitive=False)(plaintext, digest)
