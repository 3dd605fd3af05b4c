"""
License key codec.

Plaintext keys are shown to the operator exactly once; only their keyed
digest is ever stored. Pure and stateless apart from the secret.
"""

import hashlib
import hmac
import secrets

LICENSE_KEY_BYTES = 9
LICENSE_KEY_GROUP = 4


def generate_license_key() -> str:
    """
    Generate a license key in format: XXXX-XXXX-XXXX-XXXX-XX.

    Returns:
        Generated license key string (72 random bits, upper-case hex)
    """
    raw = secrets.token_hex(LICENSE_KEY_BYTES).upper()
    groups = [raw[i : i + LICENSE_KEY_GROUP] for i in range(0, len(raw), LICENSE_KEY_GROUP)]
    return "-".join(groups)


def normalize_license_key(raw_key: str) -> str:
    """Strip surrounding whitespace from a key typed by a user."""
    return str(raw_key).strip()


def hash_license_key(raw_key: str, secret: str) -> str:
    """
    Compute the HMAC-SHA256 digest of a license key.

    Args:
        raw_key: Plaintext license key
        secret: HMAC secret

    Returns:
        64 character hex digest
    """
    key = normalize_license_key(raw_key)
    return hmac.new(secret.encode(), key.encode(), hashlib.sha256).hexdigest()


def verify_license_key(raw_key: str, key_digest: str, secret: str) -> bool:
    """
    Verify a raw license key against a stored digest.

    Args:
        raw_key: The raw license key to verify
        key_digest: Stored digest
        secret: HMAC secret

    Returns:
        True if key matches, False otherwise
    """
    return hmac.compare_digest(hash_license_key(raw_key, secret), key_digest)


class LicenseKeyCodec:
    """License key generation and digesting bound to one secret."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("License secret is required")
        self._secret = secret

    def generate(self) -> str:
        """Return a new plaintext license key."""
        return generate_license_key()

    def digest(self, raw_key: str) -> str:
        """Return the storage digest of ``raw_key``."""
        return hash_license_key(raw_key, self._secret)

    def verify(self, raw_key: str, key_digest: str) -> bool:
        """Check ``raw_key`` against ``key_digest`` in constant time."""
        return verify_license_key(raw_key, key_digest, self._secret)
