"""
Test settings for TherapyTrackerService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

# File-backed SQLite so concurrent tests get real IMMEDIATE write locks;
# tables are created from the models (no migrations)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": str(BASE_DIR / "test_database.sqlite3"),  # noqa: F405
        "OPTIONS": {
            "transaction_mode": "IMMEDIATE",
            "timeout": 20,
        },
        "TEST": {
            "NAME": os.environ.get(
                "TEST_DB_PATH", str(BASE_DIR / "test_database.sqlite3")  # noqa: F405
            ),
        },
    }
}

# Password hashers for faster tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]
BCRYPT_SALT_ROUNDS = 4

LICENSE_SECRET = "test-license-secret"
ADMIN_TOKEN = "test-admin-token"
ADMIN_USER = "admin"
ADMIN_PASS = "admin-password"
ADMIN_MAX_USERS = None
ADMIN_LICENSE_TYPE = "basica"

LOGGING = get_logging_config("test")
