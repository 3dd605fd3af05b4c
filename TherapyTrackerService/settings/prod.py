"""
Production settings for TherapyTrackerService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")

# Transport security is terminated in front of the service
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Secret key from environment
SECRET_KEY = os.environ["SECRET_KEY"]

if LICENSE_SECRET == "dev_secret_change_me":  # noqa: F405
    raise RuntimeError("LICENSE_SECRET must be set in production")

LOGGING = get_logging_config("production")
