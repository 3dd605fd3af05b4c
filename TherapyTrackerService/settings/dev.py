"""
Development settings for TherapyTrackerService.
"""

from .base import *  # noqa: F403, F401

DEBUG = True

# Any non-empty token works locally; production must set its own
ADMIN_TOKEN = os.environ.get("ADMIN_TOKEN", "dev-admin-token")  # noqa: F405
