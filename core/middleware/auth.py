"""
Admin token authentication middleware.

Privileged license endpoints (generation, lookup, revocation) require the
shared ADMIN_TOKEN in the X-Admin-Token header. Key validation stays open
because the registration screen calls it before any account exists.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

PROTECTED_PREFIX = "/api/v1/licenses/"
PUBLIC_SUFFIXES = ("/validate", "/validate/")


class AdminTokenMiddleware(MiddlewareMixin):
    """
    Middleware for admin token authentication.

    This middleware:
    1. Guards /api/v1/licenses/* except key validation
    2. Compares X-Admin-Token with ADMIN_TOKEN in constant time
    3. Returns 401 Unauthorized if authentication fails
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not self._requires_admin(request.path):
            return None

        expected = getattr(settings, "ADMIN_TOKEN", "") or ""
        provided = request.headers.get("X-Admin-Token", "")

        if not expected:
            logger.warning("ADMIN_TOKEN not configured; refusing %s", request.path)
            return self._unauthorized("Admin token not configured")

        if not provided:
            return self._unauthorized("Missing admin token. Provide X-Admin-Token header.")

        if not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning("Invalid admin token attempted on %s", request.path)
            return self._unauthorized("Invalid admin token")

        return None

    def _requires_admin(self, path: str) -> bool:
        """
        Check if the path is a privileged license endpoint.

        Args:
            path: Request path

        Returns:
            True if the admin token is required
        """
        return path.startswith(PROTECTED_PREFIX) and not path.endswith(PUBLIC_SUFFIXES)

    def _unauthorized(self, message: str) -> JsonResponse:
        return JsonResponse(
            {"error": {"code": "UNAUTHORIZED", "message": message}},
            status=401,
        )
