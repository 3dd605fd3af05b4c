"""
App configuration for Therapy Tracker Service.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class TherapyTrackerServiceConfig(AppConfig):
    """App configuration for TherapyTrackerService."""

    name = "TherapyTrackerService"
    verbose_name = "Therapy Tracker Service"

    def ready(self):
        """Called when Django starts."""
        # Event handlers are needed by every process, including management commands
        self.register_event_handlers()

        if not hasattr(self, "_initialized"):
            self.setup_observability()
            self._initialized = True

    def setup_observability(self):
        """Setup observability after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning(f"Failed to setup OpenTelemetry: {e}")

    def register_event_handlers(self):
        """Register event handlers after apps are ready."""
        from core.infrastructure.event_handlers import register_event_handlers as register

        register()
