"""
Event handlers for domain events.

These handlers process domain events for side effects: audit logging
and Prometheus counters.
"""

import logging

from core import metrics
from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import (
    LicenseExpired,
    LicenseGenerated,
    LicenseRedeemed,
    LicenseRevoked,
)
from tenants.domain.events import ProfessionalUserAdded, TenantRegistered

logger = logging.getLogger("audit")

ALL_EVENTS = (
    LicenseGenerated,
    LicenseRedeemed,
    LicenseRevoked,
    LicenseExpired,
    TenantRegistered,
    ProfessionalUserAdded,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one structured log line per domain event.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


class MetricsEventHandler(EventHandler):
    """Event handler that increments the business counters."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, LicenseGenerated):
            metrics.licenses_generated_total.labels(kind=event.kind).inc()
        elif isinstance(event, LicenseRedeemed):
            metrics.licenses_redeemed_total.labels(kind=event.kind).inc()
        elif isinstance(event, LicenseRevoked):
            metrics.licenses_revoked_total.inc()
        elif isinstance(event, LicenseExpired):
            metrics.licenses_expired_total.inc()
        elif isinstance(event, TenantRegistered):
            metrics.tenants_registered_total.inc()
        elif isinstance(event, ProfessionalUserAdded):
            metrics.professional_users_added_total.inc()


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in ALL_EVENTS:
        event_bus.subscribe(event_type, audit_handler)
        event_bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
