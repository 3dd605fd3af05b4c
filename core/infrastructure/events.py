"""
In-memory event bus.

Handlers run in-process once the publishing operation has committed. A
handler that raises is logged and does not affect the publisher or the
other handlers of the same event.
"""

import asyncio
import logging
from typing import Dict, List, Type

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """Process-local bus; subscriptions are keyed by concrete event class."""

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe ``handler`` to ``event_type``.

        At most one handler per class is kept for an event type, so
        ``AppConfig.ready`` and test fixtures may both register.
        """
        handlers = self._handlers.setdefault(event_type, [])
        if any(type(existing) is type(handler) for existing in handlers):
            return
        handlers.append(handler)
        logger.debug("Subscribed %s to %s", type(handler).__name__, event_type.__name__)

    def clear(self) -> None:
        """Remove every subscription."""
        self._handlers.clear()

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        """Return a copy of the handlers subscribed to ``event_type``."""
        return list(self._handlers.get(event_type, []))

    async def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to its subscribers concurrently."""
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.debug("No handlers registered for %s", event.event_type)
            return

        results = await asyncio.gather(
            *(handler.handle(event) for handler in handlers), return_exceptions=True
        )
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Handler %s failed on %s %s",
                    type(handler).__name__,
                    event.event_type,
                    event.event_id,
                    exc_info=result,
                )


event_bus = InMemoryEventBus()
