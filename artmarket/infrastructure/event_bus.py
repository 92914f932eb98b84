"""
In-process Event Bus.

Dispatches committed domain events to subscribers registered in the
same process.
"""
import asyncio
import logging
from typing import Any, Callable, List, Optional

from artmarket.domain.event_bus import EventBus
from artmarket.domain.events.base import DomainEvent


logger = logging.getLogger(__name__)

Subscriber = Callable[[DomainEvent], Any]


class InMemoryEventBus(EventBus):
    """
    In-memory event bus.

    Subscribers run in registration order. A failing subscriber is logged
    and skipped: events describe changes that are already committed, so
    nothing downstream may undo them.
    """

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        logger.info(f"Publishing event: {event.event_type} (aggregate: {event.aggregate_id})")
        await self._notify_subscribers(event)

    async def publish_all(self, events: List[DomainEvent]) -> None:
        """
        Publish events in the order they were recorded.

        Args:
            events: List of domain events to publish
        """
        if not events:
            return

        logger.debug(f"Publishing {len(events)} events")
        for event in events:
            await self.publish(event)

    def subscribe(self, handler: Subscriber) -> None:
        """
        Subscribe to all domain events.

        Args:
            handler: Sync or async callable receiving each event
        """
        if handler not in self._subscribers:
            self._subscribers.append(handler)
            logger.info(f"Registered event subscriber: {getattr(handler, '__name__', handler)}")

    def unsubscribe(self, handler: Subscriber) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)
            logger.info(f"Unregistered event subscriber: {getattr(handler, '__name__', handler)}")

    async def _notify_subscribers(self, event: DomainEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                result = subscriber(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(
                    f"Subscriber {getattr(subscriber, '__name__', subscriber)} failed "
                    f"on {event.event_type}: {e}",
                    exc_info=True,
                )


# Global event bus instance
_event_bus_instance: Optional[InMemoryEventBus] = None


def get_event_bus() -> InMemoryEventBus:
    """
    Get or create global event bus instance.

    Returns:
        Global event bus instance
    """
    global _event_bus_instance

    if _event_bus_instance is None:
        _event_bus_instance = InMemoryEventBus()

    return _event_bus_instance
