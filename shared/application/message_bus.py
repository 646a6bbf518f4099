"""
Message Bus

In-process fan-out of domain events. The unit of work publishes after
commit; bounded contexts subscribe at startup (see the notifications app
config). A subscriber registered for a base event class also receives its
subclasses.
"""

from typing import Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """Events only: any number of handlers per event type"""

    def __init__(self):
        self._subscribers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler``; subscribing the same handler twice is a no-op"""
        subscribers = self._subscribers.setdefault(event_type, [])
        if handler not in subscribers:
            subscribers.append(handler)
            logger.debug(f"{handler.__name__} subscribed to {event_type.__name__}")

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        handlers: List[EventHandler] = []
        for klass in event_type.__mro__:
            for handler in self._subscribers.get(klass, []):
                if handler not in handlers:
                    handlers.append(handler)
        return handlers

    def publish_events(self, events: List[DomainEvent]):
        """
        Deliver each event to its handlers, in registration order

        A failing handler is logged and skipped; the remaining handlers and
        events are still delivered.
        """
        for event in events:
            name = type(event).__name__
            handlers = self.handlers_for(type(event))
            if not handlers:
                logger.debug(f"No handlers for {name}")
                continue

            logger.info(f"Publishing event: {name} (ID: {event.event_id})")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(f"Handler {handler.__name__} failed on {name}: {e}", exc_info=True)


# Global message bus instance
message_bus = MessageBus()
