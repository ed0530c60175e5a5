# vocab_swipe/adapters/messaging/local_bus.py
from typing import Dict, List

import structlog

from vocab_swipe.core.domain.events import SessionEvent
from vocab_swipe.core.ports.event_bus import EventHandler, IEventBus

logger = structlog.get_logger()

WILDCARD = "*"


def _key(event_type) -> str:
    # EventType members and plain strings address the same handlers
    return getattr(event_type, "value", event_type)


class LocalEventBus(IEventBus):
    """
    In-process implementation of the notification channel.

    Handlers run synchronously in subscription order. A failing handler is
    logged and does not stop delivery to the others, nor the engine step
    that published the event.
    """

    def __init__(self):
        # Registry of handlers: { 'event.type': [handler, ...] }
        self._handlers: Dict[str, List[EventHandler]] = {}

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(_key(event_type), [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(_key(event_type), [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: SessionEvent) -> None:
        targets = self._handlers.get(_key(event.type), []) + self._handlers.get(WILDCARD, [])
        logger.debug("event_published", type=event.type, id=event.id, handlers=len(targets))

        for handler in list(targets):
            try:
                handler(event)
            except Exception as e:
                logger.error("event_handler_failed", type=event.type, handler=getattr(handler, "__name__", repr(handler)), error=str(e))
