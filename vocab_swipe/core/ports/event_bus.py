# vocab_swipe/core/ports/event_bus.py
from typing import Callable, Protocol

from vocab_swipe.core.domain.events import SessionEvent

EventHandler = Callable[[SessionEvent], None]


class IEventBus(Protocol):
    """
    Port for the engine's notification channel.
    The study session publishes; renderers subscribe.
    """

    def publish(self, event: SessionEvent) -> None:
        ...

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """
        Registers `handler` for one event type, or for all events with '*'.
        """
        ...

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        ...
