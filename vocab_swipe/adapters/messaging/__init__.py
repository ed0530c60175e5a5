# vocab_swipe/adapters/messaging/__init__.py
from .local_bus import LocalEventBus

__all__ = ["LocalEventBus"]
