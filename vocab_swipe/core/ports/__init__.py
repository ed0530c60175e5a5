# vocab_swipe/core/ports/__init__.py
"""
Core Ports (Interfaces).

Protocols the Adapters must implement. They let the engine reach word
sources, durable state and subscribers without knowing where they live.
"""

from .source_repository import ISourceRepository, RawSource
from .state_store import IStateStore
from .event_bus import IEventBus

__all__ = [
    "ISourceRepository",
    "RawSource",
    "IStateStore",
    "IEventBus",
]
