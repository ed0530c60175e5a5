# vocab_swipe/core/ports/state_store.py
from typing import Any, Protocol


class IStateStore(Protocol):
    """
    Port for durable client-side state (key -> JSON value).
    Implementations: JsonFileStateStore, InMemoryStateStore.
    """

    def read_json(self, key: str, default: Any = None) -> Any:
        """Returns the stored value, or `default` when missing or unreadable."""
        ...

    def write_json(self, key: str, value: Any) -> bool:
        """Stores `value`; returns False instead of raising when the write fails."""
        ...
