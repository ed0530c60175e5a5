# vocab_swipe/adapters/persistence/__init__.py
"""
Persistence Adapters.

Implements the storage ports defined in the Core:
- FileSystemSourceRepository: one `.data` file per source in a folder.
- HttpSourceRepository: sources held by a remote Vocab Swipe server.
- JsonFileStateStore / InMemoryStateStore: durable progress state.
"""

from .filesystem_repo import FileSystemSourceRepository
from .http_repo import HttpSourceRepository
from .state_store import InMemoryStateStore, JsonFileStateStore

__all__ = [
    "FileSystemSourceRepository",
    "HttpSourceRepository",
    "InMemoryStateStore",
    "JsonFileStateStore",
]
