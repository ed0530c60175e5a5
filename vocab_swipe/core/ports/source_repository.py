# vocab_swipe/core/ports/source_repository.py
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol


@dataclass
class RawSource:
    """
    A source as the backend holds it, before validation.
    `error` is set instead of `words` when the payload could not be decoded.
    """
    name: str
    words: Optional[Any] = None
    origin_link: Optional[str] = None
    error: Optional[str] = None


class ISourceRepository(Protocol):
    """
    Port for the Word Source Store backing.
    Implementations: FileSystemSourceRepository, HttpSourceRepository.
    """

    async def list_raw(self) -> List[RawSource]:
        """
        Returns every known source.

        A source whose content cannot be decoded is still returned, with
        `error` set, so one bad entry does not hide the others.
        Raises SourceLoadError if the backing itself is unreachable.
        """
        ...

    async def get(self, name: str) -> RawSource:
        """Raises SourceNotFoundError if absent."""
        ...

    async def put(self, name: str, words: List[dict], origin_link: Optional[str] = None) -> None:
        """Creates or overwrites a source with an already validated word list."""
        ...

    async def delete(self, name: str) -> None:
        """Raises SourceNotFoundError if absent."""
        ...

    async def health_check(self) -> bool:
        """Returns True if the underlying storage is accessible."""
        ...
