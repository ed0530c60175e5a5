# vocab_swipe/core/use_cases/source_store.py
from typing import Any, List, Optional, Sequence, Tuple

import structlog

from vocab_swipe.core.domain.exceptions import (
    DomainError,
    SourceLoadError,
    ValidationError,
)
from vocab_swipe.core.domain.models import Source, WordEntry
from vocab_swipe.core.domain.validation import (
    dedupe_entries,
    parse_word_entries,
    validate_source_name,
)
from vocab_swipe.core.ports.source_repository import ISourceRepository, RawSource
from vocab_swipe.shared.telemetry import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class WordSourceStore:
    """
    Use Case facade over the source backing.

    Responsibilities:
    1. Validates every word list before it reaches storage.
    2. Turns raw payloads into `Source` entities.
    3. Isolates per-source failures when listing.
    4. Keeps the backing (files or remote API) out of the engine's sight.

    It never touches progress; callers deleting a source clear that themselves.
    """

    def __init__(self, repo: ISourceRepository):
        self.repo = repo

    # --- Reads ---

    async def list_sources(self) -> List[Source]:
        sources, _ = await self.list_sources_with_warnings()
        return sources

    async def list_sources_with_warnings(self) -> Tuple[List[Source], List[str]]:
        """
        Returns the loadable sources plus one warning string per source that was skipped.
        """
        with tracer.start_as_current_span("source_store.list"):
            try:
                raw_sources = await self.repo.list_raw()
            except DomainError:
                raise
            except Exception as e:
                logger.error("source_listing_failed", error=str(e))
                raise SourceLoadError(str(e))

            sources: List[Source] = []
            warnings: List[str] = []
            for raw in raw_sources:
                try:
                    sources.append(self._to_source(raw))
                except SourceLoadError as e:
                    logger.warning("source_skipped", source=raw.name, reason=e.reason)
                    warnings.append(e.message)

            logger.info("sources_listed", count=len(sources), skipped=len(warnings))
            return sources, warnings

    async def get_source(self, name: str) -> Source:
        name = validate_source_name(name)
        with tracer.start_as_current_span("source_store.get") as span:
            span.set_attribute("app.source", name)
            try:
                raw = await self.repo.get(name)
            except DomainError:
                raise
            except Exception as e:
                logger.error("source_fetch_failed", source=name, error=str(e))
                raise SourceLoadError(str(e), name=name)
            return self._to_source(raw)

    async def health_check(self) -> bool:
        return await self.repo.health_check()

    # --- Writes ---

    async def save_source(
        self, name: Any, words: Any, origin_link: Optional[str] = None
    ) -> Source:
        """Creates or overwrites a source. Raises ValidationError on a malformed list."""
        name = validate_source_name(name)
        entries = parse_word_entries(words)
        return await self._write(name, entries, origin_link)

    async def add_words(self, name: str, words: Any) -> Tuple[Source, List[str]]:
        """
        Appends new entries to an existing source.

        Terms already present (case-insensitive) are left untouched and
        reported back in the second element of the result.
        """
        incoming = parse_word_entries(words)
        source = await self.get_source(name)

        existing = source.keys()
        added: List[WordEntry] = []
        ignored: List[str] = []
        for entry in incoming:
            if entry.key in existing:
                ignored.append(entry.term)
                continue
            existing.add(entry.key)
            added.append(entry)

        if not added:
            return source, ignored

        updated = await self._write(source.name, source.words + added, source.origin_link)
        logger.info("source_words_added", source=source.name, added=len(added), ignored=len(ignored))
        return updated, ignored

    async def remove_word(self, name: str, term: str) -> Source:
        source = await self.get_source(name)
        remaining = [w for w in source.words if w.key != term.lower()]
        if len(remaining) == len(source.words):
            return source
        if not remaining:
            raise ValidationError("a source must keep at least one word; delete the source instead")
        logger.info("source_word_removed", source=source.name, term=term)
        return await self._write(source.name, remaining, source.origin_link)

    async def delete_source(self, name: str) -> None:
        name = validate_source_name(name)
        with tracer.start_as_current_span("source_store.delete"):
            await self.repo.delete(name)
            logger.info("source_deleted", source=name)

    # --- Internals ---

    async def _write(
        self, name: str, entries: Sequence[WordEntry], origin_link: Optional[str]
    ) -> Source:
        unique, dropped = dedupe_entries(entries)
        if dropped:
            logger.warning("duplicate_terms_dropped", source=name, terms=dropped)

        with tracer.start_as_current_span("source_store.put") as span:
            span.set_attribute("app.source", name)
            span.set_attribute("app.word_count", len(unique))
            try:
                await self.repo.put(name, [w.to_wire() for w in unique], origin_link)
            except DomainError:
                raise
            except Exception as e:
                logger.error("source_save_failed", source=name, error=str(e))
                raise SourceLoadError(f"save failed: {e}", name=name)

        logger.info("source_saved", source=name, words=len(unique))
        return Source(name=name, words=unique, origin_link=origin_link)

    def _to_source(self, raw: RawSource) -> Source:
        if raw.error:
            raise SourceLoadError(raw.error, name=raw.name)
        try:
            entries = parse_word_entries(raw.words, allow_empty=True)
        except ValidationError as e:
            raise SourceLoadError(e.reason, name=raw.name)
        unique, _ = dedupe_entries(entries)
        return Source(name=raw.name, words=unique, origin_link=raw.origin_link)
