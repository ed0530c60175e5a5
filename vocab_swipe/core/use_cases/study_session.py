# vocab_swipe/core/use_cases/study_session.py
from typing import List, Optional

import structlog

from vocab_swipe.core.domain.events import EventType, SessionEvent
from vocab_swipe.core.domain.exceptions import (
    DomainError,
    NoActiveSourceError,
    ValidationError,
)
from vocab_swipe.core.domain.models import (
    History,
    HistoryItem,
    NextWordResult,
    ProgressSummary,
    SelectionPolicy,
    SelectorState,
    Source,
    WordEntry,
)
from vocab_swipe.core.ports.event_bus import IEventBus
from vocab_swipe.core.use_cases.progress_tracker import ProgressTracker
from vocab_swipe.core.use_cases.source_store import WordSourceStore
from vocab_swipe.core.use_cases.word_selector import WordSelector
from vocab_swipe.shared.telemetry import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class StudySession:
    """
    Use Case: one learner working through one source at a time.

    Owns the state the presentation layer would otherwise keep globally
    (active source, current word, selector state) and announces every
    change on the event bus.

    Selector states: SELECTING -> PRESENTING -> (SELECTING | COMPLETED).
    COMPLETED stays put until `reset` (or an unmark frees a word again).
    """

    def __init__(
        self,
        source_store: WordSourceStore,
        tracker: ProgressTracker,
        selector: WordSelector,
        event_bus: IEventBus,
    ):
        self.source_store = source_store
        self.tracker = tracker
        self.selector = selector
        self.event_bus = event_bus

        self.active_source: Optional[str] = None
        self.current_word: Optional[WordEntry] = None
        self.state: SelectorState = SelectorState.SELECTING

    # --- Source selection ---

    async def select_source(self, name: str) -> Optional[NextWordResult]:
        """
        Makes `name` the active source and presents its first word.

        Returns None when another `select_source` call overtook this one
        while the source was being fetched; the late result is dropped.
        """
        previous = (self.active_source, self.current_word, self.state)
        self.active_source = name
        self.current_word = None
        self.state = SelectorState.SELECTING

        try:
            source = await self._fetch(name)
        except DomainError:
            # A failed selection keeps the previous card, unless a newer selection took over
            if self.active_source == name:
                self.active_source, self.current_word, self.state = previous
            raise
        if self.active_source != name:
            logger.info("stale_source_result_dropped", requested=name, active=self.active_source)
            return None

        self.tracker.ensure_initialized(name)
        self._publish(EventType.SOURCE_SELECTED, source=name, total=source.total_words)
        return self._advance(source)

    # --- Selection ---

    async def next_word(self) -> NextWordResult:
        name = self._require_active()
        with tracer.start_as_current_span("study.next_word") as span:
            span.set_attribute("app.source", name)
            source = await self._fetch(name)
            if self.state == SelectorState.COMPLETED:
                return self._result(source)
            return self._advance(source)

    # --- Learner actions ---

    async def mark_learned(self, term: Optional[str] = None) -> NextWordResult:
        name = self._require_active()
        term = await self._resolve_term(name, term)

        self.tracker.mark_learned(name, term)
        self._publish_progress(name, term, "learned")
        self.state = SelectorState.SELECTING
        return await self.next_word()

    async def mark_skipped(self, term: Optional[str] = None) -> NextWordResult:
        name = self._require_active()
        term = await self._resolve_term(name, term)

        self.tracker.mark_skipped(name, term)
        self._publish_progress(name, term, "skipped")
        self.state = SelectorState.SELECTING
        return await self.next_word()

    async def unmark_learned(self, term: str, source_name: Optional[str] = None) -> ProgressSummary:
        name = source_name or self._require_active()
        self.tracker.unmark_learned(name, term)
        self._publish_progress(name, term, "unlearned")

        # A freed word re-opens a completed source
        if name == self.active_source and self.state == SelectorState.COMPLETED:
            self.state = SelectorState.SELECTING
        return await self.progress_summary(name)

    async def unmark_skipped(self, term: str, source_name: Optional[str] = None) -> ProgressSummary:
        """Takes a word off the skipped list; it was never excluded from selection."""
        name = source_name or self._require_active()
        self.tracker.unmark_skipped(name, term)
        self._publish_progress(name, term, "unskipped")
        return await self.progress_summary(name)

    async def reset(self, source_name: Optional[str] = None) -> Optional[NextWordResult]:
        """
        Empties the progress of a source. For the active source the selector
        leaves COMPLETED and the next word is returned.
        """
        name = source_name or self._require_active()
        self.tracker.reset(name)
        self._publish_progress(name, None, "reset")

        if name != self.active_source:
            return None
        self.state = SelectorState.SELECTING
        self.current_word = None
        return await self.next_word()

    # --- Source lifecycle ---

    async def delete_source(self, name: str) -> None:
        try:
            await self.source_store.delete_source(name)
        except DomainError as e:
            self._publish_error(name, e)
            raise
        self.tracker.forget(name)
        if self.active_source == name:
            self.active_source = None
            self.current_word = None
            self.state = SelectorState.SELECTING

    # --- Reporting ---

    async def progress_summary(self, source_name: Optional[str] = None) -> ProgressSummary:
        name = source_name or self._require_active()
        total = await self.tracker.total_count(name)
        return ProgressSummary(
            source_name=name,
            learned=self.tracker.learned_count(name),
            skipped=self.tracker.skipped_count(name),
            total=total,
        )

    async def all_progress(self) -> List[ProgressSummary]:
        sources = await self.source_store.list_sources()
        return [
            ProgressSummary(
                source_name=s.name,
                learned=self.tracker.learned_count(s.name),
                skipped=self.tracker.skipped_count(s.name),
                total=s.total_words,
            )
            for s in sources
        ]

    async def history(self, source_filter: Optional[str] = None) -> History:
        """
        Learned and skipped words across sources, joined back to their entries.
        Terms no longer present in their source are left out.
        """
        sources = await self.source_store.list_sources()
        if source_filter:
            sources = [s for s in sources if s.name == source_filter]

        history = History()
        for source in sources:
            if not self.tracker.has(source.name):
                continue
            record = self.tracker.get(source.name)
            history.total_words += source.total_words

            for term in record.learned:
                entry = source.find(term)
                if entry:
                    history.learned.append(HistoryItem(source_name=source.name, word=entry))
            for term in record.skipped:
                entry = source.find(term)
                if entry:
                    history.skipped.append(HistoryItem(source_name=source.name, word=entry))

        history.total_learned = len(history.learned)
        history.total_skipped = len(history.skipped)
        return history

    # --- Internals ---

    def _advance(self, source: Source) -> NextWordResult:
        progress = self.tracker.ensure_initialized(source.name).model_copy(deep=True)
        word = self.selector.select_next(source, progress)

        if self.selector.policy == SelectionPolicy.SEQUENTIAL and word is not None:
            self.tracker.set_current_index(source.name, progress.current_index)

        self.current_word = word
        if word is None:
            self.state = SelectorState.COMPLETED
            logger.info("source_completed", source=source.name, total=source.total_words)
            self._publish(EventType.SOURCE_COMPLETED, source=source.name, total=source.total_words)
        else:
            self.state = SelectorState.PRESENTING
            self._publish(EventType.WORD_CHANGED, source=source.name, term=word.term, word=word.to_wire())
        return self._result(source)

    def _result(self, source: Source) -> NextWordResult:
        return NextWordResult(
            source_name=source.name,
            state=self.state,
            word=self.current_word,
            learned_count=self.tracker.learned_count(source.name),
            skipped_count=self.tracker.skipped_count(source.name),
            total_count=source.total_words,
        )

    async def _fetch(self, name: str) -> Source:
        try:
            return await self.source_store.get_source(name)
        except DomainError as e:
            self._publish_error(name, e)
            raise

    def _require_active(self) -> str:
        if not self.active_source:
            raise NoActiveSourceError()
        return self.active_source

    async def _resolve_term(self, name: str, term: Optional[str]) -> str:
        """An explicit term must belong to the active source; none means the presented card."""
        if term and term.strip():
            source = await self._fetch(name)
            entry = source.find(term.strip())
            if entry is None:
                raise ValidationError(f"'{term.strip()}' is not a word of source '{name}'")
            return entry.term
        if self.current_word is None:
            raise ValidationError("no word is currently presented")
        return self.current_word.term

    def _publish_progress(self, name: str, term: Optional[str], action: str) -> None:
        self._publish(
            EventType.PROGRESS_CHANGED,
            source=name,
            term=term,
            action=action,
            learned=self.tracker.learned_count(name),
            skipped=self.tracker.skipped_count(name),
        )

    def _publish_error(self, name: str, error: DomainError) -> None:
        self._publish(EventType.ENGINE_ERROR, source=name, error=type(error).__name__, message=error.message)

    def _publish(self, event_type: EventType, **payload) -> None:
        self.event_bus.publish(SessionEvent(type=event_type, payload=payload))
