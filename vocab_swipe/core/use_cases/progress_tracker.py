# vocab_swipe/core/use_cases/progress_tracker.py
import warnings
from typing import Dict, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from vocab_swipe.core.domain.exceptions import PersistenceWarning
from vocab_swipe.core.domain.models import ProgressRecord
from vocab_swipe.core.ports.state_store import IStateStore
from vocab_swipe.core.use_cases.source_store import WordSourceStore

logger = structlog.get_logger()


class ProgressTracker:
    """
    Keeps a ProgressRecord per source name and persists the whole map after
    every mutation.

    Persistence is best-effort: a failed write is logged and surfaced as a
    PersistenceWarning, while the in-memory state stays authoritative for the
    rest of the session.
    """

    def __init__(
        self,
        state_store: IStateStore,
        source_store: WordSourceStore,
        storage_key: str = "vocab_progress_v1",
    ):
        self.state_store = state_store
        self.source_store = source_store
        self.storage_key = storage_key
        self._records: Dict[str, ProgressRecord] = self._load()

    # --- Lifecycle ---

    def ensure_initialized(self, source_name: str) -> ProgressRecord:
        record = self._records.get(source_name)
        if record is None:
            record = ProgressRecord()
            self._records[source_name] = record
            self._persist()
        return record

    def reset(self, source_name: str) -> None:
        self._records[source_name] = ProgressRecord()
        logger.info("progress_reset", source=source_name)
        self._persist()

    def forget(self, source_name: str) -> None:
        """Drops the record entirely; used when the source itself is deleted."""
        if self._records.pop(source_name, None) is not None:
            self._persist()

    # --- Mutations ---

    def mark_learned(self, source_name: str, term: str) -> None:
        record = self.ensure_initialized(source_name)
        key = term.lower()

        record.skipped = [t for t in record.skipped if t.lower() != key]
        if key not in record.learned_keys():
            record.learned.append(term)

        self._persist()

    def mark_skipped(self, source_name: str, term: str) -> None:
        record = self.ensure_initialized(source_name)
        key = term.lower()

        if key in record.learned_keys() or key in record.skipped_keys():
            return

        record.skipped.append(term)
        self._persist()

    def unmark_learned(self, source_name: str, term: str) -> None:
        record = self._records.get(source_name)
        if record is None:
            return
        key = term.lower()
        kept = [t for t in record.learned if t.lower() != key]
        if len(kept) == len(record.learned):
            return
        record.learned = kept
        self._persist()

    def unmark_skipped(self, source_name: str, term: str) -> None:
        record = self._records.get(source_name)
        if record is None:
            return
        key = term.lower()
        kept = [t for t in record.skipped if t.lower() != key]
        if len(kept) == len(record.skipped):
            return
        record.skipped = kept
        self._persist()

    def set_current_index(self, source_name: str, index: int) -> None:
        record = self.ensure_initialized(source_name)
        if record.current_index != index:
            record.current_index = index
            self._persist()

    # --- Queries ---

    def get(self, source_name: str) -> ProgressRecord:
        """Returns a copy; mutate through the tracker only."""
        record = self._records.get(source_name) or ProgressRecord()
        return record.model_copy(deep=True)

    def has(self, source_name: str) -> bool:
        return source_name in self._records

    def learned_count(self, source_name: str) -> int:
        record = self._records.get(source_name)
        return len(record.learned) if record else 0

    def skipped_count(self, source_name: str) -> int:
        record = self._records.get(source_name)
        return len(record.skipped) if record else 0

    async def total_count(self, source_name: str) -> int:
        source = await self.source_store.get_source(source_name)
        return source.total_words

    def snapshot(self) -> Dict[str, dict]:
        return {name: rec.model_dump(by_alias=True) for name, rec in self._records.items()}

    # --- Persistence ---

    def _load(self) -> Dict[str, ProgressRecord]:
        raw = self.state_store.read_json(self.storage_key, {})
        if not isinstance(raw, dict):
            logger.warning("progress_state_malformed", key=self.storage_key)
            return {}

        records: Dict[str, ProgressRecord] = {}
        for name, value in raw.items():
            try:
                record = ProgressRecord.model_validate(value)
            except PydanticValidationError:
                logger.warning("progress_record_dropped", source=name)
                continue
            # Older states may carry the same term in both lists
            learned = record.learned_keys()
            record.skipped = [t for t in record.skipped if t.lower() not in learned]
            records[name] = record
        return records

    def _persist(self) -> bool:
        error: Optional[str] = None
        try:
            ok = self.state_store.write_json(self.storage_key, self.snapshot())
        except OSError as e:
            ok, error = False, str(e)

        if not ok:
            logger.warning("progress_persist_failed", key=self.storage_key, error=error)
            warnings.warn(
                f"Progress could not be saved durably ({error or 'write rejected'}); "
                "keeping it in memory for this session.",
                PersistenceWarning,
                stacklevel=3,
            )
        return ok
