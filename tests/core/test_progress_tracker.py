# tests/core/test_progress_tracker.py
import pytest

from vocab_swipe.adapters.persistence.state_store import InMemoryStateStore
from vocab_swipe.core.domain.exceptions import PersistenceWarning
from vocab_swipe.core.use_cases.progress_tracker import ProgressTracker


class BrokenStateStore(InMemoryStateStore):
    """Reads work, every write is rejected."""

    def write_json(self, key, value):
        return False


class ExplodingStateStore(InMemoryStateStore):
    def write_json(self, key, value):
        raise OSError("disk full")


class TestMarking:
    def test_mark_learned_is_idempotent(self, tracker):
        tracker.mark_learned("Colors", "red")
        tracker.mark_learned("Colors", "red")
        tracker.mark_learned("Colors", "RED")

        assert tracker.get("Colors").learned == ["red"]
        assert tracker.learned_count("Colors") == 1

    def test_learning_removes_from_skipped(self, tracker):
        tracker.mark_skipped("Colors", "red")
        tracker.mark_learned("Colors", "red")

        record = tracker.get("Colors")
        assert record.learned == ["red"]
        assert record.skipped == []

    def test_skipping_a_learned_word_is_ignored(self, tracker):
        tracker.mark_learned("Colors", "red")
        tracker.mark_skipped("Colors", "red")

        assert tracker.skipped_count("Colors") == 0

    def test_mark_skipped_is_idempotent(self, tracker):
        tracker.mark_skipped("Colors", "blue")
        tracker.mark_skipped("Colors", "Blue")

        assert tracker.get("Colors").skipped == ["blue"]

    def test_unmark(self, tracker):
        tracker.mark_learned("Colors", "red")
        tracker.mark_skipped("Colors", "blue")

        tracker.unmark_learned("Colors", "RED")
        tracker.unmark_skipped("Colors", "blue")

        record = tracker.get("Colors")
        assert record.learned == []
        assert record.skipped == []

    def test_unmark_unknown_source_is_a_noop(self, tracker, state_store):
        tracker.unmark_learned("Nowhere", "x")
        assert not tracker.has("Nowhere")
        assert state_store.read_json("vocab_progress_v1") is None

    def test_reset_empties_only_that_source(self, tracker):
        tracker.mark_learned("Colors", "red")
        tracker.mark_learned("Animals", "Cat")

        tracker.reset("Colors")

        assert tracker.learned_count("Colors") == 0
        assert tracker.learned_count("Animals") == 1

    def test_counts_for_unknown_source(self, tracker):
        assert tracker.learned_count("Nope") == 0
        assert tracker.skipped_count("Nope") == 0

    def test_get_returns_a_copy(self, tracker):
        tracker.mark_learned("Colors", "red")
        tracker.get("Colors").learned.append("blue")

        assert tracker.learned_count("Colors") == 1

    def test_forget(self, tracker):
        tracker.mark_learned("Colors", "red")
        tracker.forget("Colors")
        assert not tracker.has("Colors")


class TestPersistence:
    def test_every_mutation_is_written(self, tracker, state_store):
        tracker.mark_learned("Colors", "red")

        stored = state_store.read_json("vocab_progress_v1")
        assert stored == {"Colors": {"learned": ["red"], "skipped": [], "currentIndex": 0}}

    def test_state_survives_a_restart(self, store, state_store):
        first = ProgressTracker(state_store, store)
        first.mark_learned("Colors", "red")
        first.mark_skipped("Colors", "blue")

        second = ProgressTracker(state_store, store)

        assert second.get("Colors").learned == ["red"]
        assert second.get("Colors").skipped == ["blue"]

    def test_storage_key_is_configurable(self, store, state_store):
        tracker = ProgressTracker(state_store, store, storage_key="other_key")
        tracker.mark_learned("Colors", "red")

        assert state_store.read_json("other_key") is not None
        assert state_store.read_json("vocab_progress_v1") is None

    def test_malformed_records_are_dropped(self, store):
        state = InMemoryStateStore({"vocab_progress_v1": {
            "Good": {"learned": ["a"], "skipped": []},
            "Bad": {"learned": "not-a-list"},
        }})

        tracker = ProgressTracker(state, store)

        assert tracker.has("Good")
        assert not tracker.has("Bad")

    def test_overlapping_lists_are_repaired_on_load(self, store):
        state = InMemoryStateStore({"vocab_progress_v1": {
            "Colors": {"learned": ["red"], "skipped": ["Red", "blue"]},
        }})

        tracker = ProgressTracker(state, store)

        assert tracker.get("Colors").skipped == ["blue"]

    def test_non_dict_state_starts_empty(self, store):
        tracker = ProgressTracker(InMemoryStateStore({"vocab_progress_v1": ["junk"]}), store)
        assert tracker.snapshot() == {}

    def test_rejected_write_warns_but_keeps_state(self, store):
        """
        Scenario: the state store refuses every write.
        Expected: a PersistenceWarning, no exception, in-memory state intact.
        """
        tracker = ProgressTracker(BrokenStateStore(), store)

        with pytest.warns(PersistenceWarning):
            tracker.mark_learned("Colors", "red")

        assert tracker.learned_count("Colors") == 1

    def test_os_error_on_write_is_not_raised(self, store):
        tracker = ProgressTracker(ExplodingStateStore(), store)

        with pytest.warns(PersistenceWarning, match="disk full"):
            tracker.mark_skipped("Colors", "blue")

        assert tracker.skipped_count("Colors") == 1


@pytest.mark.asyncio
class TestTotals:
    async def test_total_count_comes_from_the_source(self, tracker):
        assert await tracker.total_count("Colors") == 2
        assert await tracker.total_count("Animals") == 3
