# tests/core/test_study_session.py
import asyncio

import pytest

from vocab_swipe.core.domain.events import EventType
from vocab_swipe.core.domain.exceptions import (
    NoActiveSourceError,
    SourceNotFoundError,
    ValidationError,
)
from vocab_swipe.core.domain.models import SelectionPolicy, SelectorState
from vocab_swipe.core.use_cases import StudySession, WordSelector, WordSourceStore


def event_types(events):
    return [e.type for e in events]


@pytest.mark.asyncio
class TestSelection:
    async def test_select_presents_a_word(self, session, events):
        result = await session.select_source("Colors")

        assert result.state == SelectorState.PRESENTING
        assert result.word.term in {"red", "blue"}
        assert result.total_count == 2
        assert session.active_source == "Colors"
        assert event_types(events)[:2] == [EventType.SOURCE_SELECTED.value, EventType.WORD_CHANGED.value]

    async def test_select_initializes_progress(self, session, tracker):
        await session.select_source("Colors")
        assert tracker.has("Colors")

    async def test_select_unknown_source(self, session, events):
        with pytest.raises(SourceNotFoundError):
            await session.select_source("Nonexistent")

        assert event_types(events) == [EventType.ENGINE_ERROR.value]

    async def test_actions_before_selection(self, session):
        with pytest.raises(NoActiveSourceError):
            await session.next_word()
        with pytest.raises(NoActiveSourceError):
            await session.mark_learned()

    async def test_stale_selection_is_dropped(self, repo, tracker, rng, event_bus):
        """
        Scenario: 'Animals' is selected, then 'Colors' before Animals finished loading.
        Expected: the Animals result is discarded; Colors stays active.
        """
        release_animals = asyncio.Event()

        class SlowStore(WordSourceStore):
            async def get_source(self, name):
                if name == "Animals":
                    await release_animals.wait()
                return await super().get_source(name)

        session = StudySession(SlowStore(repo), tracker, WordSelector(rng=rng), event_bus)

        slow = asyncio.create_task(session.select_source("Animals"))
        await asyncio.sleep(0)
        fast = await session.select_source("Colors")
        release_animals.set()
        late = await slow

        assert late is None
        assert fast.source_name == "Colors"
        assert session.active_source == "Colors"
        assert session.current_word.term in {"red", "blue"}

    async def test_failed_selection_keeps_the_previous_card(self, session):
        """
        Scenario: 'Colors' is being studied, then a misspelt source is selected.
        Expected: the error propagates and Colors stays active with the same card.
        """
        first = await session.select_source("Colors")

        with pytest.raises(SourceNotFoundError):
            await session.select_source("Typo")

        assert session.active_source == "Colors"
        assert session.current_word == first.word
        assert session.state == SelectorState.PRESENTING
        result = await session.next_word()
        assert result.source_name == "Colors"


@pytest.mark.asyncio
class TestLearning:
    async def test_learning_every_word_completes_the_source(self, session, events):
        """
        Scenario: Colors = [red, blue]; learn the presented word twice.
        Expected: Completed, 2/2 learned, SOURCE_COMPLETED published.
        """
        await session.select_source("Colors")

        after_first = await session.mark_learned()
        remaining = {"red", "blue"} - {after_first.word.term}
        assert len(remaining) == 1
        assert after_first.learned_count == 1

        done = await session.mark_learned()

        assert done.completed
        assert done.word is None
        assert done.learned_count == 2
        assert session.state == SelectorState.COMPLETED
        assert EventType.SOURCE_COMPLETED.value in event_types(events)

    async def test_learned_word_never_returns(self, session):
        await session.select_source("Animals")
        await session.mark_learned("Cat")

        for _ in range(20):
            result = await session.next_word()
            assert result.word.term != "Cat"

    async def test_completed_is_sticky(self, session):
        await session.select_source("Colors")
        await session.mark_learned("red")
        await session.mark_learned("blue")

        again = await session.next_word()

        assert again.completed
        assert again.word is None

    async def test_skip_keeps_the_word_eligible(self, session):
        await session.select_source("Colors")
        await session.mark_skipped("red")
        await session.mark_learned("blue")

        result = await session.next_word()

        assert result.word.term == "red"
        assert result.skipped_count == 1

    async def test_mark_without_presented_word(self, session):
        await session.select_source("Colors")
        await session.mark_learned("red")
        await session.mark_learned("blue")

        with pytest.raises(ValidationError):
            await session.mark_skipped()

    async def test_progress_events(self, session, events):
        await session.select_source("Colors")
        events.clear()

        await session.mark_skipped("red")

        progress = [e for e in events if e.type == EventType.PROGRESS_CHANGED.value]
        assert progress[0].payload["action"] == "skipped"
        assert progress[0].payload["term"] == "red"
        assert progress[0].payload["skipped"] == 1

    async def test_sequential_walks_in_order(self, sequential_session, tracker):
        first = await sequential_session.select_source("Animals")
        assert first.word.term == "Cat"

        second = await sequential_session.mark_learned()
        assert second.word.term == "Dog"
        assert tracker.get("Animals").current_index == 1

    async def test_empty_source_is_immediately_completed(self, session, seeded_dir):
        (seeded_dir / "Blank.data").write_text("[]", encoding="utf-8")

        result = await session.select_source("Blank")

        assert result.completed
        assert result.total_count == 0

    async def test_term_outside_the_source_is_rejected(self, session):
        await session.select_source("Colors")

        with pytest.raises(ValidationError):
            await session.mark_learned("purple")
        with pytest.raises(ValidationError):
            await session.mark_skipped("pink")

        summary = await session.progress_summary()
        assert (summary.learned, summary.skipped, summary.total) == (0, 0, 2)

    async def test_explicit_term_is_stored_as_written_in_the_source(self, session, tracker):
        await session.select_source("Animals")

        await session.mark_learned("cAT")

        assert tracker.get("Animals").learned == ["Cat"]


@pytest.mark.asyncio
class TestResetAndUnmark:
    async def test_reset_after_completion(self, session):
        await session.select_source("Colors")
        await session.mark_learned("red")
        await session.mark_learned("blue")

        result = await session.reset()

        assert result.state == SelectorState.PRESENTING
        assert result.learned_count == 0
        assert result.word.term in {"red", "blue"}

    async def test_reset_other_source(self, session, tracker):
        await session.select_source("Colors")
        tracker.mark_learned("Animals", "Cat")

        result = await session.reset("Animals")

        assert result is None
        assert tracker.learned_count("Animals") == 0
        assert session.active_source == "Colors"

    async def test_unmark_reopens_completed_source(self, session):
        await session.select_source("Colors")
        await session.mark_learned("red")
        await session.mark_learned("blue")

        summary = await session.unmark_learned("blue")
        result = await session.next_word()

        assert summary.learned == 1
        assert summary.total == 2
        assert result.word.term == "blue"

    async def test_unmark_skipped(self, session, events):
        await session.select_source("Colors")
        await session.mark_skipped("red")
        events.clear()

        summary = await session.unmark_skipped("red")

        assert summary.skipped == 0
        assert events[0].type == EventType.PROGRESS_CHANGED.value
        assert events[0].payload["action"] == "unskipped"


@pytest.mark.asyncio
class TestReporting:
    async def test_progress_summary(self, session):
        await session.select_source("Animals")
        await session.mark_learned("Cat")

        summary = await session.progress_summary()

        assert (summary.learned, summary.total, summary.percentage) == (1, 3, 33)

    async def test_all_progress(self, session, tracker):
        tracker.mark_learned("Colors", "red")

        summaries = {s.source_name: s for s in await session.all_progress()}

        assert summaries["Colors"].learned == 1
        assert summaries["Animals"].learned == 0

    async def test_history_joins_entries(self, session, tracker):
        tracker.mark_learned("Animals", "cat")
        tracker.mark_skipped("Animals", "Dog")
        tracker.mark_learned("Colors", "gone-from-source")

        history = await session.history()

        assert [i.word.term for i in history.learned] == ["Cat"]
        assert history.learned[0].word.translation == "con mèo"
        assert [i.word.term for i in history.skipped] == ["Dog"]
        assert history.total_learned == 1
        assert history.total_skipped == 1
        assert history.total_words == 5

    async def test_history_filter(self, session, tracker):
        tracker.mark_learned("Animals", "Cat")
        tracker.mark_learned("Colors", "red")

        history = await session.history("Colors")

        assert [i.source_name for i in history.learned] == ["Colors"]


@pytest.mark.asyncio
class TestDeletion:
    async def test_delete_active_source(self, session, tracker):
        await session.select_source("Colors")
        await session.mark_learned("red")

        await session.delete_source("Colors")

        assert session.active_source is None
        assert not tracker.has("Colors")
        with pytest.raises(SourceNotFoundError):
            await session.select_source("Colors")

    async def test_delete_missing_source(self, session, events):
        with pytest.raises(SourceNotFoundError):
            await session.delete_source("Ghost")
        assert event_types(events) == [EventType.ENGINE_ERROR.value]


@pytest.mark.asyncio
async def test_policy_is_exposed_on_selector(sequential_session):
    assert sequential_session.selector.policy == SelectionPolicy.SEQUENTIAL
