# tests/core/test_word_selector.py
import random

from vocab_swipe.core.domain.models import ProgressRecord, SelectionPolicy, Source, WordEntry
from vocab_swipe.core.use_cases.word_selector import WordSelector


def make_source(*terms):
    return Source(name="Test", words=[WordEntry(term=t) for t in terms])


class TestRandomPolicy:
    def test_only_unlearned_words_are_picked(self):
        """
        Scenario: 'red' is learned in a two-word source.
        Expected: every pick is 'blue'.
        """
        selector = WordSelector(SelectionPolicy.RANDOM, random.Random(7))
        source = make_source("red", "blue")
        progress = ProgressRecord(learned=["red"])

        picks = {selector.select_next(source, progress).term for _ in range(20)}

        assert picks == {"blue"}

    def test_learned_match_ignores_case(self):
        selector = WordSelector(SelectionPolicy.RANDOM, random.Random(7))
        source = make_source("Red", "blue")
        progress = ProgressRecord(learned=["RED", "Blue"])

        assert selector.select_next(source, progress) is None

    def test_skipped_words_stay_eligible(self):
        selector = WordSelector(SelectionPolicy.RANDOM, random.Random(7))
        source = make_source("red")
        progress = ProgressRecord(skipped=["red"])

        assert selector.select_next(source, progress).term == "red"

    def test_every_unlearned_word_can_come_up(self):
        selector = WordSelector(SelectionPolicy.RANDOM, random.Random(3))
        source = make_source("a", "b", "c")

        picks = {selector.select_next(source, ProgressRecord()).term for _ in range(100)}

        assert picks == {"a", "b", "c"}

    def test_seeded_generators_agree(self):
        source = make_source("a", "b", "c", "d", "e")
        first = WordSelector(rng=random.Random(42))
        second = WordSelector(rng=random.Random(42))

        run_a = [first.select_next(source, ProgressRecord()).term for _ in range(10)]
        run_b = [second.select_next(source, ProgressRecord()).term for _ in range(10)]

        assert run_a == run_b

    def test_empty_source_is_completed(self):
        selector = WordSelector()
        assert selector.select_next(make_source(), ProgressRecord()) is None


class TestSequentialPolicy:
    def test_first_unlearned_in_stored_order(self):
        selector = WordSelector(SelectionPolicy.SEQUENTIAL)
        source = make_source("one", "two", "three")
        progress = ProgressRecord(learned=["one"])

        word = selector.select_next(source, progress)

        assert word.term == "two"
        assert progress.current_index == 1

    def test_policy_accepts_plain_string(self):
        selector = WordSelector("sequential")
        assert selector.policy == SelectionPolicy.SEQUENTIAL

    def test_exhausted_source(self):
        selector = WordSelector(SelectionPolicy.SEQUENTIAL)
        source = make_source("one")
        assert selector.select_next(source, ProgressRecord(learned=["one"])) is None

    def test_available_words(self):
        selector = WordSelector(SelectionPolicy.SEQUENTIAL)
        source = make_source("one", "two")
        available = selector.available_words(source, ProgressRecord(learned=["two"]))
        assert [w.term for w in available] == ["one"]
