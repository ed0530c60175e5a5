# vocab_swipe/core/use_cases/word_selector.py
import random
from typing import List, Optional

from vocab_swipe.core.domain.models import (
    ProgressRecord,
    SelectionPolicy,
    Source,
    WordEntry,
)


class WordSelector:
    """
    Picks the next word to present from a source, given its progress.

    No I/O happens here. `None` means the source is exhausted (Completed).

    Policies:
    - RANDOM: uniform pick among the unlearned words. Each call is
      independent, so an unlearned word may come back before every other
      word has been shown.
    - SEQUENTIAL: first unlearned word in stored order; its position is
      written to `progress.current_index` as a resume hint.
    """

    def __init__(
        self,
        policy: SelectionPolicy = SelectionPolicy.RANDOM,
        rng: Optional[random.Random] = None,
    ):
        self.policy = SelectionPolicy(policy)
        self.rng = rng or random.Random()

    def available_words(self, source: Source, progress: ProgressRecord) -> List[WordEntry]:
        learned = progress.learned_keys()
        return [w for w in source.words if w.key not in learned]

    def select_next(self, source: Source, progress: ProgressRecord) -> Optional[WordEntry]:
        if not source.words:
            return None

        if self.policy == SelectionPolicy.SEQUENTIAL:
            return self._first_unlearned(source, progress)

        available = self.available_words(source, progress)
        if not available:
            return None
        return self.rng.choice(available)

    def _first_unlearned(self, source: Source, progress: ProgressRecord) -> Optional[WordEntry]:
        learned = progress.learned_keys()
        for index, word in enumerate(source.words):
            if word.key not in learned:
                progress.current_index = index
                return word
        return None
