# vocab_swipe/core/use_cases/__init__.py
"""
Application Use Cases.

The selection/progress engine: the Word Source Store facade, the
Progress Tracker, the Word Selector and the Study Session that drives
them on behalf of one learner.
"""

from .source_store import WordSourceStore
from .progress_tracker import ProgressTracker
from .word_selector import WordSelector
from .study_session import StudySession

__all__ = [
    "WordSourceStore",
    "ProgressTracker",
    "WordSelector",
    "StudySession",
]
