# vocab_swipe/core/domain/models.py
from enum import Enum
from typing import List, Optional, Set

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# --- Enums ---

class SelectionPolicy(str, Enum):
    """How the next card is picked among the unlearned words of a source."""
    RANDOM = "random"          # Uniform pick, independent per call
    SEQUENTIAL = "sequential"  # First unlearned word in stored order

class SelectorState(str, Enum):
    """Lifecycle of the word selector for the active source."""
    SELECTING = "selecting"
    PRESENTING = "presenting"
    COMPLETED = "completed"    # Terminal until an explicit reset

# --- Entities ---

class WordEntry(BaseModel):
    """
    A single vocabulary item.

    Accepts the canonical field names, their camelCase wire aliases and the
    legacy keys of older exports (`word`, `wordType`, `pronounce`, `translateVN`).
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    term: str = Field(..., validation_alias=AliasChoices("term", "word"))
    part_of_speech: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("part_of_speech", "partOfSpeech", "wordType"),
        serialization_alias="partOfSpeech",
    )
    pronunciation: Optional[str] = Field(
        None, validation_alias=AliasChoices("pronunciation", "pronounce")
    )
    meaning: Optional[str] = None
    translation: Optional[str] = Field(
        None, validation_alias=AliasChoices("translation", "translateVN")
    )
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    forms: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("term")
    @classmethod
    def _term_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("term must be a non-empty string")
        return value

    @field_validator("part_of_speech", "pronunciation", "meaning", "translation", "notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("synonyms", "antonyms", "forms", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return [] if value is None else value

    @property
    def key(self) -> str:
        """Case-insensitive identity of the word within its source."""
        return self.term.lower()

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class Source(BaseModel):
    """A named, ordered vocabulary set."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    words: List[WordEntry] = Field(default_factory=list)
    origin_link: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("origin_link", "originLink"),
        serialization_alias="originLink",
    )

    @property
    def total_words(self) -> int:
        return len(self.words)

    def find(self, term: str) -> Optional[WordEntry]:
        key = term.lower()
        for word in self.words:
            if word.key == key:
                return word
        return None

    def keys(self) -> Set[str]:
        return {w.key for w in self.words}

    def summary(self) -> "SourceSummary":
        return SourceSummary(name=self.name, total_words=self.total_words, origin_link=self.origin_link)


class SourceSummary(BaseModel):
    """Listing view of a source, without its words."""
    name: str
    total_words: int = 0
    origin_link: Optional[str] = None


class ProgressRecord(BaseModel):
    """
    Per-source learning state.

    Terms keep the casing they were first marked with; membership is
    checked case-insensitively. A term is never in both lists.
    """
    model_config = ConfigDict(populate_by_name=True)

    learned: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    current_index: int = Field(
        0,
        validation_alias=AliasChoices("current_index", "currentIndex"),
        serialization_alias="currentIndex",
    )

    def learned_keys(self) -> Set[str]:
        return {t.lower() for t in self.learned}

    def skipped_keys(self) -> Set[str]:
        return {t.lower() for t in self.skipped}

    def is_learned(self, term: str) -> bool:
        return term.lower() in self.learned_keys()

    def is_skipped(self, term: str) -> bool:
        return term.lower() in self.skipped_keys()

# --- Read Models ---

class NextWordResult(BaseModel):
    """What the presentation layer renders after a selection step."""
    source_name: str
    state: SelectorState
    word: Optional[WordEntry] = None
    learned_count: int = 0
    skipped_count: int = 0
    total_count: int = 0

    @property
    def completed(self) -> bool:
        return self.state == SelectorState.COMPLETED


class ProgressSummary(BaseModel):
    source_name: str
    learned: int
    skipped: int
    total: int

    @property
    def remaining(self) -> int:
        return max(self.total - self.learned, 0)

    @property
    def percentage(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.learned / self.total * 100)


class HistoryItem(BaseModel):
    """A learned or skipped term joined back to its entry."""
    source_name: str
    word: WordEntry


class History(BaseModel):
    learned: List[HistoryItem] = Field(default_factory=list)
    skipped: List[HistoryItem] = Field(default_factory=list)
    total_learned: int = 0
    total_skipped: int = 0
    total_words: int = 0

    @property
    def percentage(self) -> int:
        if self.total_words <= 0:
            return 0
        return round(self.total_learned / self.total_words * 100)
