# vocab_swipe/core/domain/validation.py
"""
Ingestion rules shared by every path that brings words into a source:
file load, import, bulk-add and single-add all go through here.
"""
from typing import Any, List, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from vocab_swipe.core.domain.exceptions import ValidationError
from vocab_swipe.core.domain.models import WordEntry

_FORBIDDEN_NAME_CHARS = ("/", "\\", "\x00")


def validate_source_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("source name must be a non-empty string")
    name = name.strip()
    if name.startswith(".") or any(ch in name for ch in _FORBIDDEN_NAME_CHARS):
        raise ValidationError(f"source name '{name}' contains forbidden characters")
    return name


def parse_word_entry(raw: Any, position: int = 0) -> WordEntry:
    if isinstance(raw, WordEntry):
        return raw
    if not isinstance(raw, dict):
        raise ValidationError(f"word #{position + 1} must be an object")
    try:
        return WordEntry.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "term"
        raise ValidationError(f"word #{position + 1} has an invalid '{field}': {first.get('msg')}")


def parse_word_entries(raw: Any, allow_empty: bool = False) -> List[WordEntry]:
    """
    Validates a caller-supplied word list.

    Raises ValidationError unless `raw` is a sequence of objects that each
    carry a non-empty `term`. Empty lists are rejected unless `allow_empty`.
    """
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("words must be an array")
    if not raw and not allow_empty:
        raise ValidationError("words must not be empty")
    return [parse_word_entry(item, i) for i, item in enumerate(raw)]


def dedupe_entries(entries: Sequence[WordEntry]) -> Tuple[List[WordEntry], List[str]]:
    """Keeps the first occurrence of each term (case-insensitive)."""
    seen = set()
    unique: List[WordEntry] = []
    dropped: List[str] = []
    for entry in entries:
        if entry.key in seen:
            dropped.append(entry.term)
            continue
        seen.add(entry.key)
        unique.append(entry)
    return unique, dropped
