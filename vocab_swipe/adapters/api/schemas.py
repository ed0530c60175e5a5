# vocab_swipe/adapters/api/schemas.py
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from vocab_swipe.core.domain.models import (
    History,
    HistoryItem,
    NextWordResult,
    ProgressSummary,
    Source,
    SourceSummary,
)

# --- Request Models ---
# `words` stays loosely typed here: the domain validator owns the rules and
# answers with 400 and a readable reason rather than a 422 schema dump.

class SourceCreateRequest(BaseModel):
    name: Any = None
    words: Any = None
    origin_link: Optional[str] = Field(None, validation_alias=AliasChoices("originLink", "origin_link"))

class SourceUpdateRequest(BaseModel):
    words: Any = None
    origin_link: Optional[str] = Field(None, validation_alias=AliasChoices("originLink", "origin_link"))

class WordsAddRequest(BaseModel):
    words: Any = None

class SelectSourceRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Source to study")

class MarkRequest(BaseModel):
    term: Optional[str] = Field(None, description="Defaults to the word currently presented")

class ResetRequest(BaseModel):
    name: Optional[str] = Field(None, description="Defaults to the active source")

# --- Response Builders ---
# Responses keep the `{success: bool, ...}` envelope of the sources API.

def summary_body(summary: SourceSummary) -> Dict[str, Any]:
    return {
        "name": summary.name,
        "totalWords": summary.total_words,
        "originLink": summary.origin_link,
    }


def source_body(source: Source, include_words: bool = True) -> Dict[str, Any]:
    body = summary_body(source.summary())
    if include_words:
        body["words"] = [w.to_wire() for w in source.words]
    return body


def next_word_body(result: NextWordResult) -> Dict[str, Any]:
    return {
        "success": True,
        "source": result.source_name,
        "state": result.state.value,
        "completed": result.completed,
        "word": result.word.to_wire() if result.word else None,
        "learnedCount": result.learned_count,
        "skippedCount": result.skipped_count,
        "totalCount": result.total_count,
    }


def progress_body(summary: ProgressSummary) -> Dict[str, Any]:
    return {
        "source": summary.source_name,
        "learned": summary.learned,
        "skipped": summary.skipped,
        "total": summary.total,
        "remaining": summary.remaining,
        "percentage": summary.percentage,
    }


def _history_items(items: List[HistoryItem]) -> List[Dict[str, Any]]:
    return [{"source": item.source_name, **item.word.to_wire()} for item in items]


def history_body(history: History) -> Dict[str, Any]:
    return {
        "success": True,
        "stats": {
            "learned": history.total_learned,
            "skipped": history.total_skipped,
            "totalWords": history.total_words,
            "percentage": history.percentage,
        },
        "learned": _history_items(history.learned),
        "skipped": _history_items(history.skipped),
    }
