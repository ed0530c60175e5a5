# vocab_swipe/core/domain/events.py
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Any
from datetime import datetime, timezone
import uuid

class EventType(str, Enum):
    """
    Registry of study session notifications.
    The presentation layer subscribes to these instead of being called back directly.
    """
    SOURCE_SELECTED = "source.selected"
    WORD_CHANGED = "word.changed"
    SOURCE_COMPLETED = "source.completed"
    PROGRESS_CHANGED = "progress.changed"
    ENGINE_ERROR = "engine.error"

class SessionEvent(BaseModel):
    """
    The standard envelope for engine notifications.

    Attributes:
        id: Unique UUID.
        type: The classification of the event.
        payload: Event data (e.g., {'source': 'Colors', 'term': 'red'}).
        timestamp: When the event occurred (UTC, epoch seconds).
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: EventType
    payload: Dict[str, Any] = Field(default_factory=dict)
    timestamp: float = Field(default_factory=lambda: datetime.now(timezone.utc).timestamp())

    model_config = ConfigDict(use_enum_values=True)
