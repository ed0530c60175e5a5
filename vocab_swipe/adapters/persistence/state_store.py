# vocab_swipe/adapters/persistence/state_store.py
import copy
import json
import os
from pathlib import Path
from typing import Any, Dict

import structlog

from vocab_swipe.core.ports.state_store import IStateStore

logger = structlog.get_logger()


class JsonFileStateStore(IStateStore):
    """
    Durable key/value state kept in a single JSON document on disk.

    Plays the part browser localStorage plays for the web client: reads
    never fail (they fall back to the default), writes report success
    instead of raising.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _load_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("state_read_failed", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def read_json(self, key: str, default: Any = None) -> Any:
        return self._load_all().get(key, default)

    def write_json(self, key: str, value: Any) -> bool:
        data = self._load_all()
        data[key] = value
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("state_write_failed", path=str(self.path), key=key, error=str(e))
            if tmp_path.exists():
                tmp_path.unlink()
            return False
        return True


class InMemoryStateStore(IStateStore):
    """Process-local state; used by tests and ephemeral sessions."""

    def __init__(self, initial: Dict[str, Any] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    def read_json(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def write_json(self, key: str, value: Any) -> bool:
        # Round-trip through JSON so non-serialisable values fail like they would on disk
        try:
            self._data[key] = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            logger.error("state_write_failed", key=key, error=str(e))
            return False
        return True
