"""Key-value stores backing the source catalog."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal persistence contract used by SourceCatalog."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """In-process store. Values are deep-copied through JSON on the way in and out."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)


class JsonFileStore:
    """
    Store persisted as a single JSON object on disk.

    Unreadable or malformed files are treated as empty so a corrupted
    catalog falls back to the built-in defaults.
    """

    def __init__(self, path: str):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)
        logger.debug("Persisted %s to %s", key, self.path)
