"""
Persisted Client State.

Provides the process-wide key-value store that the login flow writes the
auth token and role into. Everything else in the application only reads
from it.

The store is:
- Shared by every controller in the process
- Optionally persisted to a JSON file so it survives restarts
- Tolerant of a missing or corrupt file (it simply starts empty)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    String key-value store with optional JSON file persistence.

    Mirrors the semantics of browser local storage: values are strings,
    missing keys read as None, and writes are visible immediately to every
    reader holding the same store.
    """

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the store.

        Args:
            path: Optional JSON file backing the store (in-memory if None)
        """
        self._path = Path(path) if path else None
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session store {self._path}: {e}")
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): str(v) for k, v in raw.items() if v is not None}

    def _flush(self):
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        """Get a value, or None if the key is absent."""
        return self._data.get(key)

    def set(self, key: str, value: Any):
        """Set a value (stored as a string)."""
        self._data[key] = str(value)
        self._flush()

    def remove(self, key: str):
        """Remove a key if present."""
        if self._data.pop(key, None) is not None:
            self._flush()

    def clear(self):
        """Remove every key."""
        self._data.clear()
        self._flush()
        logger.debug("Cleared key-value store")

    def reload(self):
        """
        Re-read the backing file (picks up writes from another process).

        The new contents replace the old in a single assignment, so this can
        run in a worker thread while readers stay on the event loop.
        """
        if self._path is None:
            return
        self._data = self._read()


# Process-wide store, created on first use
_store: Optional[KeyValueStore] = None


def get_store(path: Optional[str] = None) -> KeyValueStore:
    """Get the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = KeyValueStore(path)
    return _store
