"""Client-local key-value state for preferences and budgets.

Stores are injected into the components that need them, so the
dashboard can keep state in a JSON file while tests use
:class:`MemoryStore`.  Reads and writes through :func:`read_value` and
:func:`write_value` are best-effort: failures are logged and the caller
sees the default (on read) or nothing (on write).
"""

from __future__ import annotations

import copy
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .logger import get_logger

logger = get_logger(__name__)

PREFERENCES_KEY = 'filters:v1'
BUDGETS_KEY = 'budgets:v1'
DARK_MODE_KEY = 'pref:dark'

DEFAULT_PREFERENCES: Dict[str, str] = {
    'q': '',
    'from': '',
    'to': '',
    'category': '',
    'month': '',
}


class StoreError(Exception):
    """Raised by a store when a read or write cannot be completed."""


class KeyValueStore(ABC):
    """Minimal persistence interface for JSON-serialisable values."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""


class MemoryStore(KeyValueStore):
    """In-process store, used in tests and as a fallback."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Store every key in a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Unexpected content in {self.path}")
        return data

    def _dump(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('w', encoding='utf-8') as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Could not write {self.path}: {e}") from e

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        try:
            data = self._load()
        except StoreError:
            # A corrupt file is replaced rather than blocking every write.
            data = {}
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


def read_value(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """Read ``key`` from ``store``, returning ``default`` on any store failure."""
    try:
        value = store.get(key)
    except StoreError as e:
        logger.warning("Falling back to default for %s: %s", key, e)
        return default
    return default if value is None else value


def write_value(store: KeyValueStore, key: str, value: Any) -> bool:
    """Write ``key`` to ``store``; returns ``False`` when the write failed."""
    try:
        store.set(key, value)
    except StoreError as e:
        logger.warning("Dropped write of %s: %s", key, e)
        return False
    return True


def load_preferences(store: KeyValueStore) -> Dict[str, str]:
    """Saved filter and month preferences merged over the defaults."""
    raw = read_value(store, PREFERENCES_KEY, {})
    merged = DEFAULT_PREFERENCES.copy()
    if not isinstance(raw, dict):
        return merged
    for key in DEFAULT_PREFERENCES:
        value = raw.get(key)
        if isinstance(value, str):
            merged[key] = value
    return merged


def save_preferences(store: KeyValueStore, preferences: Dict[str, Any]) -> bool:
    payload = {key: str(preferences.get(key) or '') for key in DEFAULT_PREFERENCES}
    return write_value(store, PREFERENCES_KEY, payload)


def load_dark_mode(store: KeyValueStore) -> bool:
    return bool(read_value(store, DARK_MODE_KEY, False))


def save_dark_mode(store: KeyValueStore, enabled: bool) -> bool:
    return write_value(store, DARK_MODE_KEY, bool(enabled))
