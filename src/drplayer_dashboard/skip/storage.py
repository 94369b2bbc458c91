"""Key-value stores and skip settings persistence."""

from __future__ import annotations

import json
from pathlib import Path
from threading import Lock
from typing import Optional, Protocol

from ..constants import SKIP_SETTINGS_STORAGE_KEY
from ..exceptions import StorageError
from ..logging import get_logger
from .models import SkipSettings

log = get_logger("skip.storage")


class KeyValueStore(Protocol):
    """String key-value store, the server-side stand-in for browser localStorage."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store for tests and in-process hosts."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Thread-safe store persisted as a JSON object of string values.

    A missing or corrupted file reads as empty.
    """

    def __init__(self, path: Path):
        self._lock = Lock()
        self.path = path

    def _read(self) -> dict[str, str]:
        """Read the backing file (must be called with lock held)."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (ValueError, OSError) as e:  # bad JSON or bad UTF-8
            log.warning(f"Unreadable store file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                    f.write("\n")
            except OSError as e:
                raise StorageError(f"Failed to write store: {e}", key=key, path=self.path) from e


class SkipSettingsStore:
    """Loads and saves SkipSettings under a single fixed key."""

    def __init__(self, store: KeyValueStore, key: str = SKIP_SETTINGS_STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> SkipSettings:
        """Read settings, falling back to defaults on any problem. Never raises."""
        try:
            saved = self.store.get(self.key)
        except Exception as e:
            log.warning(f"Failed to read skip settings: {e}")
            return SkipSettings()

        if not saved:
            log.debug("No saved skip settings, using defaults")
            return SkipSettings()

        try:
            data = json.loads(saved)
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")
            settings = SkipSettings.from_dict(data)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            log.warning(f"Failed to load skip settings: {e}")
            return SkipSettings()

        log.debug(f"Loaded skip settings: {settings}")
        return settings

    def save(self, settings: SkipSettings) -> None:
        """Write settings verbatim.

        Raises:
            StorageError: If the backing store rejects the write
        """
        try:
            self.store.set(self.key, json.dumps(settings.to_dict()))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save skip settings: {e}", key=self.key) from e
