from __future__ import annotations

"""Local storage tiers: the persistent settings cache and the session flag.

Both sit on top of a tiny `KeyValueStore` interface so the browser-style
localStorage / sessionStorage pair can be swapped for files, memory or
anything else. Store implementations raise `CacheUnavailable`; the wrappers
below log and swallow it, the cache being a convenience tier only.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

from .errors import CacheUnavailable
from .settings import SettingsRecord

logger = logging.getLogger(__name__)

SETTINGS_CACHE_KEY = "admin_settings_v1"
SESSION_FLAG_KEY = "admin_token"
SESSION_OPEN_SENTINEL = "ok"


class KeyValueStore(ABC):
    """String key -> string value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; lives as long as the object (session scope)."""

    def __init__(self, initial: Dict[str, str] | None = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Persistent store backed by a single JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    # ------------------------------------------------------------------
    def _read_all(self) -> Dict[str, str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise CacheUnavailable(f"cannot read {self.path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CacheUnavailable(f"corrupt store file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CacheUnavailable(f"corrupt store file {self.path}: not an object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise CacheUnavailable(f"cannot write {self.path}: {exc}") from exc

    # ------------------------------------------------------------------
    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except CacheUnavailable:
            # a corrupt file is replaced rather than blocking every write
            data = {}
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


class LocalCache:
    """Settings cache tier addressed by one fixed key."""

    def __init__(self, store: KeyValueStore, key: str = SETTINGS_CACHE_KEY):
        self.store = store
        self.key = key

    def read(self) -> Any | None:
        """Return the parsed cache entry, or None when missing/unreadable."""
        try:
            text = self.store.get(self.key)
        except CacheUnavailable as exc:
            logger.warning("Settings cache unavailable on read: %s", exc)
            return None
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            logger.warning("Ignoring unparseable settings cache entry")
            return None

    def _write(self, record: SettingsRecord) -> bool:
        try:
            self.store.set(self.key, json.dumps(record.to_dict()))
        except CacheUnavailable as exc:
            logger.warning("Settings cache unavailable on write: %s", exc)
            return False
        return True

    def refresh_cache(self, record: SettingsRecord) -> bool:
        """Write-through after a successful remote load/save (normalized record)."""
        written = self._write(record)
        if written:
            logger.debug("[cache] refreshed from remote")
        return written

    def best_effort_persist(self, record: SettingsRecord) -> bool:
        """Keep the draft locally when the remote authority could not take it."""
        written = self._write(record)
        if written:
            logger.info("[cache] draft persisted locally after failed remote save")
        return written


class SessionFlag:
    """Access-gate state kept in a session-scoped store."""

    def __init__(self, store: KeyValueStore, key: str = SESSION_FLAG_KEY):
        self.store = store
        self.key = key

    def is_set(self) -> bool:
        try:
            return self.store.get(self.key) == SESSION_OPEN_SENTINEL
        except CacheUnavailable:
            return False

    def set(self) -> None:
        try:
            self.store.set(self.key, SESSION_OPEN_SENTINEL)
        except CacheUnavailable as exc:
            logger.warning("Session store unavailable; gate open for this process only: %s", exc)

    def clear(self) -> None:
        try:
            self.store.remove(self.key)
        except CacheUnavailable as exc:
            logger.warning("Session store unavailable on logout: %s", exc)
