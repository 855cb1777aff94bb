# =============================================================================
# seo_core/sync/storage.py
# Key/value storage backends for the local cache
# =============================================================================
"""
String key -> string value stores standing in for browser storage.

- MemoryStorage: process memory, optional byte quota (session scope)
- FileStorage:   one file per key under a directory (persistent scope)

Backends raise CacheStorageError on failure; LocalCache decides what a
failure means.
"""

from __future__ import annotations
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

from seo_core.errors import CacheStorageError
from seo_core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(ABC):
    """Minimal storage surface used by LocalCache and the session helpers."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string, or None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys."""

    def clear(self) -> None:
        for key in self.keys():
            self.remove_item(key)


class MemoryStorage(KeyValueStorage):
    """
    In-process storage.

    Args:
        quota_bytes: Optional cap on the total size of keys and values;
            a write that would exceed it raises CacheStorageError.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()
        self.quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        size = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
        return size + len(key) + len(value)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
                raise CacheStorageError(
                    f"Storage quota of {self.quota_bytes} bytes exceeded",
                    key=key,
                )
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class FileStorage(KeyValueStorage):
    """
    One UTF-8 file per key under `directory`.

    Writes go to a temp file in the same directory and are moved into place,
    so readers see either the old value or the new one.
    """

    SUFFIX = ".entry"

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{self.SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise CacheStorageError(f"Could not read cache entry: {e}", key=key) from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            raise CacheStorageError(f"Could not write cache entry: {e}", key=key) from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise CacheStorageError(f"Could not remove cache entry: {e}", key=key) from e

    def keys(self) -> List[str]:
        return [
            unquote(p.name[: -len(self.SUFFIX)])
            for p in self.directory.glob(f"*{self.SUFFIX}")
        ]
