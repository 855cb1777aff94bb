# =============================================================================
# seo_core/sync/local_cache.py
# Snapshot cache over a key/value storage backend
# =============================================================================
"""
LocalCache stores one CollectionSnapshot per namespace as two entries:

    <data_key>  JSON array of records
    <time_key>  fetched_at as a decimal epoch-ms string

A snapshot is present only when both entries decode. Anything unreadable is
treated as absent; a failed write is logged and the cache carries on.
"""

from __future__ import annotations
import json
import threading
from typing import TYPE_CHECKING, Callable, Optional

from seo_core.errors import CacheStorageError
from seo_core.logging import get_logger
from seo_core.sync.models import CollectionSnapshot, now_ms
from seo_core.sync.storage import KeyValueStorage

if TYPE_CHECKING:
    from seo_core.sync.broadcaster import UpdateBroadcaster
    from seo_core.sync.namespaces import CacheNamespace

logger = get_logger(__name__)


def encode_records(snapshot: CollectionSnapshot) -> str:
    return json.dumps(snapshot.records, default=str, separators=(",", ":"))


def decode_snapshot(data: str, timestamp: str) -> CollectionSnapshot:
    """
    Rebuild a snapshot from its stored entries.

    Raises:
        ValueError: If either entry is malformed
    """
    records = json.loads(data)
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError("cached records are not a list of objects")
    fetched_at = int(timestamp.strip())
    return CollectionSnapshot(records=records, fetched_at=fetched_at)


class LocalCache:
    """
    Namespaced snapshot cache.

    `lock` serializes read-modify-write sequences (see CacheCoherencePolicy)
    against whole-snapshot writes from loads.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], int] = now_ms,
        broadcaster: Optional["UpdateBroadcaster"] = None,
    ):
        self.storage = storage
        self.clock = clock
        self.broadcaster = broadcaster
        self.lock = threading.RLock()

    def get(self, namespace: "CacheNamespace") -> Optional[CollectionSnapshot]:
        """Return the cached snapshot, or None if absent or unreadable."""
        try:
            data = self.storage.get_item(namespace.data_key)
            timestamp = self.storage.get_item(namespace.time_key)
        except CacheStorageError as e:
            logger.warning(f"Cache read failed for {namespace.name}: {e.message}")
            return None

        if data is None or timestamp is None:
            return None

        try:
            return decode_snapshot(data, timestamp)
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring corrupt cache entry for {namespace.name}: {e}")
            return None

    def is_fresh(
        self,
        snapshot: CollectionSnapshot,
        ttl_ms: int,
        now: Optional[int] = None,
    ) -> bool:
        now = self.clock() if now is None else now
        return now - snapshot.fetched_at < ttl_ms

    def get_fresh(self, namespace: "CacheNamespace") -> Optional[CollectionSnapshot]:
        snapshot = self.get(namespace)
        if snapshot is not None and self.is_fresh(snapshot, namespace.ttl_ms):
            return snapshot
        return None

    def put(self, namespace: "CacheNamespace", snapshot: CollectionSnapshot) -> bool:
        """
        Replace the namespace's snapshot.

        The timestamp entry is dropped first and written last, so a write
        that fails part-way leaves the namespace absent rather than pairing
        new records with an old timestamp.

        Returns:
            True if both entries were written
        """
        payload = encode_records(snapshot)
        with self.lock:
            try:
                self.storage.remove_item(namespace.time_key)
                self.storage.set_item(namespace.data_key, payload)
                self.storage.set_item(namespace.time_key, str(int(snapshot.fetched_at)))
            except CacheStorageError as e:
                logger.warning(
                    f"Cache write failed for {namespace.name} "
                    f"({len(snapshot)} records): {e.message}"
                )
                return False

        logger.debug(f"Cached {len(snapshot)} records for {namespace.name}")
        self._announce(namespace.data_key)
        return True

    def invalidate(self, namespace: "CacheNamespace") -> None:
        with self.lock:
            try:
                self.storage.remove_item(namespace.time_key)
                self.storage.remove_item(namespace.data_key)
            except CacheStorageError as e:
                logger.warning(f"Cache invalidation failed for {namespace.name}: {e.message}")
                return
        self._announce(namespace.data_key)

    def _announce(self, key: str) -> None:
        if self.broadcaster is None:
            return
        from seo_core.sync.broadcaster import StorageEvent, Topic
        self.broadcaster.publish(Topic.STORAGE, StorageEvent(key=key))
