# =============================================================================
# seo_core/sync/__init__.py
# Client-side cache synchronization and optimistic updates
# =============================================================================
"""
Cache synchronization layer.

Provides:
- Paged collection fetch with bounded concurrency (BatchFetcher)
- Namespaced, time-boxed snapshot cache (LocalCache)
- Cache trust/refresh and cross-namespace reconciliation (CacheCoherencePolicy)
- Optimistic mutations with rollback (OptimisticMutator)
- Serial background execution of remote writes (BackgroundActionQueue)
- In-session change events (UpdateBroadcaster)
- Per-session owner of all of the above (CacheStore)
"""

from .models import (
    Record,
    CollectionSnapshot,
    FetchProgress,
    Notification,
    NotificationKind,
    PendingAction,
    RecordPhase,
    RecordState,
    now_ms,
)
from .storage import KeyValueStorage, MemoryStorage, FileStorage
from .local_cache import LocalCache, encode_records, decode_snapshot
from .namespaces import (
    CacheNamespace,
    NamespaceKind,
    NamespaceRegistry,
    default_registry,
    ALL_VIDEOS,
    CHANNEL_VIDEOS,
    VIDEO_COLUMNS,
)
from .batch_fetcher import BatchFetcher
from .broadcaster import UpdateBroadcaster, Topic, StorageEvent, Subscription
from .notifications import NotificationCenter
from .action_queue import BackgroundActionQueue, QueueStatus, DEFAULT_ERROR_MESSAGE
from .coherence import CacheCoherencePolicy
from .optimistic import OptimisticMutator, RecordStateStore
from .views import CollectionView, filter_videos, member_options
from .navigation import VideoNavigator
from .cache_store import CacheStore

__all__ = [
    "Record",
    "CollectionSnapshot",
    "FetchProgress",
    "Notification",
    "NotificationKind",
    "PendingAction",
    "RecordPhase",
    "RecordState",
    "now_ms",
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
    "LocalCache",
    "encode_records",
    "decode_snapshot",
    "CacheNamespace",
    "NamespaceKind",
    "NamespaceRegistry",
    "default_registry",
    "ALL_VIDEOS",
    "CHANNEL_VIDEOS",
    "VIDEO_COLUMNS",
    "BatchFetcher",
    "UpdateBroadcaster",
    "Topic",
    "StorageEvent",
    "Subscription",
    "NotificationCenter",
    "BackgroundActionQueue",
    "QueueStatus",
    "DEFAULT_ERROR_MESSAGE",
    "CacheCoherencePolicy",
    "OptimisticMutator",
    "RecordStateStore",
    "CollectionView",
    "filter_videos",
    "member_options",
    "VideoNavigator",
    "CacheStore",
]
