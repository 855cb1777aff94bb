# =============================================================================
# seo_core/sync/cache_store.py
# Per-session owner of the cache synchronization components
# =============================================================================
"""
CacheStore - everything one signed-in session needs to read and mutate the
video collection consistently.

Usage:
    store = CacheStore.from_settings(settings, stores.videos, user_key="alice")
    store.init()
    view = store.view_all()
    view.mount()
    ...
    store.clear()   # on sign-out
"""

from __future__ import annotations
import re
from typing import Any, Callable, Optional

from seo_core.config import Settings
from seo_core.data.record_store import RecordStoreClient
from seo_core.logging import get_logger
from seo_core.sync.action_queue import BackgroundActionQueue
from seo_core.sync.batch_fetcher import BatchFetcher
from seo_core.sync.broadcaster import UpdateBroadcaster
from seo_core.sync.coherence import CacheCoherencePolicy
from seo_core.sync.local_cache import LocalCache
from seo_core.sync.models import now_ms
from seo_core.sync.namespaces import (
    ALL_VIDEOS,
    CHANNEL_VIDEOS,
    CacheNamespace,
    default_registry,
)
from seo_core.sync.navigation import VideoNavigator
from seo_core.sync.notifications import NotificationCenter
from seo_core.sync.optimistic import OptimisticMutator
from seo_core.sync.storage import FileStorage, KeyValueStorage, MemoryStorage
from seo_core.sync.views import CollectionView

logger = get_logger(__name__)


class CacheStore:
    def __init__(
        self,
        video_store: RecordStoreClient,
        persistent: Optional[KeyValueStorage] = None,
        session: Optional[KeyValueStorage] = None,
        page_size: int = 1000,
        fetch_concurrency: int = 3,
        all_videos_ttl_ms: Optional[int] = None,
        channel_videos_ttl_ms: Optional[int] = None,
        notification_ttl_s: float = 3.0,
        clock: Callable[[], int] = now_ms,
    ):
        self.persistent = persistent if persistent is not None else MemoryStorage()
        self.session = session if session is not None else MemoryStorage()
        self.clock = clock

        ttls = {}
        if all_videos_ttl_ms is not None:
            ttls["all_videos_ttl_ms"] = all_videos_ttl_ms
        if channel_videos_ttl_ms is not None:
            ttls["channel_videos_ttl_ms"] = channel_videos_ttl_ms

        self.broadcaster = UpdateBroadcaster()
        self.notifications = NotificationCenter(ttl_s=notification_ttl_s)
        self.registry = default_registry(**ttls)
        self.cache = LocalCache(self.persistent, clock=clock, broadcaster=self.broadcaster)
        self.fetcher = BatchFetcher(
            video_store, page_size=page_size, concurrency=fetch_concurrency, clock=clock
        )
        self.coherence = CacheCoherencePolicy(self.cache, self.registry, self.fetcher)
        self.queue = BackgroundActionQueue(self.notifications)
        self.mutator = OptimisticMutator(self.queue, self.coherence, self.broadcaster)
        self.navigator = VideoNavigator(self.session)
        self._initialized = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        video_store: RecordStoreClient,
        user_key: str = "anonymous",
    ) -> CacheStore:
        """Persistent cache under settings.cache_dir/<user_key>, session cache in memory."""
        safe_user = re.sub(r"[^A-Za-z0-9_.-]", "_", user_key) or "anonymous"
        return cls(
            video_store,
            persistent=FileStorage(settings.cache_dir / safe_user),
            session=MemoryStorage(),
            page_size=settings.page_size,
            fetch_concurrency=settings.fetch_concurrency,
            all_videos_ttl_ms=settings.all_videos_ttl_ms,
            channel_videos_ttl_ms=settings.channel_videos_ttl_ms,
            notification_ttl_s=settings.notification_ttl_s,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        logger.info("Cache store initialized")

    def clear(self) -> None:
        """Tear down session state: pending actions, subscriptions, cached data."""
        self.queue.discard_pending()
        self.queue.stop()
        self.broadcaster.clear()
        self.mutator.clear()
        self.notifications.clear()
        self.persistent.clear()
        self.session.clear()
        self._initialized = False
        logger.info("Cache store cleared")

    # -------------------------------------------------------------------------
    # Namespaces and views
    # -------------------------------------------------------------------------

    def global_namespace(self) -> CacheNamespace:
        return self.registry.get(ALL_VIDEOS)

    def channel_namespace(self, channel_id: Any) -> CacheNamespace:
        return self.registry.get(CHANNEL_VIDEOS, channel_id)

    def view(self, namespace: CacheNamespace) -> CollectionView:
        return CollectionView(self.coherence, self.broadcaster, namespace)

    def view_all(self) -> CollectionView:
        return self.view(self.global_namespace())

    def view_channel(self, channel_id: Any) -> CollectionView:
        return self.view(self.channel_namespace(channel_id))
