# =============================================================================
# seo_core/sync/views.py
# Mounted collection views and list filtering
# =============================================================================
"""
CollectionView is the in-memory list a page renders. It loads through the
coherence policy, patches itself on video-updated events, and ignores the
result of any load that was superseded by a newer load or by unmount.
"""

from __future__ import annotations
import threading
from typing import Any, List, Optional

from seo_core.errors import SeoManagerError
from seo_core.logging import get_logger
from seo_core.sync.broadcaster import Subscription, Topic, UpdateBroadcaster
from seo_core.sync.coherence import CacheCoherencePolicy, ProgressCallback
from seo_core.sync.models import FetchProgress, Record
from seo_core.sync.namespaces import CacheNamespace

logger = get_logger(__name__)

SEO_FILTERS = ("all", "done", "pending")
UNASSIGNED = "unassigned"


class CollectionView:
    def __init__(
        self,
        coherence: CacheCoherencePolicy,
        broadcaster: UpdateBroadcaster,
        namespace: CacheNamespace,
    ):
        self.coherence = coherence
        self.broadcaster = broadcaster
        self.namespace = namespace
        self.records: List[Record] = []
        self.progress: float = 0.0
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0
        self._subscription: Optional[Subscription] = None
        self._lock = threading.Lock()

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    def mount(self, force_refresh: bool = False, on_progress: Optional[ProgressCallback] = None) -> bool:
        """Subscribe to updates and load. Returns True if records were applied."""
        if self._subscription is None:
            self._subscription = self.broadcaster.subscribe(Topic.VIDEO_UPDATED, self._on_video_updated)
        return self.load(force_refresh=force_refresh, on_progress=on_progress)

    def unmount(self) -> None:
        with self._lock:
            self._generation += 1
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation and self._subscription is not None

    def load(self, force_refresh: bool = False, on_progress: Optional[ProgressCallback] = None) -> bool:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.loading = True
            self.error = None
            self.progress = 0.0

        def track(event: FetchProgress) -> None:
            if self._is_current(generation):
                self.progress = event.percent
                if on_progress is not None:
                    on_progress(event)

        try:
            snapshot = self.coherence.load(self.namespace, force_refresh, track)
        except SeoManagerError as e:
            logger.error(f"Loading {self.namespace.name} failed: {e}")
            if self._is_current(generation):
                self.error = e.message
                self.loading = False
            return False

        if not self._is_current(generation):
            logger.debug(f"Discarding superseded load of {self.namespace.name}")
            return False

        with self._lock:
            self.records = list(snapshot.records)
            self.progress = 100.0
            self.loading = False
        return True

    def refresh(self, on_progress: Optional[ProgressCallback] = None) -> bool:
        return self.load(force_refresh=True, on_progress=on_progress)

    def _on_video_updated(self, record: Record) -> None:
        record_id = record.get("id")
        with self._lock:
            for i, existing in enumerate(self.records):
                if existing.get("id") == record_id:
                    records = list(self.records)
                    records[i] = {**existing, **record}
                    self.records = records
                    return

    def record(self, record_id: Any) -> Optional[Record]:
        for r in self.records:
            if r.get("id") == record_id:
                return r
        return None


def member_options(records: List[Record]) -> List[str]:
    """Distinct assignee names, sorted."""
    return sorted({r["assigned_to"] for r in records if r.get("assigned_to")})


def filter_videos(
    records: List[Record],
    search: str = "",
    seo_filter: str = "all",
    member_filter: str = "all",
) -> List[Record]:
    """
    Narrow a video list for display.

    Args:
        search: Case-insensitive substring of video_id
        seo_filter: "all", "done" or "pending"
        member_filter: "all", "unassigned" or an assignee name
    """
    if seo_filter not in SEO_FILTERS:
        raise ValueError(f"Unknown SEO filter: {seo_filter}")

    needle = search.strip().lower()
    result = []
    for record in records:
        if needle and needle not in str(record.get("video_id") or "").lower():
            continue
        if seo_filter == "done" and not record.get("is_seo_done"):
            continue
        if seo_filter == "pending" and record.get("is_seo_done"):
            continue
        if member_filter == UNASSIGNED and record.get("assigned_to"):
            continue
        if member_filter not in ("all", UNASSIGNED) and record.get("assigned_to") != member_filter:
            continue
        result.append(record)
    return result
