# =============================================================================
# seo_core/sync/navigation.py
# Previous/next navigation across the last displayed video list
# =============================================================================

from __future__ import annotations
import json
from typing import List, Optional, Tuple

from seo_core.errors import CacheStorageError
from seo_core.logging import get_logger
from seo_core.sync.storage import KeyValueStorage

logger = get_logger(__name__)

QUEUE_KEY = "video_queue"
PREFETCH_RADIUS = 10


class VideoNavigator:
    """
    Remembers the ordered ids of the list the user last browsed (session
    scope) so the detail page can step through them.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def set_queue(self, video_ids: List[str]) -> None:
        try:
            self.storage.set_item(QUEUE_KEY, json.dumps(list(video_ids)))
        except CacheStorageError as e:
            logger.warning(f"Could not store navigation queue: {e.message}")

    def queue(self) -> List[str]:
        try:
            raw = self.storage.get_item(QUEUE_KEY)
        except CacheStorageError:
            return []
        if not raw:
            return []
        try:
            ids = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt navigation queue")
            return []
        return [str(i) for i in ids] if isinstance(ids, list) else []

    def neighbors(self, video_id: str) -> Tuple[Optional[str], Optional[str]]:
        """(previous id, next id) around video_id; None at either end or if unknown."""
        ids = self.queue()
        try:
            index = ids.index(video_id)
        except ValueError:
            return None, None
        prev_id = ids[index - 1] if index > 0 else None
        next_id = ids[index + 1] if index < len(ids) - 1 else None
        return prev_id, next_id

    def position(self, video_id: str) -> Optional[Tuple[int, int]]:
        """1-based position and queue length."""
        ids = self.queue()
        if video_id not in ids:
            return None
        return ids.index(video_id) + 1, len(ids)

    def prefetch_window(self, video_id: str, radius: int = PREFETCH_RADIUS) -> List[str]:
        """Up to `radius` ids after video_id, then up to `radius` before it (nearest first)."""
        ids = self.queue()
        try:
            index = ids.index(video_id)
        except ValueError:
            return []
        following = ids[index + 1:index + 1 + radius]
        preceding = list(reversed(ids[max(0, index - radius):index]))
        return following + preceding
