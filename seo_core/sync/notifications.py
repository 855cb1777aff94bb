# =============================================================================
# seo_core/sync/notifications.py
# Ephemeral success/error messages
# =============================================================================

from __future__ import annotations
import threading
import time
from collections import deque
from typing import Callable, Deque, List

from seo_core.logging import get_logger
from seo_core.sync.models import Notification, NotificationKind

logger = get_logger(__name__)


class NotificationCenter:
    """
    Holds notifications until they expire (default 3 s) or are dismissed.

    `history` keeps the most recent notifications regardless of expiry.
    """

    def __init__(
        self,
        ttl_s: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
        history_size: int = 100,
    ):
        self.ttl_s = ttl_s
        self.clock = clock
        self._active: List[Notification] = []
        self.history: Deque[Notification] = deque(maxlen=history_size)
        self._lock = threading.Lock()

    def notify(self, message: str, kind: NotificationKind = NotificationKind.INFO) -> Notification:
        notification = Notification(message=message, kind=kind, created_at=self.clock())
        with self._lock:
            self._active.append(notification)
            self.history.append(notification)
        logger.debug(f"Notification ({kind.value}): {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationKind.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationKind.ERROR)

    def dismiss(self, notification_id: str) -> None:
        with self._lock:
            self._active = [n for n in self._active if n.id != notification_id]

    def active(self) -> List[Notification]:
        """Unexpired notifications, oldest first."""
        now = self.clock()
        with self._lock:
            self._active = [n for n in self._active if now - n.created_at < self.ttl_s]
            return list(self._active)

    def of_kind(self, kind: NotificationKind) -> List[Notification]:
        with self._lock:
            return [n for n in self.history if n.kind is kind]

    def clear(self) -> None:
        with self._lock:
            self._active.clear()
            self.history.clear()
