# =============================================================================
# seo_core/sync/action_queue.py
# Serial background execution of remote mutations
# =============================================================================
"""
BackgroundActionQueue - runs enqueued remote mutations one at a time.

Features:
- FIFO order, never two actions in flight
- Worker thread started lazily on first enqueue
- Per-action success/error callbacks
- Success/error notifications (error falls back to "Action failed")
- A failing action never blocks the ones behind it
"""

from __future__ import annotations
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Optional

from seo_core.logging import get_logger
from seo_core.sync.models import PendingAction
from seo_core.sync.notifications import NotificationCenter

logger = get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Action failed"


class QueueStatus(Enum):
    IDLE = "idle"
    PROCESSING = "processing"


@dataclass
class QueueStats:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0


class BackgroundActionQueue:
    """
    Usage:
        queue = BackgroundActionQueue(notifications)
        queue.enqueue(PendingAction(operation=lambda: service.toggle(...)))
    """

    def __init__(self, notifications: Optional[NotificationCenter] = None, name: str = "BackgroundActions"):
        self.notifications = notifications or NotificationCenter()
        self.name = name
        self.stats = QueueStats()
        self._pending: Deque[PendingAction] = deque()
        self._current: Optional[PendingAction] = None
        self._condition = threading.Condition()
        self._worker: Optional[threading.Thread] = None
        self._stopping = False

    @property
    def status(self) -> QueueStatus:
        with self._condition:
            if self._current is not None or self._pending:
                return QueueStatus.PROCESSING
            return QueueStatus.IDLE

    @property
    def pending_count(self) -> int:
        with self._condition:
            return len(self._pending)

    def enqueue(self, action: PendingAction) -> str:
        """Append an action and return its id. Returns immediately."""
        with self._condition:
            self._pending.append(action)
            self._ensure_worker()
            self._condition.notify_all()
        logger.debug(f"Queued action {action.id} ({len(self._pending)} pending)")
        return action.id

    def _ensure_worker(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            return
        self._stopping = False
        self._worker = threading.Thread(target=self._run, daemon=True, name=self.name)
        self._worker.start()

    def _run(self) -> None:
        while True:
            with self._condition:
                while not self._pending and not self._stopping:
                    self._condition.wait()
                if not self._pending:
                    break
                action = self._pending.popleft()
                self._current = action

            try:
                self._process(action)
            finally:
                with self._condition:
                    self._current = None
                    self._condition.notify_all()

    def _process(self, action: PendingAction) -> None:
        self.stats.processed += 1
        try:
            result = action.operation()
            if action.on_success is not None:
                action.on_success(result)
        except Exception as e:
            self.stats.failed += 1
            logger.error(f"Background action {action.id} failed: {e}")
            if action.on_error is not None:
                try:
                    action.on_error(e)
                except Exception as callback_error:
                    logger.error(f"Error callback for {action.id} failed: {callback_error}", exc_info=True)
            self.notifications.error(action.error_message or DEFAULT_ERROR_MESSAGE)
            return

        self.stats.succeeded += 1
        if action.success_message:
            self.notifications.success(action.success_message)

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until nothing is pending or running. Returns False on timeout."""
        with self._condition:
            return self._condition.wait_for(
                lambda: not self._pending and self._current is None,
                timeout=timeout,
            )

    def discard_pending(self) -> int:
        """Drop actions that have not started. Returns how many were dropped."""
        with self._condition:
            dropped = len(self._pending)
            self._pending.clear()
            self._condition.notify_all()
        if dropped:
            logger.info(f"Discarded {dropped} pending background actions")
        return dropped

    def stop(self, timeout: float = 10.0) -> None:
        """Finish queued actions and stop the worker."""
        with self._condition:
            self._stopping = True
            self._condition.notify_all()
        if self._worker is not None:
            self._worker.join(timeout=timeout)
        logger.debug(f"{self.name} worker stopped")
