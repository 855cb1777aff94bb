# =============================================================================
# tests/unit/test_action_queue.py
# Unit Tests for BackgroundActionQueue and NotificationCenter
# =============================================================================

import threading
import time

import pytest

from seo_core.sync.action_queue import DEFAULT_ERROR_MESSAGE, BackgroundActionQueue, QueueStatus
from seo_core.sync.models import NotificationKind, PendingAction
from seo_core.sync.notifications import NotificationCenter


@pytest.fixture
def queue():
    q = BackgroundActionQueue(NotificationCenter())
    yield q
    q.discard_pending()
    q.stop(timeout=2)


class TestQueueOrdering:
    """FIFO, one action at a time"""

    def test_runs_in_enqueue_order_despite_latency(self, queue):
        """300/10/100 ms actions still complete in the order they were queued"""
        finished = []
        running = []
        overlap = []

        def action(name, delay):
            def run():
                running.append(name)
                if len(running) > 1:
                    overlap.append(name)
                time.sleep(delay)
                running.remove(name)
                finished.append(name)
            return run

        for name, delay in (("a", 0.3), ("b", 0.01), ("c", 0.1)):
            queue.enqueue(PendingAction(operation=action(name, delay)))

        assert queue.wait_until_idle(timeout=5)
        assert finished == ["a", "b", "c"]
        assert overlap == []

    def test_enqueue_returns_immediately(self, queue):
        gate = threading.Event()
        start = time.monotonic()
        action_id = queue.enqueue(PendingAction(operation=gate.wait))

        assert time.monotonic() - start < 0.1
        assert queue.status is QueueStatus.PROCESSING
        gate.set()
        assert queue.wait_until_idle(timeout=2)
        assert queue.status is QueueStatus.IDLE
        assert isinstance(action_id, str)

    def test_success_callback_gets_result(self, queue):
        results = []
        queue.enqueue(PendingAction(operation=lambda: {"id": 1}, on_success=results.append))
        queue.wait_until_idle(timeout=2)
        assert results == [{"id": 1}]


class TestQueueFailures:
    """A failure is reported and never blocks the next action"""

    def test_failure_isolated(self, queue):
        errors, done = [], []

        def boom():
            raise RuntimeError("network down")

        queue.enqueue(PendingAction(operation=boom, on_error=errors.append, error_message="Save failed"))
        queue.enqueue(PendingAction(operation=lambda: "ok", on_success=done.append))
        queue.wait_until_idle(timeout=2)

        assert [str(e) for e in errors] == ["network down"]
        assert done == ["ok"]
        assert queue.stats.failed == 1 and queue.stats.succeeded == 1
        messages = [n.message for n in queue.notifications.of_kind(NotificationKind.ERROR)]
        assert messages == ["Save failed"]

    def test_default_error_message(self, queue):
        def boom():
            raise ValueError("x")

        queue.enqueue(PendingAction(operation=boom))
        queue.wait_until_idle(timeout=2)

        assert [n.message for n in queue.notifications.of_kind(NotificationKind.ERROR)] == [DEFAULT_ERROR_MESSAGE]

    def test_failing_success_callback_counts_as_failure(self, queue):
        errors = []

        def bad_callback(result):
            raise KeyError("id")

        queue.enqueue(PendingAction(operation=lambda: {}, on_success=bad_callback, on_error=errors.append))
        queue.wait_until_idle(timeout=2)

        assert len(errors) == 1
        assert queue.notifications.of_kind(NotificationKind.SUCCESS) == []

    def test_success_message(self, queue):
        queue.enqueue(PendingAction(operation=lambda: None, success_message="Saved"))
        queue.wait_until_idle(timeout=2)
        assert [n.message for n in queue.notifications.of_kind(NotificationKind.SUCCESS)] == ["Saved"]


class TestQueueLifecycle:

    def test_discard_pending_skips_unstarted(self, queue):
        gate = threading.Event()
        ran = []
        queue.enqueue(PendingAction(operation=gate.wait))
        queue.enqueue(PendingAction(operation=lambda: ran.append(1)))
        queue.enqueue(PendingAction(operation=lambda: ran.append(2)))
        time.sleep(0.05)

        assert queue.discard_pending() == 2
        gate.set()
        queue.wait_until_idle(timeout=2)
        assert ran == []

    def test_restarts_after_stop(self, queue):
        queue.stop(timeout=2)
        done = []
        queue.enqueue(PendingAction(operation=lambda: done.append(True)))
        assert queue.wait_until_idle(timeout=2)
        assert done == [True]


class TestNotificationCenter:
    """Notifications expire after their TTL"""

    def test_expiry(self):
        now = [100.0]
        center = NotificationCenter(ttl_s=3.0, clock=lambda: now[0])
        center.success("Saved")

        now[0] = 102.9
        assert [n.message for n in center.active()] == ["Saved"]
        now[0] = 103.0
        assert center.active() == []
        # history keeps it
        assert len(center.of_kind(NotificationKind.SUCCESS)) == 1

    def test_dismiss(self):
        center = NotificationCenter()
        keep = center.error("Failed")
        drop = center.notify("Info")

        center.dismiss(drop.id)

        assert [n.id for n in center.active()] == [keep.id]
