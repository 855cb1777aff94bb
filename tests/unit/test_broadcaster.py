# =============================================================================
# tests/unit/test_broadcaster.py
# Unit Tests for UpdateBroadcaster
# =============================================================================

import pytest

from seo_core.errors import SubscriptionLimitError
from seo_core.sync.broadcaster import Topic, UpdateBroadcaster


class TestBroadcasterDelivery:
    """Synchronous, ordered, no replay"""

    def test_delivers_in_subscription_order(self):
        broadcaster = UpdateBroadcaster()
        seen = []
        broadcaster.subscribe(Topic.VIDEO_UPDATED, lambda p: seen.append(("first", p["id"])))
        broadcaster.subscribe(Topic.VIDEO_UPDATED, lambda p: seen.append(("second", p["id"])))

        delivered = broadcaster.publish(Topic.VIDEO_UPDATED, {"id": 7})

        assert delivered == 2
        assert seen == [("first", 7), ("second", 7)]

    def test_no_replay_for_late_subscribers(self):
        broadcaster = UpdateBroadcaster()
        broadcaster.publish(Topic.VIDEO_UPDATED, {"id": 1})
        seen = []
        broadcaster.subscribe(Topic.VIDEO_UPDATED, seen.append)
        assert seen == []

    def test_topics_are_separate(self):
        broadcaster = UpdateBroadcaster()
        seen = []
        broadcaster.subscribe(Topic.TEAM_MEMBER_UPDATED, seen.append)
        broadcaster.publish(Topic.VIDEO_UPDATED, {"id": 1})
        broadcaster.publish("team-member-updated", {"name": "Sam"})
        assert seen == [{"name": "Sam"}]

    def test_failing_handler_isolated(self):
        broadcaster = UpdateBroadcaster()
        seen = []

        def broken(payload):
            raise RuntimeError("render failed")

        broadcaster.subscribe(Topic.VIDEO_UPDATED, broken)
        broadcaster.subscribe(Topic.VIDEO_UPDATED, seen.append)

        assert broadcaster.publish(Topic.VIDEO_UPDATED, {"id": 1}) == 1
        assert seen == [{"id": 1}]


class TestBroadcasterSubscriptions:
    """Bounded, cancellable subscriptions"""

    def test_limit(self):
        broadcaster = UpdateBroadcaster(max_subscribers=2)
        broadcaster.subscribe(Topic.VIDEO_UPDATED, print)
        broadcaster.subscribe(Topic.VIDEO_UPDATED, print)

        with pytest.raises(SubscriptionLimitError):
            broadcaster.subscribe(Topic.VIDEO_UPDATED, print)
        # other topics unaffected
        broadcaster.subscribe(Topic.STORAGE, print)

    def test_cancel_frees_slot(self):
        broadcaster = UpdateBroadcaster(max_subscribers=1)
        sub = broadcaster.subscribe(Topic.VIDEO_UPDATED, print)
        sub.cancel()
        sub.cancel()

        assert broadcaster.subscriber_count(Topic.VIDEO_UPDATED) == 0
        broadcaster.subscribe(Topic.VIDEO_UPDATED, print)

    def test_cancelled_handler_not_called(self):
        broadcaster = UpdateBroadcaster()
        seen = []
        sub = broadcaster.subscribe(Topic.VIDEO_UPDATED, seen.append)
        sub.cancel()
        assert broadcaster.publish(Topic.VIDEO_UPDATED, {"id": 1}) == 0
        assert seen == []

    def test_clear(self):
        broadcaster = UpdateBroadcaster()
        sub = broadcaster.subscribe(Topic.VIDEO_UPDATED, print)
        broadcaster.clear()
        assert not sub.active
        assert broadcaster.subscriber_count(Topic.VIDEO_UPDATED) == 0
