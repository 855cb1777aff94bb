# =============================================================================
# tests/unit/test_views.py
# Unit Tests for CollectionView, list filters and VideoNavigator
# =============================================================================

import threading
import time

import pytest

from seo_core.errors import RecordStoreError
from seo_core.sync import (
    CollectionSnapshot,
    CollectionView,
    FetchProgress,
    MemoryStorage,
    Topic,
    UpdateBroadcaster,
    VideoNavigator,
    default_registry,
    filter_videos,
    member_options,
)


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


class ScriptedCoherence:
    """Stands in for CacheCoherencePolicy; each load takes the next scripted step."""

    def __init__(self):
        self.steps = []

    def add(self, snapshot=None, error=None, blocked=False):
        gate = threading.Event()
        if not blocked:
            gate.set()
        self.steps.append((gate, snapshot, error))
        return gate

    def load(self, namespace, force_refresh=False, on_progress=None):
        gate, snapshot, error = self.steps.pop(0)
        gate.wait(2)
        if error is not None:
            raise error
        if on_progress is not None:
            on_progress(FetchProgress(len(snapshot), len(snapshot), 100.0))
        return snapshot


@pytest.fixture
def coherence():
    return ScriptedCoherence()


@pytest.fixture
def broadcaster():
    return UpdateBroadcaster()


@pytest.fixture
def view(coherence, broadcaster):
    return CollectionView(coherence, broadcaster, default_registry().get("all_videos"))


def snapshot_of(*ids):
    return CollectionSnapshot([{"id": i, "is_seo_done": False} for i in ids], 1)


class TestCollectionViewLoading:
    """Only the newest load of a mounted view is applied"""

    def test_mount_loads_and_subscribes(self, view, coherence, broadcaster):
        coherence.add(snapshot_of("a", "b"))

        assert view.mount() is True

        assert [r["id"] for r in view.records] == ["a", "b"]
        assert view.progress == 100.0
        assert not view.loading
        assert broadcaster.subscriber_count(Topic.VIDEO_UPDATED) == 1

    def test_superseded_load_is_ignored(self, view, coherence):
        coherence.add(snapshot_of("seed"))
        view.mount()

        slow_gate = coherence.add(snapshot_of("old"), blocked=True)
        results = {}
        slow = threading.Thread(target=lambda: results.setdefault("slow", view.load(force_refresh=True)))
        slow.start()

        coherence.add(snapshot_of("new"))
        # the slow load takes its step first
        assert wait_for(lambda: len(coherence.steps) == 1)
        assert view.load(force_refresh=True) is True

        slow_gate.set()
        slow.join(2)

        assert results["slow"] is False
        assert [r["id"] for r in view.records] == ["new"]

    def test_unmount_discards_in_flight_load(self, view, coherence, broadcaster):
        coherence.add(snapshot_of("seed"))
        view.mount()
        gate = coherence.add(snapshot_of("late"), blocked=True)
        progress = []

        loader = threading.Thread(target=lambda: view.load(True, progress.append))
        loader.start()
        assert wait_for(lambda: not coherence.steps)
        view.unmount()
        gate.set()
        loader.join(2)

        assert [r["id"] for r in view.records] == ["seed"]
        assert progress == []
        assert broadcaster.subscriber_count(Topic.VIDEO_UPDATED) == 0

    def test_error_is_kept_for_display(self, view, coherence):
        coherence.add(error=RecordStoreError("count failed"))

        assert view.mount() is False

        assert view.error == "count failed"
        assert not view.loading
        assert view.records == []


class TestCollectionViewEvents:
    """video-updated patches rows in place"""

    def test_patch_existing_row(self, view, coherence, broadcaster):
        coherence.add(snapshot_of("a", "b"))
        view.mount()

        broadcaster.publish(Topic.VIDEO_UPDATED, {"id": "b", "is_seo_done": True, "worked_by": "Sam"})

        assert view.record("b") == {"id": "b", "is_seo_done": True, "worked_by": "Sam"}
        assert view.record("a")["is_seo_done"] is False

    def test_unknown_row_not_inserted(self, view, coherence, broadcaster):
        coherence.add(snapshot_of("a"))
        view.mount()

        broadcaster.publish(Topic.VIDEO_UPDATED, {"id": "zzz"})

        assert [r["id"] for r in view.records] == ["a"]


class TestFilterVideos:

    @pytest.fixture
    def records(self):
        return [
            {"id": 1, "video_id": "AbC123", "is_seo_done": True, "assigned_to": "Sam"},
            {"id": 2, "video_id": "xyz789", "is_seo_done": False, "assigned_to": None},
            {"id": 3, "video_id": "abc999", "is_seo_done": False, "assigned_to": "Alex"},
        ]

    def test_search_is_case_insensitive(self, records):
        assert [r["id"] for r in filter_videos(records, search=" abc")] == [1, 3]

    def test_seo_filter(self, records):
        assert [r["id"] for r in filter_videos(records, seo_filter="done")] == [1]
        assert [r["id"] for r in filter_videos(records, seo_filter="pending")] == [2, 3]

    def test_member_filter(self, records):
        assert [r["id"] for r in filter_videos(records, member_filter="unassigned")] == [2]
        assert [r["id"] for r in filter_videos(records, member_filter="Alex")] == [3]

    def test_combined(self, records):
        assert filter_videos(records, "abc", "pending", "Sam") == []

    def test_unknown_seo_filter(self, records):
        with pytest.raises(ValueError):
            filter_videos(records, seo_filter="maybe")

    def test_member_options(self, records):
        assert member_options(records) == ["Alex", "Sam"]


class TestVideoNavigator:

    @pytest.fixture
    def navigator(self):
        nav = VideoNavigator(MemoryStorage())
        nav.set_queue([f"v{i}" for i in range(30)])
        return nav

    def test_neighbors(self, navigator):
        assert navigator.neighbors("v0") == (None, "v1")
        assert navigator.neighbors("v15") == ("v14", "v16")
        assert navigator.neighbors("v29") == ("v28", None)
        assert navigator.neighbors("missing") == (None, None)

    def test_position(self, navigator):
        assert navigator.position("v4") == (5, 30)
        assert navigator.position("missing") is None

    def test_prefetch_window(self, navigator):
        window = navigator.prefetch_window("v15")
        assert window[:10] == [f"v{i}" for i in range(16, 26)]
        assert window[10:] == [f"v{i}" for i in range(14, 4, -1)]

    def test_prefetch_window_at_edges(self, navigator):
        assert navigator.prefetch_window("v28", radius=3) == ["v29", "v27", "v26", "v25"]

    def test_corrupt_queue(self):
        storage = MemoryStorage()
        storage.set_item("video_queue", "not json")
        assert VideoNavigator(storage).queue() == []
