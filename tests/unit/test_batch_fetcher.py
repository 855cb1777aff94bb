# =============================================================================
# tests/unit/test_batch_fetcher.py
# Unit Tests for BatchFetcher
# =============================================================================

import threading

import pytest

from seo_core.data.memory_store import InMemoryRecordStore
from seo_core.errors import RecordStoreError
from seo_core.sync.batch_fetcher import MAX_PROGRESS_BEFORE_COMMIT, BatchFetcher
from seo_core.sync.models import CollectionSnapshot, FetchProgress


class TrackingStore(InMemoryRecordStore):
    """Records how many selects run at the same time."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.in_flight = 0
        self.max_in_flight = 0
        self._track = threading.Lock()

    def select(self, *args, **kwargs):
        with self._track:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            return super().select(*args, **kwargs)
        finally:
            with self._track:
                self.in_flight -= 1


def page_of(call):
    start, _ = call["range_"]
    return start // 10


class TestBatchFetcherOrdering:
    """Pages merge in request order whatever order they finish in"""

    def test_out_of_order_pages_keep_server_order(self, video_factory, clock):
        """Slowest page first must still come first"""
        rows = video_factory(25)
        delays = {0: 0.15, 1: 0.01, 2: 0.08}
        store = InMemoryRecordStore(
            "video_seo",
            rows=rows,
            latency=lambda op, call: delays[page_of(call)] if op == "select" else 0,
        )
        fetcher = BatchFetcher(store, page_size=10, concurrency=3, clock=clock)

        snapshot = fetcher.fetch_snapshot()

        assert snapshot.ids() == [r["id"] for r in rows]
        assert snapshot.fetched_at == clock.now

    def test_duplicate_ids_keep_first_occurrence(self):
        """A row seen on an earlier page wins over a repeat"""
        rows = [{"id": "x", "created_at": "2025-01-03", "n": 1},
                {"id": "y", "created_at": "2025-01-02"},
                {"id": "x", "created_at": "2025-01-01", "n": 2}]
        store = InMemoryRecordStore("video_seo", rows=rows)

        snapshot = BatchFetcher(store, page_size=2).fetch_snapshot()

        assert snapshot.ids() == ["x", "y"]
        assert snapshot.records[0]["n"] == 1


class TestBatchFetcherConcurrency:
    """Never more than `concurrency` pages in flight"""

    def test_in_flight_bounded(self, video_factory):
        """70 rows in pages of 10 with concurrency 3"""
        store = TrackingStore(
            "video_seo",
            rows=video_factory(70),
            latency=lambda op, call: 0.03 if op == "select" else 0,
        )
        snapshot = BatchFetcher(store, page_size=10, concurrency=3).fetch_snapshot()

        assert len(snapshot) == 70
        assert 1 <= store.max_in_flight <= 3

    def test_invalid_configuration(self, video_store):
        with pytest.raises(ValueError):
            BatchFetcher(video_store, page_size=0)
        with pytest.raises(ValueError):
            BatchFetcher(video_store, concurrency=0)


class TestBatchFetcherProgress:
    """Progress events per window, capped below completion"""

    def test_progress_capped_at_95(self, video_store):
        """25 rows, one page per window: 40%, 80%, then capped"""
        events = []
        BatchFetcher(video_store, page_size=10, concurrency=1).fetch_snapshot(on_progress=events.append)

        assert [e.loaded for e in events] == [10, 20, 25]
        assert [e.percent for e in events] == [40.0, 80.0, MAX_PROGRESS_BEFORE_COMMIT]
        assert all(e.total == 25 for e in events)

    def test_fetch_all_yields_snapshot_last(self, video_store):
        events = list(BatchFetcher(video_store, page_size=10).fetch_all())

        assert all(isinstance(e, FetchProgress) for e in events[:-1])
        assert isinstance(events[-1], CollectionSnapshot)
        assert len(events[-1]) == 25

    def test_empty_collection(self):
        """No pages requested, empty snapshot, no progress"""
        store = InMemoryRecordStore("video_seo")
        events = []

        snapshot = BatchFetcher(store).fetch_snapshot(on_progress=events.append)

        assert len(snapshot) == 0
        assert events == []
        assert [c["operation"] for c in store.calls] == ["count"]


class TestBatchFetcherFailures:
    """Failed pages are dropped, a failed count aborts"""

    def test_failed_page_is_dropped(self, video_factory):
        rows = video_factory(25)
        store = InMemoryRecordStore(
            "video_seo",
            rows=rows,
            fail_when=lambda op, call: op == "select" and page_of(call) == 1,
        )

        snapshot = BatchFetcher(store, page_size=10).fetch_snapshot()

        expected = [r["id"] for r in rows[:10] + rows[20:]]
        assert snapshot.ids() == expected

    def test_count_failure_raises(self, video_factory):
        store = InMemoryRecordStore(
            "video_seo",
            rows=video_factory(5),
            fail_when=lambda op, call: op == "count",
        )

        with pytest.raises(RecordStoreError):
            BatchFetcher(store).fetch_snapshot()

    def test_filters_and_columns_forwarded(self, video_store):
        BatchFetcher(video_store, page_size=10).fetch_snapshot(
            filters={"channel_id": "ch-1"}, columns="id, video_id"
        )

        selects = [c for c in video_store.calls if c["operation"] == "select"]
        assert all(c["filters"] == {"channel_id": "ch-1"} for c in selects)
        assert all(c["columns"] == "id, video_id" for c in selects)
        assert all(c["order_by"] == "created_at" and c["descending"] for c in selects)
        assert sorted(c["range_"] for c in selects) == [(0, 9), (10, 19), (20, 29)]
