# =============================================================================
# tests/integration/test_sync_flow.py
# Integration Tests: services, cache store and views working together
# =============================================================================

import threading
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from seo_core.services import AssignmentService, VideoService
from seo_core.sync import CacheStore, NotificationKind, RecordPhase
from seo_core.ui import actions


@pytest.fixture
def cache_store(seeded_stores, clock):
    store = CacheStore(seeded_stores.videos, page_size=3, fetch_concurrency=2, clock=clock)
    store.init()
    yield store
    store.clear()


@pytest.fixture
def services(seeded_stores):
    return SimpleNamespace(
        videos=VideoService(seeded_stores),
        assignments=AssignmentService(seeded_stores),
        team_members=SimpleNamespace(current=lambda: {"name": "Sam"}),
    )


@pytest.fixture
def session(cache_store, services):
    """Route the page-level actions to this test's cache store and services."""
    with patch.object(actions, "get_cache_store", return_value=cache_store), \
            patch.object(actions, "get_services", return_value=services):
        yield


@pytest.fixture
def views(cache_store):
    all_view = cache_store.view_all()
    channel_view = cache_store.view_channel("ch-1")
    assert all_view.mount()
    assert channel_view.mount()
    yield all_view, channel_view
    all_view.unmount()
    channel_view.unmount()


def cached_record(cache_store, namespace, record_id):
    snapshot = cache_store.cache.get(namespace)
    return snapshot.records[snapshot.index_of(record_id)]


class TestInitialLoad:
    """Paged fetch fills both namespaces"""

    def test_views_hold_their_collections(self, views):
        all_view, channel_view = views

        assert len(all_view.records) == 8
        assert [r["id"] for r in channel_view.records] == [f"a-{i:05d}" for i in range(5)]
        assert all(r["channels"]["channel_name"] == "Cooking" for r in channel_view.records)

    def test_second_mount_is_served_from_cache(self, cache_store, views, seeded_stores):
        seeded_stores.videos.insert({"id": "late", "channel_id": "ch-1", "video_id": "late", "old_title": "Late"})

        fresh = cache_store.view_all()
        fresh.mount()

        assert len(fresh.records) == 8
        fresh.unmount()


class TestToggleFlow:
    """An SEO toggle is confirmed into every namespace and view"""

    def test_toggle_patches_both_namespaces(self, cache_store, views, session, seeded_stores):
        all_view, channel_view = views
        record = channel_view.record("a-00002")

        actions.toggle_seo(record)
        _, phase = actions.displayed(record)
        assert phase in (RecordPhase.OPTIMISTIC, RecordPhase.CONFIRMED)
        assert cache_store.queue.wait_until_idle(timeout=2)

        assert seeded_stores.videos.select_one("*", {"id": "a-00002"})["worked_by"] == "Sam"
        for namespace in (cache_store.global_namespace(), cache_store.channel_namespace("ch-1")):
            cached = cached_record(cache_store, namespace, "a-00002")
            assert cached["is_seo_done"] is True
            assert cached["worked_by"] == "Sam"
        assert all_view.record("a-00002")["is_seo_done"] is True
        assert channel_view.record("a-00002")["is_seo_done"] is True
        assert actions.displayed(all_view.record("a-00002"))[1] is RecordPhase.CONFIRMED

    def test_other_channel_untouched(self, cache_store, views, session):
        all_view, _ = views
        other = cache_store.view_channel("ch-2")
        other.mount()
        before = cache_store.cache.get(cache_store.channel_namespace("ch-2"))

        actions.toggle_seo(all_view.record("a-00000"))
        cache_store.queue.wait_until_idle(timeout=2)

        assert cache_store.cache.get(cache_store.channel_namespace("ch-2")).records == before.records
        other.unmount()


class TestSeoFieldsFlow:
    """Pending SEO edits show the values the server will store"""

    def test_pending_value_is_normalized(self, cache_store, views, session, services):
        _, channel_view = views
        record = channel_view.record("a-00003")
        gate = threading.Event()
        update_seo = services.videos.update_seo

        def held(*args):
            gate.wait(2)
            return update_seo(*args)

        with patch.object(services.videos, "update_seo", side_effect=held):
            actions.save_seo_fields(
                record, {"title_v1": "  Better title ", "description": "  ", "tags": "seo tips, growth"}, "eddie"
            )
            pending, phase = actions.displayed(record)
            assert phase is RecordPhase.OPTIMISTIC
            assert pending["tags"] == ["seo tips", "growth"]
            assert pending["title_v1"] == "Better title"
            assert pending["description"] is None
            gate.set()
            assert cache_store.queue.wait_until_idle(timeout=2)

        confirmed, phase = actions.displayed(channel_view.record("a-00003"))
        assert phase is RecordPhase.CONFIRMED
        assert confirmed["tags"] == ["seo tips", "growth"]


class TestAssignmentFlow:
    """Bulk assignment runs on the queue and reconciles each row"""

    def test_assign_then_unassign(self, cache_store, views, session):
        all_view, channel_view = views
        ids = ["a-00000", "b-00001"]

        actions.assign_videos(ids, "Alex")
        cache_store.queue.wait_until_idle(timeout=2)

        assert all_view.record("a-00000")["assigned_to"] == "Alex"
        assert all_view.record("b-00001")["assigned_to"] == "Alex"
        assert channel_view.record("a-00000")["assigned_to"] == "Alex"
        assert cached_record(cache_store, cache_store.global_namespace(), "b-00001")["assigned_to"] == "Alex"

        actions.assign_videos(ids, None)
        cache_store.queue.wait_until_idle(timeout=2)

        assert all_view.record("a-00000")["assigned_to"] is None
        messages = [n.message for n in cache_store.notifications.of_kind(NotificationKind.SUCCESS)]
        assert messages == ["Assigned 2 video(s) to Alex", "Unassigned 2 video(s)"]


class TestInvalidation:
    """New rows show up after their namespaces are dropped"""

    def test_created_video_appears_after_invalidate(self, cache_store, views, services):
        all_view, channel_view = views
        created = services.videos.create_video("ch-1", "fresh1", "Fresh", "eddie")

        cache_store.coherence.invalidate_all(created)
        assert cache_store.cache.get(cache_store.global_namespace()) is None
        assert channel_view.load()
        assert all_view.load()

        assert channel_view.record(created["id"]) is not None
        assert len(all_view.records) == 9


class TestClear:

    def test_clear_resets_session(self, cache_store, views, session):
        all_view, _ = views
        actions.toggle_seo(all_view.record("a-00001"))
        cache_store.queue.wait_until_idle(timeout=2)

        cache_store.clear()

        assert not cache_store.initialized
        assert cache_store.cache.get(cache_store.global_namespace()) is None
        assert cache_store.mutator.states.get("a-00001") is None
        assert cache_store.notifications.of_kind(NotificationKind.SUCCESS) == []
