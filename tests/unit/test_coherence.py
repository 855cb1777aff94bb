# =============================================================================
# tests/unit/test_coherence.py
# Unit Tests for namespaces and CacheCoherencePolicy
# =============================================================================

import pytest

from seo_core.data.memory_store import InMemoryRecordStore
from seo_core.sync.batch_fetcher import BatchFetcher
from seo_core.sync.coherence import CacheCoherencePolicy
from seo_core.sync.local_cache import LocalCache
from seo_core.sync.models import CollectionSnapshot
from seo_core.sync.namespaces import (
    ALL_VIDEOS,
    CHANNEL_VIDEOS,
    VIDEO_COLUMNS,
    NamespaceKind,
    NamespaceRegistry,
    default_registry,
)
from seo_core.sync.storage import MemoryStorage


@pytest.fixture
def parts(video_factory, clock):
    rows = video_factory(6, "ch-1", "a") + video_factory(4, "ch-2", "b")
    store = InMemoryRecordStore("video_seo", rows=rows)
    registry = default_registry()
    cache = LocalCache(MemoryStorage(), clock=clock)
    policy = CacheCoherencePolicy(cache, registry, BatchFetcher(store, page_size=4, clock=clock))
    return store, registry, cache, policy


class TestNamespaces:
    """Key templates and record membership"""

    def test_channel_keys_from_template(self):
        ns = default_registry().get(CHANNEL_VIDEOS, "abc")
        assert ns.data_key == "channel_videos_abc"
        assert ns.time_key == "channel_videos_abc_time"
        assert ns.filters == {"channel_id": "abc"}
        assert ns.columns == VIDEO_COLUMNS

    def test_parent_required(self):
        with pytest.raises(ValueError):
            default_registry().get(CHANNEL_VIDEOS)

    def test_unknown_kind(self):
        with pytest.raises(KeyError):
            default_registry().get("playlists")

    def test_namespaces_for_record(self):
        names = [ns.name for ns in default_registry().namespaces_for({"id": 1, "channel_id": "ch-9"})]
        assert names == [ALL_VIDEOS, f"{CHANNEL_VIDEOS}:ch-9"]

    def test_record_without_parent_only_global(self):
        names = [ns.name for ns in default_registry().namespaces_for({"id": 1})]
        assert names == [ALL_VIDEOS]

    def test_new_kind_joins_cache_wide_operations(self):
        registry = NamespaceRegistry()
        registry.register(NamespaceKind("by_member", "member_{parent_id}", "member_{parent_id}_t",
                                        1000, parent_field="assigned_to"))
        names = [ns.name for ns in registry.namespaces_for({"id": 1, "assigned_to": "Sam"})]
        assert names == ["by_member:Sam"]


class TestCoherenceLoad:
    """Cache hit, miss and forced refresh"""

    def test_miss_fetches_and_caches(self, parts):
        store, registry, cache, policy = parts
        events = []
        ns = registry.get(ALL_VIDEOS)

        snapshot = policy.load(ns, on_progress=events.append)

        assert len(snapshot) == 10
        assert cache.get(ns) == snapshot
        assert events[-1].percent == 100.0
        assert all(e.percent <= 95.0 for e in events[:-1])

    def test_fresh_hit_skips_network(self, parts):
        store, registry, cache, policy = parts
        ns = registry.get(ALL_VIDEOS)
        policy.load(ns)
        calls = len(store.calls)

        policy.load(ns)

        assert len(store.calls) == calls

    def test_force_refresh_ignores_fresh_cache(self, parts):
        store, registry, cache, policy = parts
        ns = registry.get(ALL_VIDEOS)
        policy.load(ns)
        calls = len(store.calls)

        policy.load(ns, force_refresh=True)

        assert len(store.calls) > calls

    def test_stale_cache_refetches(self, parts, clock):
        store, registry, cache, policy = parts
        ns = registry.get(CHANNEL_VIDEOS, "ch-2")
        policy.load(ns)
        clock.advance(ns.ttl_ms)
        calls = len(store.calls)

        snapshot = policy.load(ns)

        assert len(store.calls) > calls
        assert {r["channel_id"] for r in snapshot.records} == {"ch-2"}


class TestCoherenceReconcile:
    """Server-confirmed records patch every namespace that holds them"""

    def test_patches_global_and_channel(self, parts):
        store, registry, cache, policy = parts
        all_ns, ch_ns = registry.get(ALL_VIDEOS), registry.get(CHANNEL_VIDEOS, "ch-1")
        policy.load(all_ns)
        policy.load(ch_ns)
        before = cache.get(all_ns).fetched_at

        patched = policy.reconcile({"id": "a-00002", "channel_id": "ch-1", "is_seo_done": True})

        assert sorted(patched) == sorted([all_ns.name, ch_ns.name])
        for ns in (all_ns, ch_ns):
            snapshot = cache.get(ns)
            record = snapshot.records[snapshot.index_of("a-00002")]
            assert record["is_seo_done"] is True
            # untouched fields survive the shallow merge
            assert record["old_title"] == "Video 2"
        assert cache.get(all_ns).fetched_at == before

    def test_never_inserts(self, parts):
        store, registry, cache, policy = parts
        ns = registry.get(ALL_VIDEOS)
        policy.load(ns)

        patched = policy.reconcile({"id": "unknown", "channel_id": "ch-1"})

        assert patched == []
        assert len(cache.get(ns)) == 10

    def test_uncached_namespaces_left_alone(self, parts):
        store, registry, cache, policy = parts
        policy.load(registry.get(ALL_VIDEOS))

        patched = policy.reconcile({"id": "b-00000", "channel_id": "ch-2", "assigned_to": "Sam"})

        assert patched == [ALL_VIDEOS]
        assert cache.get(registry.get(CHANNEL_VIDEOS, "ch-2")) is None

    def test_record_without_id(self, parts):
        assert parts[3].reconcile({"is_seo_done": True}) == []

    def test_order_preserved(self, parts):
        store, registry, cache, policy = parts
        ns = registry.get(ALL_VIDEOS)
        ids = policy.load(ns).ids()

        policy.reconcile({"id": ids[3], "worked_by": "Sam"})

        assert cache.get(ns).ids() == ids


class TestCoherenceInvalidate:

    def test_invalidate_for_record(self, parts, clock):
        store, registry, cache, policy = parts
        for ns in (registry.get(ALL_VIDEOS), registry.get(CHANNEL_VIDEOS, "ch-1"),
                   registry.get(CHANNEL_VIDEOS, "ch-2")):
            cache.put(ns, CollectionSnapshot([], clock.now))

        policy.invalidate_all({"channel_id": "ch-1"})

        assert cache.get(registry.get(ALL_VIDEOS)) is None
        assert cache.get(registry.get(CHANNEL_VIDEOS, "ch-1")) is None
        assert cache.get(registry.get(CHANNEL_VIDEOS, "ch-2")) is not None

    def test_invalidate_global_only(self, parts, clock):
        store, registry, cache, policy = parts
        cache.put(registry.get(ALL_VIDEOS), CollectionSnapshot([], clock.now))
        cache.put(registry.get(CHANNEL_VIDEOS, "ch-1"), CollectionSnapshot([], clock.now))

        policy.invalidate_all()

        assert cache.get(registry.get(ALL_VIDEOS)) is None
        assert cache.get(registry.get(CHANNEL_VIDEOS, "ch-1")) is not None
