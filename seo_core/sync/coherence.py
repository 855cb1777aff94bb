# =============================================================================
# seo_core/sync/coherence.py
# Cache freshness and cross-namespace reconciliation
# =============================================================================
"""
CacheCoherencePolicy decides when a cached snapshot of a namespace can be
served and keeps every namespace consistent after a confirmed write.

A load serves the cached snapshot while it is within its namespace TTL;
otherwise (or on a forced refresh) it runs a full BatchFetcher pass and
stores the result. A confirmed record is merged into each registered
namespace that already holds its id; rows are never inserted by a merge.
"""

from __future__ import annotations
from typing import Callable, List, Optional

from seo_core.logging import get_logger
from seo_core.sync.batch_fetcher import BatchFetcher
from seo_core.sync.local_cache import LocalCache
from seo_core.sync.models import CollectionSnapshot, FetchProgress, Record
from seo_core.sync.namespaces import CacheNamespace, NamespaceRegistry

logger = get_logger(__name__)

ProgressCallback = Callable[[FetchProgress], None]


class CacheCoherencePolicy:
    """
    Decides when a cached snapshot may be trusted and keeps every namespace
    consistent after a confirmed mutation.
    """

    def __init__(self, cache: LocalCache, registry: NamespaceRegistry, fetcher: BatchFetcher):
        self.cache = cache
        self.registry = registry
        self.fetcher = fetcher

    def trusted_snapshot(
        self,
        namespace: CacheNamespace,
        force_refresh: bool = False,
    ) -> Optional[CollectionSnapshot]:
        """The cached snapshot if present and fresh (and not force-refreshing)."""
        if force_refresh:
            return None
        return self.cache.get_fresh(namespace)

    def load(
        self,
        namespace: CacheNamespace,
        force_refresh: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CollectionSnapshot:
        """
        Return a snapshot for the namespace, fetching when the cache can't be trusted.

        A fetched snapshot is written to the cache and completes progress at 100%.

        Raises:
            RecordStoreError: If the fetch cannot start (count failure)
        """
        cached = self.trusted_snapshot(namespace, force_refresh)
        if cached is not None:
            logger.debug(
                f"Serving {namespace.name} from cache "
                f"({len(cached)} records, {cached.age_ms(self.cache.clock())} ms old)"
            )
            return cached

        snapshot = self.fetcher.fetch_snapshot(
            filters=namespace.filters or None,
            columns=namespace.columns,
            on_progress=on_progress,
        )
        self.cache.put(namespace, snapshot)
        if on_progress is not None:
            on_progress(FetchProgress(loaded=len(snapshot), total=len(snapshot), percent=100.0))
        return snapshot

    def reconcile(self, record: Record) -> List[str]:
        """
        Merge a server-confirmed record into every cached namespace holding it.

        Fields of `record` overwrite the cached copy; other cached fields stay.
        Namespaces without the id are left alone and nothing is inserted.
        The snapshot's fetched_at is kept, so patching never extends freshness.

        Returns:
            Names of the namespaces that were patched
        """
        record_id = record.get("id")
        if record_id is None:
            logger.warning("Cannot reconcile a record without an id")
            return []

        patched = []
        with self.cache.lock:
            for namespace in self.registry.namespaces_for(record):
                snapshot = self.cache.get(namespace)
                if snapshot is None:
                    continue
                index = snapshot.index_of(record_id)
                if index is None:
                    continue
                records = list(snapshot.records)
                records[index] = {**records[index], **record}
                if self.cache.put(namespace, CollectionSnapshot(records, snapshot.fetched_at)):
                    patched.append(namespace.name)

        logger.debug(f"Reconciled record {record_id} into {patched or 'no namespaces'}")
        return patched

    def invalidate_all(self, record: Optional[Record] = None) -> None:
        """Drop the namespaces holding `record`, or the global one when omitted."""
        if record is None:
            namespaces = [k.namespace() for k in self.registry.kinds() if not k.parent_field]
        else:
            namespaces = self.registry.namespaces_for(record)
        for namespace in namespaces:
            self.cache.invalidate(namespace)
