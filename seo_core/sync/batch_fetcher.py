# =============================================================================
# seo_core/sync/batch_fetcher.py
# Paged, bounded-concurrency collection fetch
# =============================================================================
"""
BatchFetcher pulls a whole (possibly filtered) collection in fixed-size pages.

1. count() the matching rows
2. request pages in windows of `concurrency`, never more in flight
3. merge each window in request order, whatever order the pages finish in
4. yield FetchProgress after every window (capped at 95%)
5. yield the final CollectionSnapshot

A page that fails is logged and left out; the snapshot is then partial.
A failing count() aborts the fetch with RecordStoreError.
"""

from __future__ import annotations
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterator, List, Optional, Set, Union

from seo_core.data.record_store import Filters, RecordStoreClient
from seo_core.logging import get_logger
from seo_core.sync.models import CollectionSnapshot, FetchProgress, Record, now_ms

logger = get_logger(__name__)

FetchEvent = Union[FetchProgress, CollectionSnapshot]

MAX_PROGRESS_BEFORE_COMMIT = 95.0


class BatchFetcher:
    """
    Args:
        store: Store for the collection table
        page_size: Rows per page
        concurrency: Pages in flight at once
        order_by: Server-side sort column (descending)
        clock: Epoch-ms clock used to stamp the snapshot
    """

    def __init__(
        self,
        store: RecordStoreClient,
        page_size: int = 1000,
        concurrency: int = 3,
        order_by: str = "created_at",
        clock: Callable[[], int] = now_ms,
    ):
        if page_size < 1 or concurrency < 1:
            raise ValueError("page_size and concurrency must be positive")
        self.store = store
        self.page_size = page_size
        self.concurrency = concurrency
        self.order_by = order_by
        self.clock = clock

    def _fetch_page(self, page: int, filters: Optional[Filters], columns: str) -> List[Record]:
        start = page * self.page_size
        return self.store.select(
            columns=columns,
            filters=filters,
            order_by=self.order_by,
            descending=True,
            range_=(start, start + self.page_size - 1),
        )

    def fetch_all(
        self,
        filters: Optional[Filters] = None,
        columns: str = "*",
    ) -> Iterator[FetchEvent]:
        """
        Generate progress events followed by one CollectionSnapshot.

        Raises:
            RecordStoreError: If the row count cannot be obtained
        """
        total = self.store.count(filters)
        pages = math.ceil(total / self.page_size)
        logger.info(
            f"Fetching {total} rows from {self.store.table_name} "
            f"in {pages} pages of {self.page_size}"
        )

        records: List[Record] = []
        seen: Set[Any] = set()
        loaded = 0
        failed_pages: List[int] = []

        if pages:
            with ThreadPoolExecutor(
                max_workers=self.concurrency, thread_name_prefix="batch-fetch"
            ) as pool:
                for window_start in range(0, pages, self.concurrency):
                    window = range(window_start, min(window_start + self.concurrency, pages))
                    futures = [pool.submit(self._fetch_page, p, filters, columns) for p in window]

                    for page, future in zip(window, futures):
                        try:
                            rows = future.result()
                        except Exception as e:
                            logger.error(f"Page {page} of {self.store.table_name} failed: {e}")
                            failed_pages.append(page)
                            continue
                        loaded += len(rows)
                        for row in rows:
                            if row.get("id") in seen:
                                continue
                            seen.add(row.get("id"))
                            records.append(row)

                    percent = min(MAX_PROGRESS_BEFORE_COMMIT, loaded / total * 100)
                    yield FetchProgress(loaded=loaded, total=total, percent=percent)

        if failed_pages:
            logger.warning(
                f"Snapshot of {self.store.table_name} is partial: "
                f"{len(failed_pages)} of {pages} pages failed {failed_pages}"
            )
        yield CollectionSnapshot(records=records, fetched_at=self.clock())

    def fetch_snapshot(
        self,
        filters: Optional[Filters] = None,
        columns: str = "*",
        on_progress: Optional[Callable[[FetchProgress], None]] = None,
    ) -> CollectionSnapshot:
        """Drain fetch_all(), forwarding progress; return the snapshot."""
        snapshot = CollectionSnapshot()
        for event in self.fetch_all(filters, columns):
            if isinstance(event, FetchProgress):
                if on_progress is not None:
                    on_progress(event)
            else:
                snapshot = event
        return snapshot

