# =============================================================================
# seo_core/data/memory_store.py
# In-memory record store used for demo mode and tests
# =============================================================================
"""
InMemoryRecordStore - a RecordStoreClient over a list of dicts.

Mirrors the Supabase behaviour the app relies on:
- generated ``id`` (uuid4) and ``created_at`` / ``updated_at`` (ISO, UTC)
- unique columns raising DuplicateRecordError (Postgres 23505)
- inclusive row ranges and server-side ordering
- ``channels`` join on ``channel_id`` when a channels store is linked

Tests can inject ``latency`` (seconds, or a callable of the operation and
arguments) and ``fail_when`` (a predicate raising RecordStoreError for
matching calls).
"""

from __future__ import annotations
import copy
import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from seo_core.data.record_store import Filters, RecordStoreClient, RowRange, matches_filters
from seo_core.errors import DuplicateRecordError, RecordStoreError
from seo_core.logging import get_logger

logger = get_logger(__name__)

Latency = Union[float, Callable[[str, Dict[str, Any]], float]]
FailurePredicate = Callable[[str, Dict[str, Any]], bool]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryRecordStore(RecordStoreClient):
    """Thread-safe table held in process memory."""

    def __init__(
        self,
        table_name: str,
        rows: Optional[Iterable[Dict[str, Any]]] = None,
        unique_columns: Iterable[str] = (),
        latency: Latency = 0.0,
        fail_when: Optional[FailurePredicate] = None,
        join_channels: Optional["InMemoryRecordStore"] = None,
    ):
        super().__init__(table_name)
        self._rows: List[Dict[str, Any]] = [copy.deepcopy(r) for r in (rows or [])]
        self._unique_columns = tuple(unique_columns)
        self._lock = threading.Lock()
        self.latency = latency
        self.fail_when = fail_when
        self.join_channels = join_channels
        self.calls: List[Dict[str, Any]] = []

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def _before(self, operation: str, **arguments) -> None:
        call = {"operation": operation, **arguments}
        with self._lock:
            self.calls.append(call)

        delay = self.latency(operation, call) if callable(self.latency) else self.latency
        if delay:
            time.sleep(delay)

        if self.fail_when is not None and self.fail_when(operation, call):
            raise RecordStoreError(
                f"Simulated {operation} failure on {self.table_name}",
                table=self.table_name,
                operation=operation,
            )

    def _project(self, row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        result = copy.deepcopy(row)
        if self.join_channels is not None and "channels" in columns:
            channel = self.join_channels.select_one(filters={"id": row.get("channel_id")})
            if channel is not None:
                result["channels"] = {
                    "id": channel.get("id"),
                    "channel_name": channel.get("channel_name"),
                    "channel_id": channel.get("channel_id"),
                }
        return result

    # -------------------------------------------------------------------------
    # RecordStoreClient
    # -------------------------------------------------------------------------

    def select(
        self,
        columns: str = "*",
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        range_: Optional[RowRange] = None,
    ) -> List[Dict[str, Any]]:
        self._before("select", columns=columns, filters=filters, order_by=order_by,
                     descending=descending, range_=range_)
        with self._lock:
            rows = [r for r in self._rows if matches_filters(r, filters)]
        if order_by:
            # NULLs last in both directions
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            rows = present + missing
        if range_ is not None:
            start, end = range_
            rows = rows[start:end + 1]
        return [self._project(r, columns) for r in rows]

    def count(self, filters: Optional[Filters] = None) -> int:
        self._before("count", filters=filters)
        with self._lock:
            return sum(1 for r in self._rows if matches_filters(r, filters))

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        self._before("insert", row=row)
        new_row = copy.deepcopy(row)
        new_row.setdefault("id", str(uuid.uuid4()))
        now = utc_now_iso()
        new_row.setdefault("created_at", now)
        new_row.setdefault("updated_at", now)

        with self._lock:
            for column in ("id",) + self._unique_columns:
                value = new_row.get(column)
                if value is not None and any(r.get(column) == value for r in self._rows):
                    raise DuplicateRecordError(
                        f'duplicate key value violates unique constraint "{self.table_name}_{column}_key"',
                        table=self.table_name,
                        operation="insert",
                    )
            self._rows.append(new_row)
        return copy.deepcopy(new_row)

    def update(self, filters: Filters, patch: Dict[str, Any]) -> List[Dict[str, Any]]:
        self._before("update", filters=filters, patch=patch)
        updated = []
        with self._lock:
            for row in self._rows:
                if matches_filters(row, filters):
                    row.update(copy.deepcopy(patch))
                    row["updated_at"] = utc_now_iso()
                    updated.append(copy.deepcopy(row))
        return updated

    def delete(self, filters: Filters) -> None:
        self._before("delete", filters=filters)
        with self._lock:
            self._rows = [r for r in self._rows if not matches_filters(r, filters)]


class InMemoryDatabase:
    """
    The set of tables the app uses, held in memory.

    Used as the demo backend when Supabase is not configured.
    """

    TABLES = {
        "channels": ("channel_id",),
        "video_seo": ("video_id",),
        "tasks": ("video_id",),
        "comments": (),
        "team_members": ("name",),
        "user_roles": ("user_id",),
    }

    def __init__(self):
        self._stores: Dict[str, InMemoryRecordStore] = {}
        for name, unique in self.TABLES.items():
            self._stores[name] = InMemoryRecordStore(name, unique_columns=unique)
        self._stores["video_seo"].join_channels = self._stores["channels"]

    def table(self, name: str) -> InMemoryRecordStore:
        if name not in self._stores:
            self._stores[name] = InMemoryRecordStore(name)
        return self._stores[name]
