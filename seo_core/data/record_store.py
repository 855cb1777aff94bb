# =============================================================================
# seo_core/data/record_store.py
# Abstract remote record store consumed by the cache layer and services
# =============================================================================

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

# Filter semantics shared by every store:
#   scalar          -> column = value
#   list/tuple/set  -> column IN (values)
#   None            -> column IS NULL
Filters = Dict[str, Any]
RowRange = Tuple[int, int]


class RecordStoreClient(ABC):
    """
    Request/response access to one table of the hosted database.

    Every method raises RecordStoreError (or a subclass) on failure; callers
    decide where the failure is caught.
    """

    def __init__(self, table_name: str):
        self.table_name = table_name

    @abstractmethod
    def select(
        self,
        columns: str = "*",
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        range_: Optional[RowRange] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch rows.

        Args:
            columns: Column list in PostgREST syntax (joins allowed)
            filters: Filter conditions
            order_by: Column to sort by server-side
            descending: Sort direction
            range_: Inclusive (start, end) row range

        Returns:
            List of row dicts
        """

    @abstractmethod
    def count(self, filters: Optional[Filters] = None) -> int:
        """Exact number of rows matching filters."""

    @abstractmethod
    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored."""

    @abstractmethod
    def update(self, filters: Filters, patch: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Apply patch to every row matching filters; return updated rows."""

    @abstractmethod
    def delete(self, filters: Filters) -> None:
        """Delete every row matching filters."""

    def select_one(
        self,
        columns: str = "*",
        filters: Optional[Filters] = None,
    ) -> Optional[Dict[str, Any]]:
        """Fetch the first row matching filters, or None."""
        rows = self.select(columns=columns, filters=filters, range_=(0, 0))
        return rows[0] if rows else None


def matches_filters(row: Dict[str, Any], filters: Optional[Filters]) -> bool:
    """Evaluate store filter semantics against a plain row dict."""
    for column, expected in (filters or {}).items():
        actual = row.get(column)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif expected is None:
            if actual is not None:
                return False
        elif actual != expected:
            return False
    return True
