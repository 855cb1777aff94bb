# =============================================================================
# seo_core/data/supabase_client.py
# Supabase Client Configuration for SEO Manager
# Handles database connections and the Supabase-backed record store
# =============================================================================

from __future__ import annotations
from typing import Optional, Dict, Any, List

import streamlit as st
from supabase import Client, create_client

from seo_core.config import Settings, get_settings
from seo_core.data.record_store import Filters, RecordStoreClient, RowRange
from seo_core.errors import ConfigurationError, DuplicateRecordError, RecordStoreError
from seo_core.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"


def get_supabase_client(
    settings: Optional[Settings] = None,
    use_service_role: bool = False,
) -> Client:
    """
    Create a Supabase client from settings.

    Args:
        settings: Settings to read credentials from (defaults to get_settings())
        use_service_role: Use the service-role key, bypassing row level security

    Returns:
        Supabase client instance

    Raises:
        ConfigurationError: If url/key are not configured
    """
    settings = settings or get_settings()

    if not settings.supabase_configured:
        raise ConfigurationError(
            "Supabase credentials not found. Configure [supabase] url/key in "
            ".streamlit/secrets.toml or SUPABASE_URL/SUPABASE_KEY in the environment",
            config_key="supabase",
        )

    key = settings.supabase_key
    if use_service_role:
        if settings.supabase_service_role_key:
            key = settings.supabase_service_role_key
        else:
            logger.warning("Service role key unavailable, falling back to anon key")

    return create_client(settings.supabase_url, key)


@st.cache_resource(ttl=3600)  # Cache for 1 hour, then refresh
def get_cached_supabase_client(use_service_role: bool = False) -> Client:
    """
    Get cached Supabase client (reused across sessions).

    Uses TTL to periodically refresh the connection and prevent stale connections.
    """
    return get_supabase_client(use_service_role=use_service_role)


def _db_code(error: Exception) -> Optional[str]:
    code = getattr(error, "code", None)
    return str(code) if code else None


class SupabaseRecordStore(RecordStoreClient):
    """
    RecordStoreClient backed by one Supabase (PostgREST) table.
    """

    def __init__(self, table_name: str, client: Client):
        """
        Initialize store for a specific table.

        Args:
            table_name: Name of the Supabase table
            client: Supabase client instance
        """
        super().__init__(table_name)
        self.client = client

    def _table(self):
        return self.client.table(self.table_name)

    @staticmethod
    def _apply_filters(query, filters: Optional[Filters]):
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.in_(column, list(value))
            elif value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, value)
        return query

    def _fail(self, operation: str, error: Exception) -> RecordStoreError:
        code = _db_code(error)
        message = getattr(error, "message", None) or str(error)
        logger.error(f"Supabase {operation} on {self.table_name} failed: {message}")
        if code == UNIQUE_VIOLATION:
            return DuplicateRecordError(message, table=self.table_name, operation=operation)
        return RecordStoreError(message, table=self.table_name, operation=operation, db_code=code)

    def select(
        self,
        columns: str = "*",
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        range_: Optional[RowRange] = None,
    ) -> List[Dict[str, Any]]:
        try:
            query = self._apply_filters(self._table().select(columns), filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            if range_ is not None:
                query = query.range(range_[0], range_[1])
            response = query.execute()
            return list(response.data or [])
        except Exception as e:
            raise self._fail("select", e) from e

    def count(self, filters: Optional[Filters] = None) -> int:
        try:
            query = self._apply_filters(
                self._table().select("id", count="exact", head=True), filters
            )
            response = query.execute()
            return int(response.count or 0)
        except Exception as e:
            raise self._fail("count", e) from e

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._table().insert(row).execute()
        except Exception as e:
            raise self._fail("insert", e) from e
        data = response.data or []
        return data[0] if data else dict(row)

    def update(self, filters: Filters, patch: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            query = self._apply_filters(self._table().update(patch), filters)
            response = query.execute()
            return list(response.data or [])
        except Exception as e:
            raise self._fail("update", e) from e

    def delete(self, filters: Filters) -> None:
        try:
            self._apply_filters(self._table().delete(), filters).execute()
        except Exception as e:
            raise self._fail("delete", e) from e
