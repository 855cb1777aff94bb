# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, List
from unittest.mock import MagicMock

from seo_core.data.memory_store import InMemoryDatabase, InMemoryRecordStore
from seo_core.data.stores import Stores


# =============================================================================
# CLOCKS
# =============================================================================

class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

def make_videos(count: int, channel_id: str = "ch-1", prefix: str = "vid") -> List[Dict]:
    """Video rows with distinct, descending created_at (newest first)."""
    base = datetime(2025, 6, 1, tzinfo=timezone.utc)
    return [
        {
            "id": f"{prefix}-{i:05d}",
            "channel_id": channel_id,
            "video_id": f"yt{prefix}{i:05d}",
            "old_title": f"Video {i}",
            "is_seo_done": False,
            "assigned_to": None,
            "worked_by": None,
            "created_at": (base - timedelta(minutes=i)).isoformat(),
        }
        for i in range(count)
    ]


@pytest.fixture
def video_factory():
    return make_videos


@pytest.fixture
def sample_videos():
    return make_videos(5)


@pytest.fixture
def database():
    """Empty in-memory database with two channels and roles for three users."""
    db = InMemoryDatabase()
    db.table("channels").insert({"id": "ch-1", "channel_id": "UC1", "channel_name": "Cooking"})
    db.table("channels").insert({"id": "ch-2", "channel_id": "UC2", "channel_name": "Travel"})
    db.table("user_roles").insert({"user_id": "alice", "role": "admin"})
    db.table("user_roles").insert({"user_id": "eddie", "role": "editor"})
    db.table("user_roles").insert({"user_id": "vera", "role": "viewer"})
    for name, role in (("Sam", "editor"), ("Alex", "admin")):
        db.table("team_members").insert({"name": name, "role": role, "is_active": True})
    db.table("team_members").insert({"name": "Former", "role": "editor", "is_active": False})
    return db


@pytest.fixture
def stores(database):
    return Stores.in_memory(database)


@pytest.fixture
def seeded_stores(database, stores):
    """Stores with five videos on ch-1 and three on ch-2."""
    for row in make_videos(5, "ch-1", "a") + make_videos(3, "ch-2", "b"):
        database.table("video_seo").insert(row)
    return stores


@pytest.fixture
def video_store():
    """Standalone video table with 25 rows."""
    return InMemoryRecordStore("video_seo", rows=make_videos(25), unique_columns=("video_id",))


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_supabase():
    """Mock Supabase client; every query builder method returns the same chain."""
    mock_client = MagicMock()
    query = MagicMock()
    for method in ("select", "eq", "in_", "is_", "order", "range", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=[], count=0)
    mock_client.table.return_value = query
    mock_client.query = query
    return mock_client
