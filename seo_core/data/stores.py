# =============================================================================
# seo_core/data/stores.py
# Table bundle and store factory
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from seo_core.config import Settings, get_settings
from seo_core.data.memory_store import InMemoryDatabase
from seo_core.data.record_store import RecordStoreClient
from seo_core.errors import ConfigurationError
from seo_core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Stores:
    """One RecordStoreClient per table the app touches."""
    channels: RecordStoreClient
    videos: RecordStoreClient
    tasks: RecordStoreClient
    comments: RecordStoreClient
    team_members: RecordStoreClient
    user_roles: RecordStoreClient

    @classmethod
    def from_factory(cls, factory: Callable[[str], RecordStoreClient]) -> Stores:
        return cls(
            channels=factory("channels"),
            videos=factory("video_seo"),
            tasks=factory("tasks"),
            comments=factory("comments"),
            team_members=factory("team_members"),
            user_roles=factory("user_roles"),
        )

    @classmethod
    def in_memory(cls, database: Optional[InMemoryDatabase] = None) -> Stores:
        database = database or InMemoryDatabase()
        return cls.from_factory(database.table)


_demo_database: Optional[InMemoryDatabase] = None


def get_demo_database() -> InMemoryDatabase:
    """Get the process-wide demo database, seeding it on first use."""
    global _demo_database
    if _demo_database is None:
        _demo_database = InMemoryDatabase()
        seed_demo_data(_demo_database)
    return _demo_database


def seed_demo_data(database: InMemoryDatabase, videos_per_channel: int = 25) -> None:
    """Populate a demo database with two channels, videos, a team and roles."""
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)

    for c in range(2):
        channel = database.table("channels").insert({
            "channel_id": f"UC-DEMO-{c + 1}",
            "channel_name": f"Demo Channel {c + 1}",
        })
        for i in range(videos_per_channel):
            video = database.table("video_seo").insert({
                "channel_id": channel["id"],
                "video_id": f"demo{c + 1}-{i:04d}",
                "old_title": f"Demo video {i + 1} on channel {c + 1}",
                "is_seo_done": i % 4 == 0,
                "assigned_to": None,
                "worked_by": None,
                "created_at": (base + timedelta(hours=c * 1000 + i)).isoformat(),
            })
            database.table("tasks").insert({
                "video_id": video["id"],
                "status": "pending",
                "assigned_to": None,
            })

    for name, role in (("Alex", "admin"), ("Sam", "editor"), ("Riley", "viewer")):
        database.table("team_members").insert({"name": name, "role": role, "is_active": True})

    database.table("user_roles").insert({"user_id": "admin", "role": "admin"})
    logger.info("Seeded demo database")


def get_stores(settings: Optional[Settings] = None, use_service_role: bool = True) -> Stores:
    """
    Build the table bundle for the configured backend.

    Supabase when credentials are present, the seeded in-memory demo database
    when demo mode is on.

    Raises:
        ConfigurationError: If neither backend is available
    """
    settings = settings or get_settings()

    if settings.supabase_configured:
        from seo_core.data.supabase_client import SupabaseRecordStore, get_cached_supabase_client
        client = get_cached_supabase_client(use_service_role=use_service_role)
        return Stores.from_factory(lambda table: SupabaseRecordStore(table, client))

    if settings.demo_mode:
        logger.warning("Supabase not configured, using in-memory demo database")
        return Stores.in_memory(get_demo_database())

    raise ConfigurationError(
        "No record store available: configure Supabase credentials or enable demo mode",
        config_key="supabase",
    )
