# =============================================================================
# seo_core/sync/namespaces.py
# Cache namespace definitions and the central registry
# =============================================================================
"""
A namespace is one cached view of the collection: the whole collection, or
the subset under one parent (a channel). Every kind of namespace is
registered here so cache-wide operations can enumerate them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from seo_core.config.settings import DAY_MS, FIVE_MINUTES_MS
from seo_core.sync.models import Record

VIDEO_COLUMNS = (
    "id, channel_id, video_id, old_title, title_v1, title_v2, title_v3, "
    "description, tags, is_seo_done, assigned_to, worked_by, published_at, "
    "created_at, updated_at, channels(id, channel_name, channel_id)"
)


@dataclass(frozen=True)
class CacheNamespace:
    """A concrete cache slot with its storage keys, TTL and fetch filters."""
    name: str
    data_key: str
    time_key: str
    ttl_ms: int
    columns: str = "*"
    filters: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class NamespaceKind:
    """
    Template for a family of namespaces.

    Keys may contain ``{parent_id}``. A kind with ``parent_field`` set holds
    the records whose parent_field equals the namespace's parent id.
    """
    kind: str
    data_key: str
    time_key: str
    ttl_ms: int
    columns: str = "*"
    parent_field: Optional[str] = None

    def namespace(self, parent_id: Optional[Any] = None) -> CacheNamespace:
        if self.parent_field and parent_id is None:
            raise ValueError(f"Namespace kind '{self.kind}' needs a parent id")
        fmt = {"parent_id": parent_id}
        filters = {self.parent_field: parent_id} if self.parent_field else {}
        name = f"{self.kind}:{parent_id}" if self.parent_field else self.kind
        return CacheNamespace(
            name=name,
            data_key=self.data_key.format(**fmt),
            time_key=self.time_key.format(**fmt),
            ttl_ms=self.ttl_ms,
            columns=self.columns,
            filters=filters,
        )

    def namespace_for(self, record: Record) -> Optional[CacheNamespace]:
        """The namespace of this kind that would hold `record`, if any."""
        if not self.parent_field:
            return self.namespace()
        parent_id = record.get(self.parent_field)
        if parent_id is None:
            return None
        return self.namespace(parent_id)


class NamespaceRegistry:
    """Ordered set of namespace kinds."""

    def __init__(self):
        self._kinds: Dict[str, NamespaceKind] = {}

    def register(self, kind: NamespaceKind) -> NamespaceKind:
        self._kinds[kind.kind] = kind
        return kind

    def kind(self, name: str) -> NamespaceKind:
        try:
            return self._kinds[name]
        except KeyError:
            raise KeyError(f"Unknown cache namespace kind: {name}") from None

    def kinds(self) -> List[NamespaceKind]:
        return list(self._kinds.values())

    def get(self, kind: str, parent_id: Optional[Any] = None) -> CacheNamespace:
        return self.kind(kind).namespace(parent_id)

    def namespaces_for(self, record: Record) -> List[CacheNamespace]:
        """Every registered namespace that could contain `record`."""
        result = []
        for kind in self._kinds.values():
            namespace = kind.namespace_for(record)
            if namespace is not None:
                result.append(namespace)
        return result


ALL_VIDEOS = "all_videos"
CHANNEL_VIDEOS = "channel_videos"


def default_registry(
    all_videos_ttl_ms: int = DAY_MS,
    channel_videos_ttl_ms: int = FIVE_MINUTES_MS,
) -> NamespaceRegistry:
    """Registry with the global video namespace and the per-channel family."""
    registry = NamespaceRegistry()
    registry.register(NamespaceKind(
        kind=ALL_VIDEOS,
        data_key="all_videos_cache_v5",
        time_key="all_videos_cache_time_v5",
        ttl_ms=all_videos_ttl_ms,
        columns=VIDEO_COLUMNS,
    ))
    registry.register(NamespaceKind(
        kind=CHANNEL_VIDEOS,
        data_key="channel_videos_{parent_id}",
        time_key="channel_videos_{parent_id}_time",
        ttl_ms=channel_videos_ttl_ms,
        columns=VIDEO_COLUMNS,
        parent_field="channel_id",
    ))
    return registry
