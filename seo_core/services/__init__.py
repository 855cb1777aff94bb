# =============================================================================
# seo_core/services/__init__.py
# Service Layer for SEO Manager
# Separates business logic from UI presentation
# =============================================================================
"""
Service Layer for SEO Manager

Services own the database reads/writes behind each page. Writes check the
caller's role first and raise typed errors; pages wrap calls with
`safe_execute()` or hand them to the background queue.

Usage Example:
-------------
    from seo_core.services import ServiceRegistry

    services = ServiceRegistry(stores, cache_store, dev_mode=settings.dev_mode)

    result = services.channels.safe_execute(
        "Renaming channel",
        services.channels.update_channel_name, channel_id, "New name", user_id,
    )
    if not result:
        st.error(result.error)
"""

from .base_service import BaseService, ServiceResult, ROLES, WRITERS, ADMINS
from .video_service import VideoService, parse_tags
from .assignment_service import AssignmentService
from .task_service import TaskService, TASK_STATUSES
from .comment_service import CommentService
from .channel_service import ChannelService
from .dashboard_service import DashboardService, DashboardStats
from .import_service import ImportService, BulkImportResult, ImportRowError
from .team_member_service import TeamMemberService, SELECTED_MEMBER_KEY

from seo_core.data.stores import Stores
from seo_core.sync.cache_store import CacheStore


class ServiceRegistry:
    """All services bound to one table bundle and one session cache store."""

    def __init__(self, stores: Stores, cache_store: CacheStore, dev_mode: bool = False):
        self.videos = VideoService(stores, dev_mode)
        self.assignments = AssignmentService(stores, dev_mode)
        self.tasks = TaskService(stores, dev_mode)
        self.comments = CommentService(stores, dev_mode)
        self.channels = ChannelService(stores, dev_mode)
        self.dashboard = DashboardService(stores, dev_mode)
        self.imports = ImportService(stores, dev_mode)
        self.team_members = TeamMemberService(
            stores, cache_store.persistent, cache_store.broadcaster, dev_mode
        )


__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    "ROLES",
    "WRITERS",
    "ADMINS",
    # Services
    "VideoService",
    "AssignmentService",
    "TaskService",
    "CommentService",
    "ChannelService",
    "DashboardService",
    "ImportService",
    "TeamMemberService",
    "ServiceRegistry",
    # Helpers and result types
    "parse_tags",
    "TASK_STATUSES",
    "DashboardStats",
    "BulkImportResult",
    "ImportRowError",
    "SELECTED_MEMBER_KEY",
]
