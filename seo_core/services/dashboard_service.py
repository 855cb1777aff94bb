# =============================================================================
# seo_core/services/dashboard_service.py
# Dashboard KPIs and team statistics
# =============================================================================

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, asdict
from typing import Dict, Any, List

import pandas as pd

from .base_service import BaseService
from seo_core.sync.namespaces import VIDEO_COLUMNS


@dataclass
class DashboardStats:
    total_videos: int
    seo_done: int
    seo_pending: int
    total_channels: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DashboardService(BaseService):

    def get_stats(self) -> DashboardStats:
        """Counts run concurrently; nothing but counts is transferred."""
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="dashboard") as pool:
            total = pool.submit(self.stores.videos.count)
            done = pool.submit(self.stores.videos.count, {"is_seo_done": True})
            channels = pool.submit(self.stores.channels.count)
            total_videos, seo_done = total.result(), done.result()
            return DashboardStats(
                total_videos=total_videos,
                seo_done=seo_done,
                seo_pending=total_videos - seo_done,
                total_channels=channels.result(),
            )

    def get_recent_videos(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self.stores.videos.select(
            VIDEO_COLUMNS,
            order_by="updated_at",
            descending=True,
            range_=(0, limit - 1),
        )

    def get_member_stats(self, videos: List[Dict[str, Any]]) -> pd.DataFrame:
        """
        Per active team member: videos assigned and not done, and videos done by them.

        Args:
            videos: The full video list (usually the cached global snapshot)

        Returns:
            DataFrame with columns name, role, assigned, completed
        """
        members = self.stores.team_members.select("*", {"is_active": True}, order_by="name")
        frame = pd.DataFrame(videos, columns=["assigned_to", "worked_by", "is_seo_done"])
        frame["is_seo_done"] = frame["is_seo_done"].fillna(False).astype(bool)

        assigned = frame[~frame["is_seo_done"]].groupby("assigned_to").size()
        completed = frame[frame["is_seo_done"]].groupby("worked_by").size()

        rows = []
        for member in members:
            name = member["name"]
            rows.append({
                "name": name,
                "role": member.get("role", "viewer"),
                "assigned": int(assigned.get(name, 0)),
                "completed": int(completed.get(name, 0)),
            })
        return pd.DataFrame(rows, columns=["name", "role", "assigned", "completed"])
