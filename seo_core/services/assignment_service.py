# =============================================================================
# seo_core/services/assignment_service.py
# Bulk assignment of videos to team members
# =============================================================================

from __future__ import annotations
from typing import List, Dict, Any, Optional

from .base_service import BaseService
from seo_core.errors import DataValidationError


class AssignmentService(BaseService):

    def _set_assignee(self, video_ids: List[str], member_name: Optional[str]) -> List[Dict[str, Any]]:
        if not video_ids:
            raise DataValidationError("No videos selected", field="video_ids")
        return self.stores.videos.update({"id": list(video_ids)}, {"assigned_to": member_name})

    def assign_videos(self, video_ids: List[str], member_name: str) -> List[Dict[str, Any]]:
        if not (member_name or "").strip():
            raise DataValidationError("Team member is required", field="member_name")
        rows = self._set_assignee(video_ids, member_name.strip())
        self.logger.info(f"Assigned {len(video_ids)} video(s) to {member_name}")
        return rows

    def unassign_videos(self, video_ids: List[str]) -> List[Dict[str, Any]]:
        rows = self._set_assignee(video_ids, None)
        self.logger.info(f"Unassigned {len(video_ids)} video(s)")
        return rows

    @staticmethod
    def assigned_message(count: int, member_name: str) -> str:
        return f"Assigned {count} video(s) to {member_name}"

    @staticmethod
    def unassigned_message(count: int) -> str:
        return f"Unassigned {count} video(s)"
