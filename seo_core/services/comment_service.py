# =============================================================================
# seo_core/services/comment_service.py
# Video comments
# =============================================================================

from __future__ import annotations
from typing import Dict, Any, List

from .base_service import BaseService, WRITERS
from seo_core.errors import DataValidationError


class CommentService(BaseService):

    def get_comments(self, video_id: str) -> List[Dict[str, Any]]:
        """Comments on a video, oldest first."""
        return self.stores.comments.select(
            "id, comment, created_at, user_id",
            {"video_id": video_id},
            order_by="created_at",
        )

    def add_comment(self, video_id: str, content: str, user_id: str) -> Dict[str, Any]:
        self.require_role(user_id, WRITERS, "comment")
        text = (content or "").strip()
        if not text:
            raise DataValidationError("Content is required", field="content")
        return self.stores.comments.insert({"video_id": video_id, "user_id": user_id, "comment": text})
