# =============================================================================
# seo_core/services/task_service.py
# Per-video task tracking
# =============================================================================

from __future__ import annotations
from typing import Optional, Dict, Any, List

from .base_service import BaseService, WRITERS
from seo_core.errors import DataValidationError, DuplicateRecordError, RecordNotFoundError

TASK_STATUSES = ("pending", "in_progress", "completed")


class TaskService(BaseService):
    """
    One task per video (tasks.video_id is unique).

    Writes need the editor or admin role.
    """

    def get_task(self, video_id: str) -> Optional[Dict[str, Any]]:
        return self.stores.tasks.select_one("*", {"video_id": video_id})

    def get_assignable_users(self) -> List[Dict[str, Any]]:
        return self.stores.user_roles.select("user_id, role", {"role": list(WRITERS)})

    def create_task(self, video_id: str, user_id: str) -> bool:
        """Create the video's pending task; an existing task counts as success."""
        self.require_role(user_id, WRITERS, "create tasks")
        try:
            self.stores.tasks.insert({"video_id": video_id, "status": "pending", "assigned_to": None})
        except DuplicateRecordError:
            self.logger.info(f"Task for {video_id} already exists, ignoring")
        return True

    def update_task_status(self, task_id: str, status: str, user_id: str) -> Dict[str, Any]:
        self.require_role(user_id, WRITERS, "update tasks")
        if status not in TASK_STATUSES:
            raise DataValidationError(f"Invalid task status: {status}", field="status")
        rows = self.stores.tasks.update({"id": task_id}, {"status": status})
        if not rows:
            raise RecordNotFoundError(f"Task {task_id} not found", record_id=task_id)
        return rows[0]

    def assign_task(self, task_id: str, assignee_id: Optional[str], user_id: str) -> Dict[str, Any]:
        self.require_role(user_id, WRITERS, "assign tasks")
        rows = self.stores.tasks.update({"id": task_id}, {"assigned_to": assignee_id or None})
        if not rows:
            raise RecordNotFoundError(f"Task {task_id} not found", record_id=task_id)
        return rows[0]
