# =============================================================================
# seo_core/services/video_service.py
# Video Service - SEO status and field edits on video_seo rows
# =============================================================================

from __future__ import annotations
from typing import Optional, Dict, Any, List, Union

from .base_service import BaseService, WRITERS
from seo_core.errors import DataValidationError, DuplicateRecordError, RecordNotFoundError, RecordStoreError
from seo_core.sync.namespaces import VIDEO_COLUMNS

EDITABLE_FIELDS = ("title_v1", "title_v2", "title_v3", "description", "tags")


def parse_tags(tags: Union[str, List[str], None]) -> Optional[List[str]]:
    """Comma string or list -> trimmed non-empty list, None when empty."""
    if tags is None:
        return None
    if isinstance(tags, str):
        items = tags.split(",")
    else:
        items = [str(t) for t in tags]
    cleaned = [t.strip() for t in items if t and t.strip()]
    return cleaned or None


def normalize_seo_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Tags as a list, text fields trimmed with blanks stored as None."""
    patch = {}
    for key, value in fields.items():
        if key == "tags":
            patch[key] = parse_tags(value)
        else:
            patch[key] = (value or "").strip() or None
    return patch


class VideoService(BaseService):
    """
    Service for video_seo rows.

    Usage:
        service = VideoService(stores)
        record = service.toggle_seo_done(video["id"], video["is_seo_done"], worked_by="Sam")
    """

    def get_video(self, video_id: str) -> Dict[str, Any]:
        """
        Raises:
            RecordNotFoundError: If no video has this id
        """
        row = self.stores.videos.select_one(VIDEO_COLUMNS, {"id": video_id})
        if row is None:
            raise RecordNotFoundError(f"Video {video_id} not found", record_id=video_id)
        return row

    def _updated_record(self, video_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        rows = self.stores.videos.update({"id": video_id}, patch)
        if not rows:
            raise RecordNotFoundError(f"Video {video_id} not found", record_id=video_id)
        # re-read for the channels join
        return self.stores.videos.select_one(VIDEO_COLUMNS, {"id": video_id}) or rows[0]

    def toggle_seo_done(
        self,
        video_id: str,
        current_status: bool,
        worked_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Flip is_seo_done and return the server record.

        Marking done with a working identity also records worked_by.
        """
        new_status = not current_status
        patch: Dict[str, Any] = {"is_seo_done": new_status}
        if new_status and worked_by:
            patch["worked_by"] = worked_by

        record = self._updated_record(video_id, patch)
        self.logger.info(f"SEO marked as {'done' if new_status else 'not done'} for {video_id}")
        return record

    def update_seo(self, video_id: str, fields: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        """Edit title variants, description and tags. Editors and admins."""
        self.require_role(user_id, WRITERS, "edit SEO fields")

        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise DataValidationError(f"Fields not editable: {sorted(unknown)}", field=", ".join(sorted(unknown)))

        return self._updated_record(video_id, normalize_seo_fields(fields))

    def create_video(
        self,
        channel_id: str,
        video_id: str,
        old_title: str,
        user_id: str,
        published_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Insert a video and its default pending task.

        Raises:
            AuthorizationError: For viewers
            DataValidationError: If video_id or title is missing
            DuplicateRecordError: If video_id already exists
        """
        self.require_role(user_id, WRITERS, "add videos")

        video_id = (video_id or "").strip()
        old_title = (old_title or "").strip()
        if not video_id:
            raise DataValidationError("Video ID is required", field="video_id")
        if not old_title:
            raise DataValidationError("Title is required", field="old_title")

        if self.stores.videos.select_one("id", {"video_id": video_id}) is not None:
            raise DuplicateRecordError("Duplicate Video ID", table="video_seo", operation="insert")

        video = self.stores.videos.insert({
            "channel_id": channel_id,
            "video_id": video_id,
            "old_title": old_title,
            "published_at": published_at,
            "is_seo_done": False,
        })

        try:
            self.stores.tasks.insert({"video_id": video["id"], "status": "pending", "assigned_to": None})
        except RecordStoreError as e:
            self.logger.warning(f"Default task for {video_id} not created: {e.message}")

        return video

    def delete_video(self, video_id: str, user_id: str) -> None:
        self.require_role(user_id, WRITERS, "delete videos", relax_in_dev=True)
        self.stores.videos.delete({"id": video_id})
        self.logger.info(f"Deleted video {video_id}")
