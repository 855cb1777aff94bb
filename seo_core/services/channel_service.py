# =============================================================================
# seo_core/services/channel_service.py
# Channel listing and renaming
# =============================================================================

from __future__ import annotations
from typing import Optional, Dict, Any, List

from .base_service import BaseService, ADMINS
from seo_core.errors import DataValidationError, RecordNotFoundError


class ChannelService(BaseService):

    def list_channels(self) -> List[Dict[str, Any]]:
        return self.stores.channels.select("*", order_by="channel_name")

    def get_channel(self, channel_id: str) -> Optional[Dict[str, Any]]:
        return self.stores.channels.select_one("*", {"id": channel_id})

    def video_counts(self, channel_id: str) -> Dict[str, int]:
        total = self.stores.videos.count({"channel_id": channel_id})
        done = self.stores.videos.count({"channel_id": channel_id, "is_seo_done": True})
        return {"total": total, "done": done, "pending": total - done}

    def update_channel_name(self, channel_id: str, new_name: str, user_id: str) -> Dict[str, Any]:
        """Rename a channel. Admins only (any role in dev mode)."""
        self.require_role(user_id, ADMINS, "rename channels", relax_in_dev=True)

        name = (new_name or "").strip()
        if not name:
            raise DataValidationError("Channel name is required", field="channel_name")

        rows = self.stores.channels.update({"id": channel_id}, {"channel_name": name})
        if not rows:
            raise RecordNotFoundError(f"Channel {channel_id} not found", record_id=channel_id)
        self.logger.info(f"Renamed channel {channel_id} to '{name}'")
        return rows[0]
