# =============================================================================
# seo_core/services/team_member_service.py
# "Working as" identity
# =============================================================================

from __future__ import annotations
import json
from typing import Optional, Dict, Any, List

from .base_service import BaseService
from seo_core.data.stores import Stores
from seo_core.errors import CacheStorageError
from seo_core.sync.broadcaster import Topic, UpdateBroadcaster
from seo_core.sync.storage import KeyValueStorage

SELECTED_MEMBER_KEY = "selected_team_member"


class TeamMemberService(BaseService):
    """
    The team member the signed-in user is working as. Persisted in the
    session's persistent storage and announced on team-member-updated.
    """

    def __init__(
        self,
        stores: Stores,
        storage: KeyValueStorage,
        broadcaster: UpdateBroadcaster,
        dev_mode: bool = False,
    ):
        super().__init__(stores, dev_mode)
        self.storage = storage
        self.broadcaster = broadcaster

    def list_active(self) -> List[Dict[str, Any]]:
        return self.stores.team_members.select("*", {"is_active": True}, order_by="name")

    def select(self, member: Dict[str, Any]) -> None:
        try:
            self.storage.set_item(SELECTED_MEMBER_KEY, json.dumps(member, default=str))
        except CacheStorageError as e:
            self.logger.warning(f"Could not persist selected team member: {e.message}")
        self.broadcaster.publish(Topic.TEAM_MEMBER_UPDATED, member)
        self.logger.info(f"Working as {member.get('name')}")

    def current(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.storage.get_item(SELECTED_MEMBER_KEY)
        except CacheStorageError:
            return None
        if not raw:
            return None
        try:
            member = json.loads(raw)
        except ValueError:
            self.logger.error("Error parsing stored team member")
            return None
        return member if isinstance(member, dict) and member.get("name") else None

    def clear(self) -> None:
        try:
            self.storage.remove_item(SELECTED_MEMBER_KEY)
        except CacheStorageError as e:
            self.logger.warning(f"Could not clear selected team member: {e.message}")
