# =============================================================================
# seo_core/sync/broadcaster.py
# In-session publish/subscribe for record change events
# =============================================================================
"""
UpdateBroadcaster delivers change events to every mounted view.

Topics:
    video-updated        payload: the updated video record (dict with "id")
    team-member-updated  payload: the updated team member record
    storage              payload: StorageEvent for a cache key that changed

Delivery is synchronous, in subscription order, within the publishing
thread. There is no replay: a subscriber only sees events published after
it subscribed. A failing handler is logged and does not stop delivery.
"""

from __future__ import annotations
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from seo_core.errors import SubscriptionLimitError
from seo_core.logging import get_logger

logger = get_logger(__name__)


class Topic(str, Enum):
    VIDEO_UPDATED = "video-updated"
    TEAM_MEMBER_UPDATED = "team-member-updated"
    STORAGE = "storage"


@dataclass(frozen=True)
class StorageEvent:
    key: str


Handler = Callable[[Any], None]


@dataclass
class Subscription:
    """Handle returned by subscribe(); cancel() unsubscribes."""
    topic: Topic
    handler: Handler
    broadcaster: Optional["UpdateBroadcaster"] = field(default=None, repr=False)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    active: bool = True

    def cancel(self) -> None:
        if self.broadcaster is not None:
            self.broadcaster.unsubscribe(self)
        self.active = False


class UpdateBroadcaster:
    DEFAULT_MAX_SUBSCRIBERS = 32

    def __init__(self, max_subscribers: int = DEFAULT_MAX_SUBSCRIBERS):
        self.max_subscribers = max_subscribers
        self._subscriptions: Dict[Topic, List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topic: Topic, handler: Handler) -> Subscription:
        """
        Register a handler for a topic.

        Raises:
            SubscriptionLimitError: If the topic is at max_subscribers
        """
        topic = Topic(topic)
        with self._lock:
            subs = self._subscriptions[topic]
            if len(subs) >= self.max_subscribers:
                raise SubscriptionLimitError(
                    f"Too many subscribers for '{topic.value}'",
                    topic=topic.value,
                    limit=self.max_subscribers,
                )
            sub = Subscription(topic=topic, handler=handler, broadcaster=self)
            subs.append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        with self._lock:
            try:
                self._subscriptions[subscription.topic].remove(subscription)
            except ValueError:
                pass

    def publish(self, topic: Topic, payload: Any) -> int:
        """
        Deliver payload to the topic's current subscribers.

        Returns:
            Number of handlers that completed without raising
        """
        topic = Topic(topic)
        with self._lock:
            subs = list(self._subscriptions[topic])

        delivered = 0
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"Handler for '{topic.value}' failed: {e}", exc_info=True)
        return delivered

    def subscriber_count(self, topic: Topic) -> int:
        with self._lock:
            return len(self._subscriptions[Topic(topic)])

    def clear(self) -> None:
        with self._lock:
            for subs in self._subscriptions.values():
                for sub in subs:
                    sub.active = False
            self._subscriptions.clear()
