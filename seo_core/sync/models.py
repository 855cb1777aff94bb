# =============================================================================
# seo_core/sync/models.py
# Data structures shared by the cache synchronization layer
# =============================================================================

from __future__ import annotations
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

# A record is a row of the managed collection (a `video_seo` row), keyed by "id"
Record = Dict[str, Any]


def now_ms() -> int:
    """Wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class CollectionSnapshot:
    """
    A point-in-time copy of a collection.

    Records are ordered by created_at descending and unique by id.
    """
    records: List[Record] = field(default_factory=list)
    fetched_at: int = 0  # epoch ms

    def __len__(self) -> int:
        return len(self.records)

    def ids(self) -> List[Any]:
        return [r.get("id") for r in self.records]

    def index_of(self, record_id: Any) -> Optional[int]:
        for i, record in enumerate(self.records):
            if record.get("id") == record_id:
                return i
        return None

    def age_ms(self, now: Optional[int] = None) -> int:
        return (now if now is not None else now_ms()) - self.fetched_at

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten records (including the channels join) for table display."""
        if not self.records:
            return pd.DataFrame()
        return pd.json_normalize(self.records, sep="_")


@dataclass(frozen=True)
class FetchProgress:
    """Incremental progress of a batch fetch."""
    loaded: int
    total: int
    percent: float


class NotificationKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    """Ephemeral user-facing message."""
    message: str
    kind: NotificationKind
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=time.monotonic)


@dataclass
class PendingAction:
    """
    A fire-and-forget mutation waiting in the background queue.

    `operation` runs on the queue worker; `on_success` receives its result,
    `on_error` receives the raised exception.
    """
    operation: Callable[[], Any]
    on_success: Optional[Callable[[Any], None]] = None
    on_error: Optional[Callable[[Exception], None]] = None
    success_message: Optional[str] = None
    error_message: Optional[str] = None
    id: str = field(default_factory=new_id)


class RecordPhase(Enum):
    """Where a locally displayed record stands relative to the server."""
    CONFIRMED = "confirmed"
    OPTIMISTIC = "optimistic"


@dataclass(frozen=True)
class RecordState:
    """
    Tagged local state of one record.

    CONFIRMED(value)            -- value matches the last server answer (or a rollback)
    OPTIMISTIC(value, action)   -- value was applied locally, action still in flight
    """
    phase: RecordPhase
    value: Record
    pending_action_id: Optional[str] = None
    rolled_back: bool = False

    @classmethod
    def confirmed(cls, value: Record, rolled_back: bool = False) -> RecordState:
        return cls(RecordPhase.CONFIRMED, dict(value), None, rolled_back)

    @classmethod
    def optimistic(cls, value: Record, action_id: str) -> RecordState:
        return cls(RecordPhase.OPTIMISTIC, dict(value), action_id, False)

    @property
    def is_pending(self) -> bool:
        return self.phase is RecordPhase.OPTIMISTIC
