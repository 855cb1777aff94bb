# =============================================================================
# seo_core/sync/optimistic.py
# Optimistic local mutations with rollback
# =============================================================================
"""
OptimisticMutator applies a change locally, queues the remote call, and
settles the local state when the call finishes:

    success -> reconcile caches -> CONFIRMED(server value) -> video-updated
    failure -> CONFIRMED(previous value, rolled_back=True) -> error notification

While a newer action on the same record is still in flight, an older one
settling leaves the OPTIMISTIC state alone and hands the newer action the
value it settled on (server value, or its own rollback value) to roll back to.

Rapid repeated mutations on one record are queued individually and run in
order; they are not coalesced.
"""

from __future__ import annotations
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from seo_core.logging import get_logger
from seo_core.sync.action_queue import BackgroundActionQueue
from seo_core.sync.broadcaster import Topic, UpdateBroadcaster
from seo_core.sync.coherence import CacheCoherencePolicy
from seo_core.sync.models import PendingAction, Record, RecordPhase, RecordState, new_id

logger = get_logger(__name__)


class RecordStateStore:
    """Thread-safe map of record id -> RecordState."""

    def __init__(self):
        self._states: Dict[Any, RecordState] = {}
        self._lock = threading.Lock()

    def get(self, record_id: Any) -> Optional[RecordState]:
        with self._lock:
            return self._states.get(record_id)

    def set(self, record_id: Any, state: RecordState) -> None:
        with self._lock:
            self._states[record_id] = state

    def seed(self, record: Record) -> RecordState:
        """Track a record as CONFIRMED unless it already has local state."""
        with self._lock:
            state = self._states.get(record["id"])
            if state is None:
                state = RecordState.confirmed(record)
                self._states[record["id"]] = state
            return state

    def value(self, record_id: Any, fallback: Optional[Record] = None) -> Record:
        state = self.get(record_id)
        if state is not None:
            return dict(state.value)
        return dict(fallback or {})

    def clear(self) -> None:
        with self._lock:
            self._states.clear()


class OptimisticMutator:
    def __init__(
        self,
        queue: BackgroundActionQueue,
        coherence: CacheCoherencePolicy,
        broadcaster: UpdateBroadcaster,
        states: Optional[RecordStateStore] = None,
    ):
        self.queue = queue
        self.coherence = coherence
        self.broadcaster = broadcaster
        self.states = states or RecordStateStore()
        # record id -> [(action id, rollback value)] for unsettled actions, oldest first
        self._unsettled: Dict[Any, List[Tuple[str, Record]]] = {}
        self._lock = threading.Lock()

    def _settle(self, record_id: Any, action_id: str, settled: Optional[Record], rolled_back: bool) -> bool:
        """
        Drop a finished action from the record's chain.

        The next unsettled action on the record inherits the value this one
        settled on as its rollback value. If no newer action owns the record,
        the local state becomes CONFIRMED(settled, or the rollback value).

        Returns:
            True if the local state was settled by this action
        """
        with self._lock:
            chain = self._unsettled.get(record_id, [])
            index = next((i for i, (aid, _) in enumerate(chain) if aid == action_id), None)
            previous = chain.pop(index)[1] if index is not None else None
            value = previous if rolled_back else settled
            if index is not None and index < len(chain) and value is not None:
                chain[index] = (chain[index][0], dict(value))
            if not chain:
                self._unsettled.pop(record_id, None)

            current = self.states.get(record_id)
            if current is not None and current.pending_action_id not in (None, action_id):
                # a newer optimistic change keeps its own state until it settles
                return False
            if value is not None:
                self.states.set(record_id, RecordState.confirmed(value, rolled_back=rolled_back))
            return True

    def pending_actions(self, record_id: Any) -> List[str]:
        with self._lock:
            return [aid for aid, _ in self._unsettled.get(record_id, [])]

    def clear(self) -> None:
        with self._lock:
            self._unsettled.clear()
            self.states.clear()

    def apply(
        self,
        record: Record,
        local_mutation: Callable[[Record], Record],
        remote_mutation: Callable[[], Record],
        success_message: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> str:
        """
        Mutate a record optimistically.

        Args:
            record: Current record as displayed (used if no local state yet)
            local_mutation: Returns the optimistic value from the current one
            remote_mutation: Performs the server write, returns the server record
            success_message: Notification on success (none if omitted)
            error_message: Notification on failure (queue default if omitted)

        Returns:
            Id of the queued action
        """
        record_id = record["id"]
        action_id = new_id()
        with self._lock:
            previous = self.states.value(record_id, fallback=record)
            optimistic = local_mutation(dict(previous))
            self._unsettled.setdefault(record_id, []).append((action_id, previous))
            self.states.set(record_id, RecordState.optimistic(optimistic, action_id))

        def on_success(server_record: Optional[Record]) -> None:
            confirmed = {**optimistic, **(server_record or {})}
            self.coherence.reconcile(confirmed)
            self._settle(record_id, action_id, confirmed, rolled_back=False)
            self.broadcaster.publish(Topic.VIDEO_UPDATED, confirmed)

        def on_error(error: Exception) -> None:
            if self._settle(record_id, action_id, None, rolled_back=True):
                logger.warning(f"Rolled back record {record_id}: {error}")
            else:
                logger.warning(f"Action {action_id} on record {record_id} failed under a newer change: {error}")

        self.queue.enqueue(PendingAction(
            operation=remote_mutation,
            on_success=on_success,
            on_error=on_error,
            success_message=success_message,
            error_message=error_message,
            id=action_id,
        ))
        return action_id

    def toggle(
        self,
        record: Record,
        field: str,
        remote_toggle: Callable[[bool], Record],
        success_message: Optional[Callable[[bool], str]] = None,
        error_message: Optional[str] = None,
    ) -> str:
        """
        Flip a boolean field.

        `remote_toggle` receives the value the field had before this toggle.
        """
        current = bool(self.states.value(record["id"], fallback=record).get(field))
        return self.apply(
            record,
            local_mutation=lambda r: {**r, field: not current},
            remote_mutation=lambda: remote_toggle(current),
            success_message=success_message(not current) if success_message else None,
            error_message=error_message,
        )

    def phase(self, record_id: Any) -> RecordPhase:
        state = self.states.get(record_id)
        return state.phase if state is not None else RecordPhase.CONFIRMED
