# =============================================================================
# seo_core/ui/actions.py - Page-level mutations routed through the cache store
# =============================================================================
"""
Every user-triggered write on a video goes through here so that it is
applied optimistically, executed on the background queue, reconciled into
every cached namespace and announced to mounted views.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

from seo_core.services import AssignmentService
from seo_core.services.video_service import normalize_seo_fields
from seo_core.state.session import get_cache_store, get_services
from seo_core.sync import PendingAction, RecordPhase, Topic


def working_as() -> Optional[str]:
    member = get_services().team_members.current()
    return member.get("name") if member else None


def displayed(record: Dict[str, Any]) -> Tuple[Dict[str, Any], RecordPhase]:
    """The record as it should render: the optimistic value while an action is pending."""
    state = get_cache_store().mutator.states.get(record["id"])
    if state is not None and state.is_pending:
        return {**record, **state.value}, RecordPhase.OPTIMISTIC
    return record, RecordPhase.CONFIRMED


def toggle_seo(record: Dict[str, Any]) -> str:
    services = get_services()
    worked_by = working_as()
    return get_cache_store().mutator.toggle(
        record,
        "is_seo_done",
        remote_toggle=lambda current: services.videos.toggle_seo_done(record["id"], current, worked_by),
        success_message=lambda done: f"SEO marked as {'done' if done else 'not done'}",
        error_message="Failed to update SEO status",
    )


def save_seo_fields(record: Dict[str, Any], fields: Dict[str, Any], user_id: str) -> str:
    services = get_services()
    patch = normalize_seo_fields(fields)
    return get_cache_store().mutator.apply(
        record,
        local_mutation=lambda r: {**r, **patch},
        remote_mutation=lambda: services.videos.update_seo(record["id"], fields, user_id),
        success_message="SEO details saved",
        error_message="Failed to save SEO details",
    )


def _reconcile_rows(rows: List[Dict[str, Any]]):
    store = get_cache_store()
    for row in rows:
        store.coherence.reconcile(row)
        store.broadcaster.publish(Topic.VIDEO_UPDATED, row)


def assign_videos(video_ids: List[str], member_name: Optional[str]) -> str:
    """Queue a bulk (un)assignment; member_name None unassigns."""
    assignments = get_services().assignments
    if member_name:
        operation = lambda: assignments.assign_videos(video_ids, member_name)
        message = AssignmentService.assigned_message(len(video_ids), member_name)
    else:
        operation = lambda: assignments.unassign_videos(video_ids)
        message = AssignmentService.unassigned_message(len(video_ids))

    return get_cache_store().queue.enqueue(PendingAction(
        operation=operation,
        on_success=_reconcile_rows,
        success_message=message,
        error_message="Failed to update assignments",
    ))


def open_video(record: Dict[str, Any]):
    st.session_state["current_video_id"] = record["id"]
    st.switch_page("pages/04_Video_Detail.py")
