# =============================================================================
# 04_Video_Detail.py - One video: SEO fields, task, comments, prev/next
# =============================================================================
"""
Video detail - opened from a list; previous/next follow the order of the list
the user came from. Neighbouring videos are prefetched so stepping through
the queue does not wait on the network.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

import streamlit as st

from seo_core.auth import get_username
from seo_core.errors import ErrorContext, RecordNotFoundError, error_boundary, handle_error
from seo_core.logging import get_logger
from seo_core.services import TASK_STATUSES
from seo_core.ui.sidebar import page_setup
from seo_core.ui.components import header, status_pill
from seo_core.ui import actions
from seo_core.state.session import get_cache_store, get_services, reset_views

logger = get_logger(__name__)

page_setup("Video", "🎬")

PREFETCH_KEY = "_prefetched_videos"

store = get_cache_store()
services = get_services()
user_id = get_username()

video_id = st.session_state.get("current_video_id")
if not video_id:
    st.info("Pick a video from the Videos or Channels page.")
    st.page_link("pages/03_Videos.py", label="Go to all videos", icon="🎞️")
    st.stop()


def prefetch_neighbors(current_id: str) -> None:
    """Load the videos around current_id into the session, a few at a time."""
    prefetched: Dict[str, Dict[str, Any]] = st.session_state.setdefault(PREFETCH_KEY, {})
    missing: List[str] = [i for i in store.navigator.prefetch_window(current_id) if i not in prefetched]
    if not missing:
        return

    def fetch(vid: str):
        try:
            return services.videos.get_video(vid)
        except RecordNotFoundError:
            return None

    with ThreadPoolExecutor(max_workers=store.fetcher.concurrency, thread_name_prefix="prefetch") as pool:
        for vid, row in zip(missing, pool.map(fetch, missing)):
            if row is not None:
                prefetched[vid] = row
    logger.debug(f"Prefetched {len(missing)} videos around {current_id}")


def load_video(vid: str) -> Dict[str, Any]:
    prefetched = st.session_state.get(PREFETCH_KEY, {})
    row = prefetched.pop(vid, None) or services.videos.get_video(vid)
    state = store.mutator.states.get(vid)
    # a mutation settled since the prefetch
    if state is not None and not state.is_pending:
        row = {**row, **state.value}
    return row


try:
    video = load_video(video_id)
except RecordNotFoundError as e:
    handle_error(e)
    st.stop()

record, phase = actions.displayed(video)

header(record.get("old_title") or record.get("video_id"), (record.get("channels") or {}).get("channel_name") or "", icon="🎬")

# ============================================================================
# NAVIGATION
# ============================================================================
prev_id, next_id = store.navigator.neighbors(video_id)
position = store.navigator.position(video_id)

n1, n2, n3 = st.columns([1, 2, 1])
with n1:
    if st.button("← Previous", disabled=prev_id is None, use_container_width=True):
        st.session_state["current_video_id"] = prev_id
        st.rerun()
with n2:
    if position:
        st.markdown(f"<div style='text-align:center'>Video {position[0]:,} of {position[1]:,}</div>",
                    unsafe_allow_html=True)
with n3:
    if st.button("Next →", disabled=next_id is None, use_container_width=True):
        st.session_state["current_video_id"] = next_id
        st.rerun()

# ============================================================================
# STATUS
# ============================================================================
s1, s2, s3 = st.columns([2, 1, 1])
with s1:
    st.markdown(f"**Video ID:** `{record.get('video_id')}`  ")
    st.markdown(f"[Open on YouTube](https://www.youtube.com/watch?v={record.get('video_id')})")
with s2:
    st.markdown(status_pill(bool(record.get("is_seo_done")), phase), unsafe_allow_html=True)
    if record.get("worked_by"):
        st.caption(f"Worked by {record['worked_by']}")
with s3:
    label = "Mark not done" if record.get("is_seo_done") else "Mark SEO done"
    if st.button(label, type="primary", use_container_width=True):
        actions.toggle_seo(video)
        st.rerun()

# ============================================================================
# SEO FIELDS
# ============================================================================
st.subheader("SEO")
with st.form("seo_fields"):
    title_v1 = st.text_input("Title option 1", value=record.get("title_v1") or "")
    title_v2 = st.text_input("Title option 2", value=record.get("title_v2") or "")
    title_v3 = st.text_input("Title option 3", value=record.get("title_v3") or "")
    description = st.text_area("Description", value=record.get("description") or "", height=180)
    tags = st.text_input("Tags (comma separated)", value=", ".join(record.get("tags") or []))
    if st.form_submit_button("Save SEO details"):
        with ErrorContext("Saving SEO details"):
            actions.save_seo_fields(
                video,
                {
                    "title_v1": title_v1,
                    "title_v2": title_v2,
                    "title_v3": title_v3,
                    "description": description,
                    "tags": tags,
                },
                user_id,
            )
        st.rerun()

# ============================================================================
# TASK AND COMMENTS
# ============================================================================
task_col, comment_col = st.columns(2)


@error_boundary(default_return=None, error_message="Could not load the task")
def load_task(vid: str):
    return services.tasks.get_task(vid)


with task_col:
    st.subheader("Task")
    task = load_task(video_id)
    if task is None:
        st.caption("No task for this video.")
        if st.button("Create task"):
            with ErrorContext("Creating task", show_success=True, success_message="Task created"):
                services.tasks.create_task(video_id, user_id)
    else:
        users = [u["user_id"] for u in services.tasks.get_assignable_users()]
        status = st.selectbox("Status", TASK_STATUSES, index=TASK_STATUSES.index(task["status"])
                              if task.get("status") in TASK_STATUSES else 0)
        options = [""] + users
        assignee = st.selectbox("Assignee", options, index=options.index(task["assigned_to"])
                                if task.get("assigned_to") in options else 0,
                                format_func=lambda u: u or "Unassigned")
        if st.button("Update task"):
            with ErrorContext("Updating task", show_success=True, success_message="Task updated"):
                if status != task.get("status"):
                    services.tasks.update_task_status(task["id"], status, user_id)
                if (assignee or None) != task.get("assigned_to"):
                    services.tasks.assign_task(task["id"], assignee, user_id)


@error_boundary(default_return=[], error_message="Could not load comments")
def load_comments(vid: str):
    return services.comments.get_comments(vid)


with comment_col:
    st.subheader("Comments")
    for comment in load_comments(video_id):
        st.markdown(f"**{comment.get('user_id') or 'unknown'}** · {str(comment.get('created_at') or '')[:16]}")
        st.write(comment.get("comment"))
    with st.form("add_comment", clear_on_submit=True):
        text = st.text_area("Add a comment", height=80)
        if st.form_submit_button("Post"):
            with ErrorContext("Posting comment"):
                services.comments.add_comment(video_id, text, user_id)

# ============================================================================
# DELETE
# ============================================================================
with st.expander("Delete video"):
    st.caption("Removes the video from every list. This cannot be undone.")
    if st.button("Delete permanently", type="primary"):
        with ErrorContext("Deleting video", show_success=True, success_message="Video deleted") as deleting:
            services.videos.delete_video(video_id, user_id)
        if not deleting.failed:
            store.coherence.invalidate_all(video)
            reset_views()
            st.session_state.pop("current_video_id", None)
            st.switch_page("pages/03_Videos.py")

prefetch_neighbors(video_id)
