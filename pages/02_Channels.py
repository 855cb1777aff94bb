# =============================================================================
# 02_Channels.py - Channel list, per-channel videos, add and import
# =============================================================================
from __future__ import annotations
import streamlit as st

from seo_core.auth import get_user_role, get_username
from seo_core.errors import ErrorContext, safe_execute
from seo_core.ui.sidebar import page_setup
from seo_core.ui.components import header, metric_card, paginate, progress_reporter, video_rows
from seo_core.ui import actions
from seo_core.state.session import get_cache_store, get_services, get_view

page_setup("Channels", "📺")

header("Channels", "Per-channel progress, new videos and bulk imports", icon="📺")

services = get_services()
store = get_cache_store()
user_id = get_username()

channels = safe_execute(services.channels.list_channels, default=[], error_message="Failed to load channels")
if not channels:
    st.info("No channels yet.")
    st.stop()

by_id = {c["id"]: c for c in channels}
channel_id = st.selectbox(
    "Channel",
    list(by_id),
    format_func=lambda cid: by_id[cid].get("channel_name") or cid,
    key="current_channel_id",
)
channel = by_id[channel_id]

counts = safe_execute(services.channels.video_counts, channel_id, default={"total": 0, "done": 0, "pending": 0})
c1, c2, c3 = st.columns(3)
with c1:
    metric_card("Videos", f"{counts['total']:,}")
with c2:
    metric_card("SEO done", f"{counts['done']:,}")
with c3:
    metric_card("Pending", f"{counts['pending']:,}")

if get_user_role() == "admin" or services.channels.dev_mode:
    with st.expander("Rename channel"):
        new_name = st.text_input("Channel name", value=channel.get("channel_name") or "", key="rename_channel")
        if st.button("Save name"):
            with ErrorContext("Renaming channel", show_success=True, success_message="Channel renamed"):
                services.channels.update_channel_name(channel_id, new_name, user_id)


def refresh_channel(record=None):
    """Drop every namespace a new video of this channel belongs to, then reload."""
    store.coherence.invalidate_all(record or {"channel_id": channel_id})
    view.refresh(on_progress=report)


# ============================================================================
# VIDEOS OF THIS CHANNEL
# ============================================================================
tab_videos, tab_add, tab_import = st.tabs(["Videos", "Add video", "Import"])

with tab_videos:
    bar, report = progress_reporter("Loading channel videos")
    view = get_view(f"channel:{channel_id}", lambda: store.view_channel(channel_id), on_progress=report)
    if st.button("🔄 Refresh", key="refresh_channel"):
        view.refresh(on_progress=report)
    bar.empty()

    if view.error:
        st.error(f"Could not load videos: {view.error}")
    elif not view.records:
        st.info("This channel has no videos yet.")
    else:
        store.navigator.set_queue([r["id"] for r in view.records])
        video_rows(
            paginate(view.records, key=f"channel_page_{channel_id}"),
            resolve=actions.displayed,
            on_toggle=actions.toggle_seo,
            on_open=actions.open_video,
            key_prefix=f"ch_{channel_id}",
        )

with tab_add:
    with st.form("add_video", clear_on_submit=True):
        new_video_id = st.text_input("Video ID")
        old_title = st.text_input("Current title")
        published_at = st.date_input("Published", value=None)
        submitted = st.form_submit_button("Add video", type="primary")
    if submitted:
        created = safe_execute(
            services.videos.create_video,
            channel_id,
            new_video_id,
            old_title,
            user_id,
            published_at=published_at.isoformat() if published_at else None,
            error_message=None,
        )
        if created is not None:
            st.success(f"Added {created['video_id']}")
            refresh_channel(created)

with tab_import:
    st.caption("CSV or JSON with a video id and title per row. Duplicates are skipped.")
    upload = st.file_uploader("Upload file", type=["csv", "json"], key=f"import_{channel_id}")
    if upload is not None and st.button("Import", type="primary"):
        fmt = "json" if upload.name.lower().endswith(".json") else "csv"
        with st.spinner("Importing…"):
            result = safe_execute(
                services.imports.import_videos, channel_id, upload.getvalue(), fmt, user_id,
                error_message="Import failed",
            )
        if result is None:
            st.stop()

        if result.created:
            st.success(result.message)
            refresh_channel()
        else:
            st.warning(result.message)
        if result.errors:
            st.dataframe(
                [{"row": e.row, "reason": e.reason} for e in result.errors],
                use_container_width=True,
                hide_index=True,
            )
