# =============================================================================
# 03_Videos.py - Every video across every channel
# =============================================================================
"""
All videos - the global collection, served from the 24h cache when fresh and
otherwise fetched in parallel pages with a progress bar.

Filters narrow the list; the filtered order becomes the navigation queue for
the video detail page.
"""
from __future__ import annotations
import streamlit as st

from seo_core.ui.sidebar import page_setup
from seo_core.ui.components import header, paginate, progress_reporter, video_rows, video_table
from seo_core.ui import actions
from seo_core.state.session import get_cache_store, get_services, get_view
from seo_core.sync import filter_videos, member_options
from seo_core.sync.views import SEO_FILTERS, UNASSIGNED

page_setup("All videos", "🎞️")

header("All videos", "Search, filter and work through the whole catalog", icon="🎞️")

store = get_cache_store()

# ============================================================================
# LOAD
# ============================================================================
bar, report = progress_reporter("Loading videos")
view = get_view("all_videos", store.view_all, on_progress=report)

top_left, top_right = st.columns([4, 1])
with top_right:
    if st.button("🔄 Refresh", use_container_width=True):
        view.refresh(on_progress=report)
bar.empty()

if view.error:
    st.error(f"Could not load videos: {view.error}")
    if st.button("Try again"):
        view.refresh(on_progress=report)
        st.rerun()
    st.stop()

with top_left:
    st.caption(f"{len(view.records):,} videos cached")

# ============================================================================
# FILTERS
# ============================================================================
f1, f2, f3 = st.columns([2, 1, 1])
with f1:
    search = st.text_input("Search by video ID", key="video_search", placeholder="e.g. dQw4w9WgXcQ")
with f2:
    seo_filter = st.selectbox("SEO status", SEO_FILTERS, key="seo_filter", format_func=str.capitalize)
with f3:
    members = ["all", UNASSIGNED] + member_options(view.records)
    if st.session_state.get("member_filter") not in members:
        st.session_state["member_filter"] = "all"
    member_filter = st.selectbox("Assigned to", members, key="member_filter", format_func=str.capitalize)

filtered = filter_videos(view.records, search, seo_filter, member_filter)
store.navigator.set_queue([r["id"] for r in filtered])

st.markdown(f"**{len(filtered):,}** matching videos")

if not filtered:
    st.info("No videos match these filters.")
    st.stop()

# ============================================================================
# BULK ASSIGN
# ============================================================================
with st.expander("Bulk assign", expanded=False):
    team = [m["name"] for m in get_services().team_members.list_active()]
    target = st.selectbox("Assign selected to", ["(unassign)"] + team, key="bulk_assignee")
    selection = st.session_state.get("selected_video_ids", [])
    st.caption(f"{len(selection)} selected on this page")
    if st.button("Apply", disabled=not selection):
        member = None if target == "(unassign)" else target
        actions.assign_videos(selection, member)
        st.rerun()

# ============================================================================
# LIST
# ============================================================================
tab_rows, tab_table = st.tabs(["Work list", "Table"])
with tab_rows:
    page = paginate(filtered, key="videos_page")
    st.session_state["selected_video_ids"] = video_rows(
        page,
        resolve=actions.displayed,
        on_toggle=actions.toggle_seo,
        on_open=actions.open_video,
        key_prefix="all",
        selectable=True,
    )
with tab_table:
    st.dataframe(video_table(filtered), use_container_width=True, hide_index=True)
