# =============================================================================
# 01_Dashboard.py - Catalog overview
# =============================================================================
"""
Dashboard - video and channel counts plus the most recently edited videos.

Counts are fetched directly (never the full collection); the recent list is
a single small page.
"""
from __future__ import annotations
import streamlit as st
import plotly.graph_objects as go

from seo_core.ui.sidebar import page_setup
from seo_core.ui.components import add_grid, header, metric_card, video_table
from seo_core.ui.theme import SUCCESS_COLOR, WARNING_COLOR
from seo_core.state.session import get_services

page_setup("Dashboard", "📊")

header("Dashboard", "Where the catalog stands today", icon="📊")

dashboard = get_services().dashboard

result = dashboard.safe_execute("Loading dashboard stats", dashboard.get_stats)
if not result:
    st.error(f"Could not load stats: {result.error}")
    st.stop()

stats = result.data
c1, c2, c3, c4 = st.columns(4)
with c1:
    metric_card("Total videos", f"{stats.total_videos:,}")
with c2:
    metric_card("SEO done", f"{stats.seo_done:,}")
with c3:
    metric_card("SEO pending", f"{stats.seo_pending:,}")
with c4:
    metric_card("Channels", f"{stats.total_channels:,}")

st.markdown("")

left, right = st.columns([1, 2])
with left:
    st.subheader("Progress")
    if stats.total_videos:
        fig = go.Figure(go.Pie(
            labels=["Done", "Pending"],
            values=[stats.seo_done, stats.seo_pending],
            hole=0.6,
            marker=dict(colors=[SUCCESS_COLOR, WARNING_COLOR]),
            sort=False,
        ))
        fig.update_layout(height=280, margin=dict(l=10, r=10, t=10, b=10), showlegend=True)
        st.plotly_chart(add_grid(fig), use_container_width=True)
    else:
        st.info("No videos yet. Add some from the Channels page.")

with right:
    st.subheader("Recently updated")
    recent = dashboard.safe_execute("Loading recent videos", dashboard.get_recent_videos, 5)
    if recent:
        st.dataframe(video_table(recent.data), use_container_width=True, hide_index=True)
    else:
        st.warning(f"Could not load recent videos: {recent.error}")
