# =============================================================================
# 05_Tasks.py - Team workload
# =============================================================================
from __future__ import annotations
import streamlit as st
import plotly.express as px

from seo_core.ui.sidebar import page_setup
from seo_core.ui.components import add_grid, header, metric_card, progress_reporter
from seo_core.ui.theme import PRIMARY_COLOR, SUCCESS_COLOR
from seo_core.state.session import get_cache_store, get_services, get_view

page_setup("Team tasks", "✅")

header("Team tasks", "Who has what, and who finished what", icon="✅")

store = get_cache_store()
dashboard = get_services().dashboard

bar, report = progress_reporter("Loading videos")
view = get_view("all_videos", store.view_all, on_progress=report)
bar.empty()

if view.error:
    st.error(f"Could not load videos: {view.error}")
    st.stop()

result = dashboard.safe_execute("Building member stats", dashboard.get_member_stats, view.records)
if not result:
    st.error(f"Could not build team stats: {result.error}")
    st.stop()

stats = result.data
if stats.empty:
    st.info("No active team members.")
    st.stop()

c1, c2, c3 = st.columns(3)
with c1:
    metric_card("Active members", len(stats))
with c2:
    metric_card("Open assignments", f"{int(stats['assigned'].sum()):,}")
with c3:
    metric_card("Completed", f"{int(stats['completed'].sum()):,}")

long = stats.melt(id_vars=["name", "role"], value_vars=["assigned", "completed"],
                  var_name="kind", value_name="videos")
fig = px.bar(
    long,
    x="name",
    y="videos",
    color="kind",
    barmode="group",
    color_discrete_map={"assigned": PRIMARY_COLOR, "completed": SUCCESS_COLOR},
    labels={"name": "", "videos": "Videos", "kind": ""},
)
fig.update_layout(height=420, margin=dict(l=10, r=10, t=30, b=10))
st.plotly_chart(add_grid(fig), use_container_width=True)

st.dataframe(
    stats.rename(columns=str.capitalize),
    use_container_width=True,
    hide_index=True,
)
