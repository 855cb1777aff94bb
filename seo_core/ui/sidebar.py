# =============================================================================
# seo_core/ui/sidebar.py - Shared page chrome
# =============================================================================
"""
Call `page_setup()` at the top of every page after the imports. It signs the
user in (or stops the page), applies the theme, and renders the sidebar:
brand, "working as" selector, queue status and sign-out.
"""
from __future__ import annotations
import streamlit as st

from seo_core.auth import get_user_name, get_user_role, logout_user, require_authentication
from seo_core.state.session import get_cache_store, get_services, init_state
from seo_core.sync import QueueStatus
from .components import render_notifications
from .theme import apply_css


def render_sidebar_brand():
    st.sidebar.markdown("## 🎬 SEO Manager")
    name, role = get_user_name(), get_user_role()
    if name:
        st.sidebar.caption(f"Signed in as **{name}** ({role})")


def render_working_as():
    """Team member selector; the choice is kept in persistent storage."""
    team = get_services().team_members
    members = team.list_active()
    current = team.current()
    names = [m["name"] for m in members]
    if not names:
        st.sidebar.info("No active team members")
        return

    index = names.index(current["name"]) if current and current.get("name") in names else None
    choice = st.sidebar.selectbox(
        "Working as", names, index=index, placeholder="Select team member", key="working_as"
    )
    if choice and (current is None or current.get("name") != choice):
        team.select(next(m for m in members if m["name"] == choice))
    if current is not None and st.sidebar.button("Stop working as", key="clear_working_as"):
        team.clear()
        st.session_state.pop("working_as", None)
        st.rerun()


def render_queue_status():
    queue = get_cache_store().queue
    if queue.status is QueueStatus.PROCESSING:
        st.sidebar.caption(f"⏳ Saving changes… ({queue.pending_count} queued)")


def add_logout_button():
    if st.sidebar.button("Sign out", use_container_width=True):
        logout_user()
        st.rerun()


def page_setup(title: str, icon: str = "🎬"):
    st.set_page_config(page_title=f"{title} - SEO Manager", page_icon=icon, layout="wide")
    require_authentication()
    init_state()
    apply_css()
    render_sidebar_brand()
    render_working_as()
    render_queue_status()
    add_logout_button()
    render_notifications(get_cache_store().notifications)
