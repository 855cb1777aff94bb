from __future__ import annotations
import streamlit as st

from seo_core.config import get_settings
from seo_core.logging import setup_logging
from seo_core.ui.theme import apply_css
from seo_core.ui.components import header
from seo_core.auth.authentication import (
    check_authentication,
    get_user_name,
    get_user_role,
    initialize_session_state,
    login,
)

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="SEO Manager - Sign in",
    page_icon="🎬",
    layout="wide",
    initial_sidebar_state="collapsed",
)

settings = get_settings()
setup_logging(level=settings.log_level)
initialize_session_state()
apply_css()

header("SEO Manager", "Retitle, describe and track your channel catalog as a team")

if settings.demo_mode and not settings.supabase_configured:
    st.info("Demo mode: data lives in memory and resets when the server restarts.")

# ============================================================================
# SIGN IN
# ============================================================================
if not check_authentication():
    col, _ = st.columns([1, 1])
    with col:
        if login():
            st.rerun()
    st.stop()

st.success(f"Welcome back, {get_user_name()} ({get_user_role()})")

c1, c2, c3 = st.columns(3)
with c1:
    st.page_link("pages/01_Dashboard.py", label="Dashboard", icon="📊")
    st.page_link("pages/02_Channels.py", label="Channels", icon="📺")
with c2:
    st.page_link("pages/03_Videos.py", label="All videos", icon="🎞️")
    st.page_link("pages/05_Tasks.py", label="Team tasks", icon="✅")
with c3:
    st.page_link("pages/06_Research.py", label="Research console", icon="🔎")
