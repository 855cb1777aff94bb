# =============================================================================
# 06_Research.py - AI research console
# =============================================================================
from __future__ import annotations
from datetime import datetime
from typing import Tuple

import streamlit as st

from seo_core.ai import ResearchService
from seo_core.config import get_settings
from seo_core.ui.sidebar import page_setup
from seo_core.ui.components import header

page_setup("Research", "🔎")

header("Research console", "Ask Gemini about keywords, titles and what viewers search for", icon="🔎")


@st.cache_resource(show_spinner=False)
def get_research_service(api_keys: Tuple[str, ...], model_name: str) -> ResearchService:
    return ResearchService(list(api_keys), model_name=model_name)


settings = get_settings()
service = get_research_service(tuple(settings.gemini_api_keys), settings.gemini_model)

if not service.api_keys:
    st.warning("No Gemini API keys configured. Add them under [gemini] in secrets.toml or GEMINI_API_KEYS.")

with st.form("research"):
    prompt = st.text_area(
        "Prompt",
        height=140,
        placeholder="Suggest five search-friendly titles for a video about restoring a vintage bicycle",
    )
    submitted = st.form_submit_button("Ask", type="primary")

if submitted:
    with st.spinner("Thinking…"):
        outcome = service.generate(prompt)
    if outcome.ok:
        st.session_state["research_history"].insert(0, {
            "prompt": prompt.strip(),
            "result": outcome.result,
            "at": datetime.now().strftime("%H:%M"),
        })
    else:
        st.error(outcome.error)

history = st.session_state.get("research_history", [])
if history:
    latest, *older = history
    st.markdown("### Answer")
    st.markdown(latest["result"])
    if older:
        st.markdown("### Earlier")
        for item in older:
            with st.expander(f"{item['at']} · {item['prompt'][:80]}"):
                st.markdown(item["result"])
    if st.button("Clear history"):
        st.session_state["research_history"] = []
        st.rerun()
