from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st

from seo_core.sync import CollectionSnapshot, FetchProgress, NotificationCenter, NotificationKind, RecordPhase
from .theme import GRID_COLOR, SUBTLE_TEXT, TEXT_COLOR, CARD_BG_LIGHT

TOAST_ICONS = {
    NotificationKind.SUCCESS: "✅",
    NotificationKind.ERROR: "⚠️",
    NotificationKind.INFO: "ℹ️",
}

TABLE_COLUMNS = {
    "video_id": "Video ID",
    "old_title": "Title",
    "channels_channel_name": "Channel",
    "is_seo_done": "SEO done",
    "assigned_to": "Assigned to",
    "worked_by": "Worked by",
    "created_at": "Created",
}


def header(title: str, subtitle: str, icon: str = "🎬"):
    st.markdown(f"""
        <div class="main-header">
            <div style="display:flex;gap:1.2rem;align-items:center;">
                <div style="font-size:2.6rem;">{icon}</div>
                <div>
                    <h1 style="margin:0; font-size:2.1rem; color:white;">{title}</h1>
                    <p style="margin:.35rem 0 0 0;color:rgba(255,255,255,.85);font-size:1.05rem">{subtitle}</p>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)


def metric_card(label: str, value: Any):
    st.markdown(f"""
        <div class="metric-card">
            <div class="label">{label}</div>
            <div class="value">{value}</div>
        </div>
    """, unsafe_allow_html=True)


def add_grid(fig):
    """Consistent plot styling."""
    fig.update_xaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     showline=True, linecolor=GRID_COLOR,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_yaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     showline=True, linecolor=GRID_COLOR,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_layout(plot_bgcolor=CARD_BG_LIGHT, paper_bgcolor=CARD_BG_LIGHT,
                      font=dict(family="Segoe UI, sans-serif", size=12, color=TEXT_COLOR))
    return fig


def render_notifications(center: NotificationCenter):
    """Show each active notification once as a toast."""
    shown = st.session_state.setdefault("_shown_notifications", set())
    for notification in center.active():
        if notification.id in shown:
            continue
        st.toast(notification.message, icon=TOAST_ICONS[notification.kind])
        shown.add(notification.id)


def progress_reporter(label: str = "Loading videos"):
    """A st.progress bar and a FetchProgress callback that drives it."""
    bar = st.progress(0, text=label)

    def report(event: FetchProgress):
        text = f"{label}: {event.loaded:,} of {event.total:,}"
        bar.progress(min(int(event.percent), 100), text=text)

    return bar, report


def status_pill(done: bool, phase: Optional[RecordPhase] = None) -> str:
    if phase is RecordPhase.OPTIMISTIC:
        return '<span class="status-pill status-syncing">Saving…</span>'
    if done:
        return '<span class="status-pill status-done">Done</span>'
    return '<span class="status-pill status-pending">Pending</span>'


def video_rows(
    records: List[Dict[str, Any]],
    resolve: Callable[[Dict[str, Any]], Tuple[Dict[str, Any], RecordPhase]],
    on_toggle: Callable[[Dict[str, Any]], Any],
    on_open: Callable[[Dict[str, Any]], Any],
    key_prefix: str,
    selectable: bool = False,
) -> List[str]:
    """
    One row per video with a status pill, an SEO toggle and an open button.

    Returns the ids of the rows whose checkbox is ticked (when selectable).
    """
    selected = []
    for raw in records:
        record, phase = resolve(raw)
        widths = [1.4, 4, 1.6, 1.1, 1.2, 0.8]
        cols = st.columns([0.4] + widths if selectable else widths)
        if selectable:
            pick, cols = cols[0], cols[1:]
            if pick.checkbox("select", key=f"{key_prefix}_pick_{record['id']}", label_visibility="collapsed"):
                selected.append(record["id"])
        vid, title, assignee, status, toggle, open_ = cols
        vid.code(record.get("video_id") or "", language=None)
        title.write(record.get("old_title") or "")
        assignee.caption(record.get("assigned_to") or "Unassigned")
        status.markdown(status_pill(bool(record.get("is_seo_done")), phase), unsafe_allow_html=True)
        label = "Undo" if record.get("is_seo_done") else "Done"
        if toggle.button(label, key=f"{key_prefix}_toggle_{record['id']}", use_container_width=True):
            on_toggle(record)
            st.rerun()
        if open_.button("Open", key=f"{key_prefix}_open_{record['id']}", use_container_width=True):
            on_open(record)
    return selected


def video_table(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """Records -> display DataFrame with friendly column names."""
    frame = CollectionSnapshot(records=records).to_dataframe()
    if frame.empty:
        return pd.DataFrame(columns=list(TABLE_COLUMNS.values()))
    columns = [c for c in TABLE_COLUMNS if c in frame.columns]
    frame = frame[columns].rename(columns=TABLE_COLUMNS)
    if "Created" in frame.columns:
        frame["Created"] = pd.to_datetime(frame["Created"], errors="coerce", utc=True).dt.date
    return frame


def paginate(records: List[Dict[str, Any]], key: str, per_page: int = 25) -> List[Dict[str, Any]]:
    """Page selector under the list; returns the slice for the chosen page."""
    pages = max(1, -(-len(records) // per_page))
    if pages == 1:
        return records
    page = st.number_input(f"Page (of {pages})", min_value=1, max_value=pages, value=1, step=1, key=key)
    start = (int(page) - 1) * per_page
    return records[start:start + per_page]
