import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#e11d48"
SECONDARY_COLOR  = "#7c3aed"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1f2937"
SUBTLE_TEXT      = "#6b7280"
GRID_COLOR       = "#e5e7eb"
BACKGROUND_COLOR = "#f8f9fa"
CARD_BG_LIGHT    = "#ffffff"

def apply_css():
    """Shared page styling: header banner, cards, buttons, status pills."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Segoe UI','Inter','SF Pro Display',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 1.6rem 2rem; border-radius: 16px; margin-bottom: 1.5rem;
            box-shadow: 0 8px 32px rgba(225,29,72,.25);
        }}
        .metric-card {{
            background: {CARD_BG_LIGHT}; padding: 20px; border-radius: 10px;
            box-shadow: 0 2px 8px rgba(0,0,0,0.08); margin: 10px 0; border: 1px solid {GRID_COLOR};
        }}
        .metric-card .label {{ color: {SUBTLE_TEXT}; font-size: .85rem; text-transform: uppercase; }}
        .metric-card .value {{ color: {TEXT_COLOR}; font-size: 2rem; font-weight: 700; }}
        .status-pill {{
            display: inline-block; padding: 2px 10px; border-radius: 999px;
            font-size: .75rem; font-weight: 600;
        }}
        .status-done {{ background: {SUCCESS_COLOR}22; color: {SUCCESS_COLOR}; }}
        .status-pending {{ background: {WARNING_COLOR}22; color: {WARNING_COLOR}; }}
        .status-syncing {{ background: {SECONDARY_COLOR}22; color: {SECONDARY_COLOR}; }}
        .stButton button {{
            border-radius: 10px; font-weight: 600; transition: all .2s ease;
        }}
        .stButton button:hover {{ transform: translateY(-1px); }}
        h1,h2,h3,h4,h5,h6 {{ color: {TEXT_COLOR}; font-weight: 600; }}
        h3 {{ color: {PRIMARY_COLOR}; }}
        [data-testid="stSidebar"] {{ background-color: {CARD_BG_LIGHT}; border-right: 1px solid {GRID_COLOR}; }}
        .plotly-chart {{ border-radius: 10px; overflow: hidden; border: 1px solid {GRID_COLOR}; }}
        </style>
    """, unsafe_allow_html=True)
