"""
Configuration for SEO Manager.
Reads Streamlit secrets with environment-variable fallback.
"""
from .settings import (
    Settings,
    load_settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "load_settings",
    "get_settings",
    "reset_settings",
]
