"""
Application settings for SEO Manager.

Values are read from Streamlit secrets first and from environment variables
(optionally loaded from a ``.env`` file) second.

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"
    service_role_key = "your-service-role-key"

    [gemini]
    api_keys = ["key-1", "key-2"]
    model = "gemini-2.5-flash"

    [app]
    page_size = 1000
    fetch_concurrency = 3
    all_videos_ttl_ms = 86400000
    channel_videos_ttl_ms = 300000
    cache_dir = ".seo_cache"
    dev_mode = false
    demo_mode = false
    log_level = "INFO"
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from seo_core.errors import ConfigurationError

DAY_MS = 24 * 60 * 60 * 1000
FIVE_MINUTES_MS = 5 * 60 * 1000


@dataclass
class Settings:
    """Resolved configuration for one running app"""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    gemini_api_keys: List[str] = field(default_factory=list)
    gemini_model: str = "gemini-2.5-flash"

    page_size: int = 1000
    fetch_concurrency: int = 3
    all_videos_ttl_ms: int = DAY_MS
    channel_videos_ttl_ms: int = FIVE_MINUTES_MS
    notification_ttl_s: float = 3.0
    cache_dir: Path = Path(".seo_cache")

    dev_mode: bool = False
    demo_mode: bool = False
    log_level: str = "INFO"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _secrets_section(name: str) -> Dict[str, Any]:
    """Read one section of st.secrets, returning {} when secrets are unavailable."""
    try:
        import streamlit as st
        if name in st.secrets:
            return dict(st.secrets[name])
    except Exception:
        # No secrets.toml, or running outside `streamlit run`
        return {}
    return {}


def _as_int(value: Any, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Setting '{key}' must be an integer, got {value!r}",
            config_key=key,
            expected_type="int",
        )
    if number <= 0:
        raise ConfigurationError(
            f"Setting '{key}' must be positive, got {number}",
            config_key=key,
            expected_type="positive int",
        )
    return number


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _as_key_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(k).strip() for k in value if str(k).strip()]


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    secrets: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Settings:
    """
    Build Settings from secrets and environment.

    Args:
        env: Environment mapping (defaults to os.environ after loading .env)
        secrets: Secrets mapping by section (defaults to st.secrets)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If a numeric setting is malformed
    """
    if env is None:
        load_dotenv()
        env = os.environ

    if secrets is None:
        secrets = {name: _secrets_section(name) for name in ("supabase", "gemini", "app")}

    supabase = dict(secrets.get("supabase", {}))
    gemini = dict(secrets.get("gemini", {}))
    app = dict(secrets.get("app", {}))

    def pick(section: Dict[str, Any], key: str, env_key: str, default: Any = None) -> Any:
        if key in section and section[key] not in (None, ""):
            return section[key]
        return env.get(env_key, default)

    settings = Settings(
        supabase_url=pick(supabase, "url", "SUPABASE_URL"),
        supabase_key=pick(supabase, "key", "SUPABASE_KEY"),
        supabase_service_role_key=pick(supabase, "service_role_key", "SUPABASE_SERVICE_ROLE_KEY"),
        gemini_api_keys=_as_key_list(pick(gemini, "api_keys", "GEMINI_API_KEYS")),
        gemini_model=pick(gemini, "model", "GEMINI_MODEL", "gemini-2.5-flash"),
        page_size=_as_int(pick(app, "page_size", "SEO_PAGE_SIZE", 1000), "page_size"),
        fetch_concurrency=_as_int(
            pick(app, "fetch_concurrency", "SEO_FETCH_CONCURRENCY", 3), "fetch_concurrency"
        ),
        all_videos_ttl_ms=_as_int(
            pick(app, "all_videos_ttl_ms", "SEO_ALL_VIDEOS_TTL_MS", DAY_MS), "all_videos_ttl_ms"
        ),
        channel_videos_ttl_ms=_as_int(
            pick(app, "channel_videos_ttl_ms", "SEO_CHANNEL_VIDEOS_TTL_MS", FIVE_MINUTES_MS),
            "channel_videos_ttl_ms",
        ),
        cache_dir=Path(pick(app, "cache_dir", "SEO_CACHE_DIR", ".seo_cache")),
        dev_mode=_as_bool(pick(app, "dev_mode", "SEO_DEV_MODE", False)),
        demo_mode=_as_bool(pick(app, "demo_mode", "SEO_DEMO_MODE", False)),
        log_level=str(pick(app, "log_level", "SEO_LOG_LEVEL", "INFO")).upper(),
    )
    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
