import streamlit as st

from seo_core.config import get_settings
from seo_core.data.stores import Stores, get_stores
from seo_core.logging import get_logger
from seo_core.services import ServiceRegistry
from seo_core.sync import CacheStore

logger = get_logger(__name__)

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    "video_search": "",
    "seo_filter": "all",
    "member_filter": "all",
    "selected_video_ids": [],
    "current_video_id": None,
    "research_history": [],
}

AUTH_KEYS = ["authenticated", "username", "name", "role", "email", "authentication_status"]

CACHE_STORE_KEY = "_cache_store"
SERVICES_KEY = "_services"
VIEWS_KEY = "_views"


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = list(v) if isinstance(v, list) else v


def get_session_stores() -> Stores:
    return get_stores(get_settings())


def get_cache_store() -> CacheStore:
    """The signed-in session's CacheStore, created on first use."""
    store = st.session_state.get(CACHE_STORE_KEY)
    if store is None:
        settings = get_settings()
        user_key = st.session_state.get("username") or "anonymous"
        store = CacheStore.from_settings(settings, get_session_stores().videos, user_key=user_key)
        store.init()
        st.session_state[CACHE_STORE_KEY] = store
        logger.info(f"Created cache store for {user_key}")
    return store


def get_services() -> ServiceRegistry:
    services = st.session_state.get(SERVICES_KEY)
    if services is None:
        services = ServiceRegistry(
            get_session_stores(), get_cache_store(), dev_mode=get_settings().dev_mode
        )
        st.session_state[SERVICES_KEY] = services
    return services


def get_view(name: str, factory, on_progress=None):
    """
    A mounted CollectionView kept across reruns under `name`.

    Only one view stays mounted: switching to another name unmounts the
    previous one, the way navigating away tears a page's list down.
    """
    views = st.session_state.setdefault(VIEWS_KEY, {})
    for other, view in list(views.items()):
        if other != name:
            view.unmount()
            del views[other]
    view = views.get(name)
    if view is None:
        view = factory()
        view.mount(on_progress=on_progress)
        views[name] = view
    return view


def reset_views():
    """Unmount every kept view so the next page load reads through the cache again."""
    for view in st.session_state.pop(VIEWS_KEY, {}).values():
        view.unmount()


def clear_session_and_cache():
    """Clear the session's cache store and every non-auth session key."""
    store = st.session_state.get(CACHE_STORE_KEY)
    for view in st.session_state.get(VIEWS_KEY, {}).values():
        view.unmount()
    if store is not None:
        store.clear()

    for key in list(st.session_state.keys()):
        if key not in AUTH_KEYS:
            del st.session_state[key]
