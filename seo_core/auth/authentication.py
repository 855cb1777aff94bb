"""
Authentication module for SEO Manager.

Sign-in uses streamlit-authenticator with bcrypt-hashed credentials kept in
`.streamlit/secrets.toml`:

    [auth]
    cookie_name = "seo_manager_auth"
    cookie_key = "change-me"

    [auth.credentials.usernames.alice]
    name = "Alice"
    email = "alice@example.com"
    password = "$2b$12$..."     # hash_password("...")

The user's role is not part of the credentials: it is read from the
`user_roles` table (user_id = username), defaulting to viewer.
"""

from typing import Any, Dict, Optional

import streamlit as st
import streamlit_authenticator as stauth

from seo_core.config import get_settings
from seo_core.logging import get_logger
from seo_core.services.base_service import resolve_role

logger = get_logger(__name__)


# ==================== USER CREDENTIALS ====================

# Demo-mode accounts; passwords admin123 / user123
DEMO_CREDENTIALS = {
    "usernames": {
        "admin": {
            "name": "Demo Admin",
            "password": "$2b$12$6eg9XhAKqngO..BwN0De0OPdl1UdKYGEKcIiVvoP84pfRpg7xGQx2",  # admin123
            "email": "admin@example.com",
        },
        "editor": {
            "name": "Demo Editor",
            "password": "$2b$12$qTWdPgBBzeIZVWS3PAPTEO.ZNZdwU.Tzq/bTG.NERFJ/FuiMBoXh.",  # user123
            "email": "editor@example.com",
        },
    }
}


def _to_plain(value: Any) -> Any:
    # st.secrets sections are read-only mappings; the authenticator writes to them
    if hasattr(value, "items"):
        return {k: _to_plain(v) for k, v in value.items()}
    return value


def _auth_secrets() -> Dict[str, Any]:
    try:
        return _to_plain(st.secrets.get("auth", {}))
    except FileNotFoundError:
        return {}


def get_user_credentials() -> Dict[str, Any]:
    """
    Credentials for streamlit-authenticator.

    From secrets when present, otherwise the demo accounts in demo mode.
    """
    credentials = _auth_secrets().get("credentials")
    if credentials:
        return credentials
    if get_settings().demo_mode:
        logger.warning("No [auth] credentials configured, using demo accounts")
        return _to_plain(DEMO_CREDENTIALS)
    return {"usernames": {}}


# ==================== AUTHENTICATOR SETUP ====================

def get_authenticator():
    """
    Creates and returns a configured streamlit-authenticator instance.

    Returns:
        stauth.Authenticate: Configured authenticator instance
    """
    auth = _auth_secrets()
    return stauth.Authenticate(
        get_user_credentials(),
        auth.get("cookie_name", "seo_manager_auth"),
        auth.get("cookie_key", "seo_manager_cookie_key"),
        float(auth.get("cookie_expiry_days", 1)),
    )


# ==================== HELPER FUNCTIONS ====================

def check_authentication() -> bool:
    return st.session_state.get("authenticated", False)


def get_user_role() -> Optional[str]:
    """Role of the signed-in user ('admin', 'editor', 'viewer') or None."""
    if not check_authentication():
        return None
    return st.session_state.get("role")


def get_username() -> Optional[str]:
    if not check_authentication():
        return None
    return st.session_state.get("username")


def get_user_name() -> Optional[str]:
    if not check_authentication():
        return None
    return st.session_state.get("name")


def _sign_in(username: str, name: Optional[str]) -> None:
    from seo_core.state.session import get_session_stores

    st.session_state.authenticated = True
    st.session_state.username = username
    st.session_state.name = name or username
    st.session_state.role = resolve_role(get_session_stores(), username)
    logger.info(f"Signed in {username} as {st.session_state.role}")


def login() -> bool:
    """
    Render the login form. Returns True once the user is signed in.
    """
    if check_authentication():
        return True

    authenticator = get_authenticator()
    authenticator.login(location="main")

    status = st.session_state.get("authentication_status")
    if status:
        _sign_in(st.session_state.get("username"), st.session_state.get("name"))
        return True
    if status is False:
        st.error("Username/password is incorrect")
    return False


def logout_user():
    """
    Logout the current user, dropping their cache store and session state.
    """
    from seo_core.state.session import clear_session_and_cache

    username = st.session_state.get("username")
    clear_session_and_cache()
    for key in ["authenticated", "username", "name", "role", "email", "authentication_status"]:
        if key in st.session_state:
            del st.session_state[key]
    logger.info(f"Signed out {username}")


def initialize_session_state():
    """
    Initialize session state variables for authentication.
    Call this at the start of your main app.
    """
    for key, default in (("authenticated", False), ("role", None), ("username", None), ("name", None)):
        if key not in st.session_state:
            st.session_state[key] = default


# ==================== PAGE PROTECTION ====================

def require_authentication():
    """
    Stop the page unless a user is signed in.

    In dev mode the session is signed in as the demo admin.
    """
    initialize_session_state()
    if check_authentication():
        return

    if get_settings().dev_mode:
        _sign_in("admin", "Dev Admin")
        return

    st.warning("Please sign in on the Welcome page to continue.")
    st.page_link("Welcome.py", label="Go to sign in", icon="🔐")
    st.stop()


# ==================== PASSWORD HASHING UTILITY ====================

def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.
    Use this utility function to generate password hashes for new users.

    Example:
        >>> hash_password("mypassword123")
        '$2b$12$...'
    """
    import bcrypt
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    import bcrypt
    return bcrypt.checkpw(password.encode(), hashed.encode())


if __name__ == "__main__":
    import sys

    for plain in sys.argv[1:]:
        print(f"{plain}: {hash_password(plain)}")
