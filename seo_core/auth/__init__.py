"""
Authentication module for SEO Manager.
Provides sign-in via streamlit-authenticator, with
roles resolved from the user_roles table.
"""

from .authentication import (
    get_authenticator,
    check_authentication,
    get_user_role,
    get_username,
    get_user_name,
    login,
    logout_user,
    require_authentication,
    hash_password,
    verify_password,
)

__all__ = [
    "get_authenticator",
    "check_authentication",
    "get_user_role",
    "get_username",
    "get_user_name",
    "login",
    "logout_user",
    "require_authentication",
    "hash_password",
    "verify_password",
]
