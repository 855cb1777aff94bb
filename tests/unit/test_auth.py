# =============================================================================
# tests/unit/test_auth.py
# Unit Tests for credentials and password hashing
# =============================================================================

from unittest.mock import patch

from seo_core.auth import authentication
from seo_core.auth.authentication import hash_password, verify_password
from seo_core.config import Settings


class TestPasswordHashing:

    def test_hash_verifies(self):
        hashed = hash_password("s3cret!")
        assert hashed.startswith("$2b$")
        assert verify_password("s3cret!", hashed)

    def test_wrong_password(self):
        assert not verify_password("guess", hash_password("s3cret!"))

    def test_salted(self):
        assert hash_password("same") != hash_password("same")


class TestCredentials:
    """Secrets first, demo accounts only in demo mode"""

    def test_secrets_win(self):
        creds = {"usernames": {"alice": {"name": "Alice", "password": "x"}}}
        with patch.object(authentication, "_auth_secrets", return_value={"credentials": creds}):
            assert authentication.get_user_credentials() == creds

    def test_demo_accounts(self):
        with patch.object(authentication, "_auth_secrets", return_value={}), \
                patch.object(authentication, "get_settings", return_value=Settings(demo_mode=True)):
            users = authentication.get_user_credentials()["usernames"]
        assert set(users) == {"admin", "editor"}

    def test_no_accounts_outside_demo(self):
        with patch.object(authentication, "_auth_secrets", return_value={}), \
                patch.object(authentication, "get_settings", return_value=Settings()):
            assert authentication.get_user_credentials() == {"usernames": {}}
