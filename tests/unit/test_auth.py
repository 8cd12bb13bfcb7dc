"""Unit tests for bearer-token user resolution."""

import pytest

from src.api.auth import UserContext, resolve_user
from src.core.config import Settings
from src.core.exceptions import AuthenticationError


@pytest.fixture
def settings():
    return Settings(auth_tokens={"tok-alice": "alice", "tok-bob": "bob"})


class TestResolveUser:
    def test_no_tokens_configured_uses_default_user(self):
        assert resolve_user(None, Settings(auth_tokens={})) == UserContext(user_id="local-user")

    def test_valid_token(self, settings):
        assert resolve_user("Bearer tok-bob", settings).user_id == "bob"

    @pytest.mark.parametrize("header", [None, "", "tok-alice", "Basic tok-alice", "Bearer nope"])
    def test_rejected(self, settings, header):
        with pytest.raises(AuthenticationError) as exc_info:
            resolve_user(header, settings)
        assert exc_info.value.status_code == 401
