"""
Unit tests for the session gate.
"""

import pytest

from promptgallery.error_handling import AuthenticationError
from promptgallery.services.auth import DevelopmentAuthService, UserInfo
from promptgallery.services.session import SessionGate
from tests.fakes import ADMIN_EMAIL, ADMIN_PASSWORD


class TestSessionGate:
    """Test cases for SessionGate."""

    def setup_method(self):
        """Set up test fixtures."""
        self.auth = DevelopmentAuthService(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.gate = SessionGate()

    def test_starts_anonymous(self):
        assert self.gate.is_authenticated is False
        assert self.gate.user is None

    def test_attach_restores_existing_session(self):
        self.auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)

        self.gate.attach(self.auth)

        assert self.gate.is_authenticated is True
        assert self.gate.user.email == ADMIN_EMAIL

    def test_follows_session_changes(self):
        self.gate.attach(self.auth)

        self.auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        assert self.gate.is_authenticated is True

        self.auth.sign_out()
        assert self.gate.is_authenticated is False

    def test_unsubscribe_stops_updates(self):
        subscription = self.gate.attach(self.auth)

        subscription.unsubscribe()
        self.auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert self.gate.is_authenticated is False

    def test_require_authenticated_returns_user(self):
        self.gate.handle_session_change("SIGNED_IN", UserInfo(user_id="u1", email="a@b.c"))

        assert self.gate.require_authenticated("ingest").user_id == "u1"

    def test_require_authenticated_rejects_anonymous(self):
        with pytest.raises(AuthenticationError) as exc_info:
            self.gate.require_authenticated("delete")

        assert exc_info.value.code == "authentication_required"
        assert exc_info.value.details == {"operation": "delete"}
