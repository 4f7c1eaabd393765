"""Authentication services for the promptgallery application."""

import hmac
import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from supabase import Client

from ..error_handling import AuthenticationError
from ..logging_config import get_logger, log_security_event, log_user_action

logger = get_logger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

SessionCallback = Callable[[str, "UserInfo | None"], None]


@dataclass(frozen=True)
class UserInfo:
    """Represents the signed-in admin."""

    user_id: str
    email: str | None = None


@dataclass
class AuthSubscription:
    """Handle for a session-change subscription; call ``unsubscribe`` when done."""

    _unsubscribe: Callable[[], Any]
    active: bool = field(default=True)

    def unsubscribe(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._unsubscribe()


class AuthService(ABC):
    """Credential exchange and session notifications from the auth backend."""

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> UserInfo:
        """
        Sign in and return the authenticated user.

        Raises:
            AuthenticationError: If the credentials are rejected
        """

    @abstractmethod
    def sign_out(self) -> None:
        """End the current session."""

    @abstractmethod
    def get_current_user(self) -> UserInfo | None:
        """Return the user of the current session, or None when anonymous."""

    @abstractmethod
    def on_session_change(self, callback: SessionCallback) -> AuthSubscription:
        """Register ``callback(event, user)`` for sign-in/sign-out notifications."""


def _user_from_session(session: Any) -> UserInfo | None:
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return UserInfo(user_id=str(user.id), email=getattr(user, "email", None))


class SupabaseAuthService(AuthService):
    """Supabase Auth (GoTrue) password sign-in."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def sign_in_with_password(self, email: str, password: str) -> UserInfo:
        if not email or not password:
            raise AuthenticationError(
                "Email and password are required",
                code="missing_credentials",
                user_message="Please enter both email and password.",
            )

        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise AuthenticationError(
                f"Sign-in failed: {e}",
                code="sign_in_failed",
                user_message="Failed to login. Please check your credentials.",
                details={"email": email},
                original_exception=e,
            ) from e

        user = getattr(response, "user", None)
        if user is None:
            raise AuthenticationError(
                "Sign-in returned no user",
                code="sign_in_failed",
                user_message="Failed to login. Please check your credentials.",
                details={"email": email},
            )

        user_info = UserInfo(user_id=str(user.id), email=getattr(user, "email", None))
        log_user_action(user_info.user_id, "sign_in", email=user_info.email)
        return user_info

    def sign_out(self) -> None:
        user = self.get_current_user()
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise AuthenticationError(
                f"Sign-out failed: {e}",
                code="sign_out_failed",
                user_message="Could not sign out. Please try again.",
                original_exception=e,
            ) from e
        log_user_action(user.user_id if user else None, "sign_out")

    def get_current_user(self) -> UserInfo | None:
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            # An expired refresh token means the admin has to sign in again
            logger.warning("session_lookup_failed", error=str(e))
            return None
        return _user_from_session(session)

    def on_session_change(self, callback: SessionCallback) -> AuthSubscription:
        def relay(event: Any, session: Any) -> None:
            callback(str(getattr(event, "value", event)), _user_from_session(session))

        subscription = self.client.auth.on_auth_state_change(relay)
        return AuthSubscription(subscription.unsubscribe)


class DevelopmentAuthService(AuthService):
    """
    In-process authentication for local development.

    Accepts exactly one admin whose credentials come from configuration. Not
    available outside development environments.
    """

    def __init__(self, admin_email: str, admin_password: str, user_id: str = "dev-admin") -> None:
        if not admin_email or not admin_password:
            raise AuthenticationError(
                "Development admin credentials are not configured",
                code="dev_credentials_missing",
                user_message="Set DEV_ADMIN_EMAIL and DEV_ADMIN_PASSWORD to use development sign-in.",
            )
        self._admin = UserInfo(user_id=user_id, email=admin_email)
        self._password = admin_password
        self._current_user: UserInfo | None = None
        self._listeners: dict[int, SessionCallback] = {}
        self._listener_ids = itertools.count()
        logger.info("development_auth_mode_enabled", admin_email=admin_email)

    def _notify(self, event: str) -> None:
        for callback in list(self._listeners.values()):
            callback(event, self._current_user)

    def sign_in_with_password(self, email: str, password: str) -> UserInfo:
        email_ok = hmac.compare_digest((email or "").lower(), (self._admin.email or "").lower())
        password_ok = hmac.compare_digest(password or "", self._password)
        if not (email_ok and password_ok):
            log_security_event("development_sign_in_rejected", email=email)
            raise AuthenticationError(
                "Invalid login credentials",
                code="sign_in_failed",
                user_message="Failed to login. Please check your credentials.",
                details={"email": email},
            )

        self._current_user = self._admin
        log_user_action(self._admin.user_id, "sign_in", email=email, mode="development")
        self._notify(SIGNED_IN)
        return self._admin

    def sign_out(self) -> None:
        previous = self._current_user
        self._current_user = None
        log_user_action(previous.user_id if previous else None, "sign_out", mode="development")
        self._notify(SIGNED_OUT)

    def get_current_user(self) -> UserInfo | None:
        return self._current_user

    def on_session_change(self, callback: SessionCallback) -> AuthSubscription:
        listener_id = next(self._listener_ids)
        self._listeners[listener_id] = callback
        return AuthSubscription(lambda: self._listeners.pop(listener_id, None))
