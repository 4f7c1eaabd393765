"""Session gate mirroring the auth backend's signed-in state."""

from ..error_handling import AuthenticationError
from ..logging_config import get_logger
from .auth import AuthService, AuthSubscription, UserInfo

logger = get_logger(__name__)


class SessionGate:
    """
    Tracks whether an admin is signed in.

    The gate holds no credentials of its own: it restores the backend's
    current session once and then follows change notifications.
    """

    def __init__(self) -> None:
        self._user: UserInfo | None = None

    @property
    def user(self) -> UserInfo | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def attach(self, auth_service: AuthService) -> AuthSubscription:
        """
        Restore the current session and follow future changes.

        Returns:
            AuthSubscription: Handle to unsubscribe at shutdown
        """
        self._user = auth_service.get_current_user()
        logger.info("session_restored", authenticated=self.is_authenticated)
        return auth_service.on_session_change(self.handle_session_change)

    def handle_session_change(self, event: str, user: UserInfo | None) -> None:
        """Apply a notification from the auth backend."""
        self._user = user
        logger.info("session_changed", auth_event=event, authenticated=self.is_authenticated)

    def require_authenticated(self, operation: str) -> UserInfo:
        """
        Return the signed-in user or refuse ``operation``.

        Raises:
            AuthenticationError: If no admin is signed in
        """
        if self._user is None:
            raise AuthenticationError(
                f"Anonymous caller attempted '{operation}'",
                code="authentication_required",
                details={"operation": operation},
            )
        return self._user
