"""Admin login and logout handlers."""

import structlog

from promptgallery.error_handling import GalleryError, handle_error
from promptgallery.ui.handlers.app import get_app_context

logger = structlog.get_logger(__name__)


def is_admin() -> bool:
    """Check whether an admin is signed in for this session."""
    return get_app_context().session.is_authenticated


def current_admin_email() -> str | None:
    user = get_app_context().session.user
    return user.email if user else None


def handle_login(email: str, password: str) -> str | None:
    """
    Sign in with email and password.

    Returns:
        str | None: A message to show the admin when sign-in failed, None on success
    """
    try:
        get_app_context().sign_in(email.strip(), password)
    except GalleryError as e:
        return handle_error(e, {"operation": "login"}).user_message

    logger.info("login_succeeded", email=email)
    return None


def handle_logout() -> str | None:
    """
    Sign out the current admin.

    Returns:
        str | None: A message to show when sign-out failed, None on success
    """
    try:
        get_app_context().sign_out()
    except GalleryError as e:
        return handle_error(e, {"operation": "logout"}).user_message
    return None
