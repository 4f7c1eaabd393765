"""Per-session application context for the Streamlit UI."""

import streamlit as st
import structlog

from promptgallery.services.context import AppContext, create_app_context

logger = structlog.get_logger(__name__)

APP_CONTEXT_KEY = "app_context"
FLASH_MESSAGES_KEY = "flash_messages"


def get_app_context() -> AppContext:
    """
    Return this browser session's opened AppContext, creating it on first use.

    Each Streamlit session keeps its own context in ``st.session_state`` so
    that sign-in state and the catalog are never shared between visitors.
    """
    app_context = st.session_state.get(APP_CONTEXT_KEY)
    if app_context is None:
        app_context = create_app_context()
        app_context.open()
        st.session_state[APP_CONTEXT_KEY] = app_context
        logger.info("session_app_context_created", cards=len(app_context.catalog))
    return app_context


def reset_app_context() -> None:
    """Close and forget the session's context so the next run rebuilds it."""
    app_context = st.session_state.pop(APP_CONTEXT_KEY, None)
    if app_context is not None:
        app_context.close()
        logger.info("session_app_context_reset")


def refresh_gallery() -> None:
    """Reload the catalog from the metadata store."""
    app_context = get_app_context()
    cards = app_context.refresh_catalog()
    logger.info("gallery_refreshed", cards=len(cards))


def push_flash(level: str, message: str) -> None:
    """
    Queue a message for the next script run.

    ``st.rerun()`` discards everything drawn in the current run, so outcomes
    that end in a rerun are kept in session state and shown afterwards.

    Args:
        level: One of "success", "info", "warning" or "error"
        message: Text shown to the user
    """
    st.session_state.setdefault(FLASH_MESSAGES_KEY, []).append((level, message))


def pop_flash_messages() -> list[tuple[str, str]]:
    """Return the queued messages in order and clear the queue."""
    return st.session_state.pop(FLASH_MESSAGES_KEY, None) or []
