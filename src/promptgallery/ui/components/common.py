"""Reusable UI components for the promptgallery application."""

import streamlit as st
import structlog

from promptgallery.ui.handlers.app import pop_flash_messages
from promptgallery.ui.handlers.auth import current_admin_email, handle_login, handle_logout, is_admin

logger = structlog.get_logger(__name__)

APP_TITLE = "Thalapathy AI Image Prompt"
APP_SUBTITLE = "Explore the prompts behind the imagination"

FLASH_LEVELS = ("success", "info", "warning", "error")


def render_empty_state(title: str, description: str = "", icon: str = "🖼️") -> None:
    """
    Render a centered empty state message.

    Args:
        title: Main message
        description: Secondary text (optional)
        icon: Emoji icon to display
    """
    st.markdown(
        f"""
    <div style='text-align: center; padding: 4rem 0;'>
        <div style='font-size: 3rem; margin-bottom: 1rem;'>{icon}</div>
        <h3 style='color: #666; margin-bottom: 0.5rem;'>{title}</h3>
        <p style='color: #888;'>{description}</p>
    </div>
    """,
        unsafe_allow_html=True,
    )


def render_error_message(error_type: str, message: str, details: str | None = None) -> None:
    """
    Render a standardized error message.

    Args:
        error_type: Short error heading (e.g. "Upload Error")
        message: Message for the admin or visitor
        details: Technical details shown in an expander (optional)
    """
    st.error(f"**{error_type}:** {message}")

    if details:
        with st.expander("Error details"):
            st.code(details)


def render_flash_messages() -> None:
    """Show messages queued by actions that finished with a rerun."""
    for level, message in pop_flash_messages():
        renderer = getattr(st, level if level in FLASH_LEVELS else "info")
        renderer(message)


def render_login_form() -> None:
    """Render the admin email/password form."""
    with st.popover("🔐 Admin Login"):
        with st.form("admin_login_form", clear_on_submit=False):
            email = st.text_input("Email", placeholder="admin@example.com")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login", type="primary", use_container_width=True)

        if submitted:
            error_message = handle_login(email, password)
            if error_message:
                st.error(error_message)
            else:
                st.rerun()


def render_header() -> None:
    """Render the title, subtitle and the login/logout control."""
    _, right = st.columns([5, 1])
    with right:
        if is_admin():
            st.caption(current_admin_email() or "admin")
            if st.button("Logout", key="logout_button", use_container_width=True):
                error_message = handle_logout()
                if error_message:
                    st.error(error_message)
                else:
                    logger.info("logout_button_clicked")
                    st.rerun()
        else:
            render_login_form()

    st.markdown(
        f"""
    <div style='text-align: center;'>
        <h1 style='font-size: 2.5rem; font-weight: 800; margin-bottom: 0.5rem;'>{APP_TITLE}</h1>
        <p style='color: #888;'>{APP_SUBTITLE}</p>
    </div>
    """,
        unsafe_allow_html=True,
    )
    st.divider()
