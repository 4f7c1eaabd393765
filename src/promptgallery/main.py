"""
Main Streamlit application for promptgallery.

This is the entry point for the gallery web application:
``streamlit run src/promptgallery/main.py``.
"""

import streamlit as st

from promptgallery.error_handling import handle_error
from promptgallery.logging_config import configure_structured_logging, get_logger
from promptgallery.ui.components.common import APP_TITLE, render_error_message, render_header
from promptgallery.ui.handlers.app import reset_app_context
from promptgallery.ui.pages.gallery import render_gallery_page

# Configure structured logging
configure_structured_logging()
logger = get_logger(__name__)


def main() -> None:
    """Main application entry point."""
    logger.info("application_starting", page="main")

    try:
        st.set_page_config(
            page_title=APP_TITLE,
            page_icon="🎬",
            layout="wide",
            initial_sidebar_state="collapsed",
            menu_items={
                "Get Help": None,
                "Report a bug": None,
                "About": f"{APP_TITLE} - Explore the prompts behind the imagination",
            },
        )

        render_header()

        with st.container():
            render_gallery_page()

    except Exception as e:
        # Handle critical application errors
        error_info = handle_error(e, {"operation": "main_application"})
        logger.error("critical_application_error", error=str(e))
        render_error_message("Application Error", error_info.user_message, str(e))

        if st.button("🔄 Restart application", type="primary"):
            reset_app_context()
            st.rerun()


if __name__ == "__main__":
    main()
