"""Gallery page for the promptgallery application."""

import streamlit as st
import structlog

from promptgallery.error_handling import handle_error
from promptgallery.services.catalog import ALL_CATEGORIES_LABEL, derive_categories, filter_by_category
from promptgallery.ui.components.common import render_empty_state, render_error_message, render_flash_messages
from promptgallery.ui.components.gallery import render_card_grid
from promptgallery.ui.components.upload import render_upload_form
from promptgallery.ui.handlers.app import get_app_context
from promptgallery.ui.handlers.auth import is_admin

logger = structlog.get_logger(__name__)

EMPTY_GALLERY_MESSAGE = "No images yet. Be the first to upload one!"


def render_gallery_page() -> None:
    """Render the admin upload form, the category filter and the card grid."""
    render_flash_messages()

    try:
        with st.spinner("Loading gallery..."):
            app_context = get_app_context()

        if is_admin():
            render_upload_form()

        cards = list(app_context.catalog)
        if not cards:
            render_empty_state(EMPTY_GALLERY_MESSAGE)
            return

        options = [ALL_CATEGORIES_LABEL, *derive_categories(cards)]
        active = st.selectbox("Category", options, index=0, key="category_filter")
        visible = filter_by_category(cards, active)

        st.caption(f"{len(visible)} of {len(cards)} images")
        if visible:
            render_card_grid(visible)
        else:
            render_empty_state(f"No images in {active} yet.")

    except Exception as e:
        error_info = handle_error(e, {"operation": "render_gallery"})
        logger.error("gallery_page_error", error=str(e))
        render_error_message("Gallery Error", error_info.user_message, str(e))
