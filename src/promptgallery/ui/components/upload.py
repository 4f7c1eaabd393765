"""Admin upload form."""

import streamlit as st
import structlog

from promptgallery.models.card import DEFAULT_CATEGORIES
from promptgallery.services.image_processor import HEIF_AVAILABLE
from promptgallery.ui.handlers.cards import handle_upload

logger = structlog.get_logger(__name__)

ACCEPTED_TYPES = ["jpg", "jpeg", "png", "webp", "gif", "bmp"]
HEIF_TYPES = ["heic", "heif"]


def accepted_file_types() -> list[str]:
    """File extensions offered by the uploader."""
    return ACCEPTED_TYPES + HEIF_TYPES if HEIF_AVAILABLE else list(ACCEPTED_TYPES)


def render_upload_form() -> None:
    """Render the "Add New" form; on success the new card is shown first."""
    with st.expander("➕ Add New", expanded=False):
        with st.form("upload_form", clear_on_submit=True):
            uploaded_file = st.file_uploader("Image", type=accepted_file_types())
            category = st.selectbox("Movie Category", list(DEFAULT_CATEGORIES), index=0)
            prompt = st.text_area("Prompt", placeholder="Describe the prompt used to generate this image")
            submitted = st.form_submit_button("Upload", type="primary", use_container_width=True)

        if not submitted:
            return

        file_data = uploaded_file.getvalue() if uploaded_file is not None else None
        with st.spinner("Uploading..."):
            outcome = handle_upload(file_data, prompt, category)

        if outcome.success:
            logger.info("upload_form_submitted", card_id=outcome.card.id if outcome.card else None)
            st.rerun()
        else:
            st.error(outcome.message)
