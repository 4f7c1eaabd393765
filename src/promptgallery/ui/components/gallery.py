"""Gallery components: card grid, prompt display and detail dialog."""

import html

import streamlit as st
import structlog

from promptgallery.models.card import Card
from promptgallery.ui.handlers.auth import is_admin
from promptgallery.ui.handlers.cards import close_card, handle_delete, open_card

logger = structlog.get_logger(__name__)

WATERMARK_TEXT = "THALAPATHY AI"
CARDS_PER_ROW = 3
PROMPT_PREVIEW_LENGTH = 120


def render_card_grid(cards: list[Card]) -> None:
    """
    Render cards in a grid, newest first.

    Args:
        cards: Cards to display, already filtered and ordered
    """
    for i in range(0, len(cards), CARDS_PER_ROW):
        cols = st.columns(CARDS_PER_ROW)
        for j, col in enumerate(cols):
            index = i + j
            with col:
                if index < len(cards):
                    render_card(cards[index])
                else:
                    st.empty()


def render_watermarked_image(image_url: str) -> None:
    """Render an image with the text watermark drawn over it."""
    st.markdown(
        f"""
    <div style='position: relative;'>
        <img src="{html.escape(image_url, quote=True)}" alt="AI Generated" loading="lazy" draggable="false"
             oncontextmenu="return false;" style='width: 100%; border-radius: 8px; display: block;'/>
        <div style='position: absolute; top: 50%; left: 50%; transform: translate(-50%, -50%) rotate(-20deg);
                    color: rgba(255, 255, 255, 0.35); font-size: 1.5rem; font-weight: 800;
                    letter-spacing: 0.2rem; pointer-events: none; user-select: none;'>{WATERMARK_TEXT}</div>
    </div>
    """,
        unsafe_allow_html=True,
    )


def render_prompt_display(card: Card, key_prefix: str = "card") -> None:
    """
    Render the prompt with a copy-ready code block and Read More / Show Less.

    Args:
        card: Card whose prompt is shown
        key_prefix: Widget key prefix so one card can be shown twice on a page
    """
    expand_key = f"{key_prefix}_expanded_{card.id}"
    expanded = st.session_state.get(expand_key, False)

    st.caption("Image Prompt")
    # st.code renders a copy-to-clipboard button
    st.code(card.prompt if expanded else card.short_prompt(PROMPT_PREVIEW_LENGTH), language=None, wrap_lines=True)

    if len(card.prompt) > PROMPT_PREVIEW_LENGTH:
        label = "Show Less ▲" if expanded else "Read More ▼"
        if st.button(label, key=f"{key_prefix}_toggle_{card.id}"):
            st.session_state[expand_key] = not expanded
            st.rerun()


def render_card(card: Card) -> None:
    """Render one card: watermarked image, category, prompt and a View button."""
    try:
        with st.container(border=True):
            render_watermarked_image(card.image_url)
            if card.category:
                st.caption(f"🎬 {card.category}")
            render_prompt_display(card)

            if st.button("🔍 View", key=f"view_{card.id}", use_container_width=True):
                open_card(card.id)
                render_card_dialog(card)
    except Exception as e:
        logger.error("render_card_error", card_id=card.id, error=str(e))
        st.error("❌ Failed to display this entry")


@st.dialog("Image Details", width="large")
def render_card_dialog(card: Card) -> None:
    """Full image and prompt; admins also get the delete button."""
    st.image(card.image_url, use_container_width=True)
    render_prompt_display(card, key_prefix="dialog")

    if is_admin():
        st.divider()
        confirm = st.checkbox("I want to delete this entry", key=f"confirm_delete_{card.id}")
        if st.button("🗑️ Delete", key=f"delete_{card.id}", type="primary", disabled=not confirm):
            outcome = handle_delete(card.id)
            if not outcome.success:
                st.error(outcome.message)
                return
            st.rerun()

    if st.button("Close", key=f"close_{card.id}"):
        close_card()
        st.rerun()
