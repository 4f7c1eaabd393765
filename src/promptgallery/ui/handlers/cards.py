"""Upload and delete handlers for gallery cards."""

from dataclasses import dataclass

import structlog

from promptgallery.error_handling import GalleryError, handle_error
from promptgallery.models.card import Card
from promptgallery.services.deletion import DeletionResult
from promptgallery.ui.handlers.app import get_app_context, push_flash

logger = structlog.get_logger(__name__)


@dataclass
class HandlerOutcome:
    """Result of a UI action: what happened and what to tell the admin."""

    success: bool
    message: str
    card: Card | None = None
    warning: str | None = None


def handle_upload(file_data: bytes | None, prompt: str, category: str | None) -> HandlerOutcome:
    """
    Run the ingestion pipeline for a file chosen in the upload form.

    The success message is also queued with ``push_flash`` because the form
    reruns the script after a successful upload.

    Args:
        file_data: Bytes of the selected file (None when nothing was chosen)
        prompt: Prompt text
        category: Selected movie category

    Returns:
        HandlerOutcome: The new card on success, the user message otherwise
    """
    try:
        card = get_app_context().ingest(file_data or b"", prompt, category)
    except GalleryError as e:
        error_info = handle_error(e, {"operation": "upload"})
        return HandlerOutcome(success=False, message=error_info.user_message)

    logger.info("upload_handler_completed", card_id=card.id)
    outcome = HandlerOutcome(success=True, message="Image added to the gallery.", card=card)
    push_flash("success", outcome.message)
    return outcome


def handle_delete(card_id: str) -> HandlerOutcome:
    """
    Run the deletion pipeline for ``card_id``.

    On success the storage warning, if any, and the confirmation are queued
    for the next run, since the dialog closes through a rerun.

    Returns:
        HandlerOutcome: Success with an optional storage warning, or the user message
    """
    try:
        result: DeletionResult = get_app_context().delete(card_id)
    except GalleryError as e:
        error_info = handle_error(e, {"operation": "delete", "card_id": card_id})
        return HandlerOutcome(success=False, message=error_info.user_message)

    warning = result.warning.user_message if result.warning else None
    outcome = HandlerOutcome(success=True, message="Entry deleted.", card=result.card, warning=warning)
    if warning:
        push_flash("warning", warning)
    push_flash("success", outcome.message)
    return outcome


def open_card(card_id: str) -> Card | None:
    """Open the detail view for ``card_id``."""
    return get_app_context().catalog.select(card_id)


def close_card() -> None:
    get_app_context().catalog.clear_selection()
