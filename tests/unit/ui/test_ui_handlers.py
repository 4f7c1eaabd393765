"""
Unit tests for the Streamlit UI handlers.
"""

from unittest.mock import MagicMock, patch

import pytest

from promptgallery.error_handling import StorageError
from promptgallery.services.auth import DevelopmentAuthService
from promptgallery.services.context import AppContext
from promptgallery.ui.components.common import render_flash_messages
from promptgallery.ui.handlers.app import (
    APP_CONTEXT_KEY,
    get_app_context,
    pop_flash_messages,
    push_flash,
    refresh_gallery,
    reset_app_context,
)
from promptgallery.ui.handlers.auth import current_admin_email, handle_login, handle_logout, is_admin
from promptgallery.ui.handlers.cards import close_card, handle_delete, handle_upload, open_card
from tests.fakes import ADMIN_EMAIL, ADMIN_PASSWORD, InMemoryBlobRepository, InMemoryMetadataRepository, make_card


class UIHandlerTestCase:
    """Patches the session state and context factory shared by the handlers."""

    @pytest.fixture(autouse=True)
    def streamlit_session(self):
        self.metadata = InMemoryMetadataRepository([make_card("a", minutes_ago=1), make_card("b", minutes_ago=2)])
        self.blobs = InMemoryBlobRepository()
        self.blobs.objects["a.jpg"] = (b"jpeg", "image/jpeg")
        self.context = AppContext(self.metadata, self.blobs, DevelopmentAuthService(ADMIN_EMAIL, ADMIN_PASSWORD))

        with (
            patch("promptgallery.ui.handlers.app.st") as mock_st,
            patch("promptgallery.ui.handlers.app.create_app_context", return_value=self.context) as mock_create,
        ):
            mock_st.session_state = {}
            self.session_state = mock_st.session_state
            self.mock_create = mock_create
            yield
        self.context.close()


class TestAppContextHandlers(UIHandlerTestCase):
    """Test cases for per-session context handling."""

    def test_context_is_created_once_per_session(self):
        first = get_app_context()
        second = get_app_context()

        assert first is second is self.context
        self.mock_create.assert_called_once_with()
        assert first.is_open is True
        assert self.session_state[APP_CONTEXT_KEY] is self.context

    def test_reset_closes_context(self):
        get_app_context()

        reset_app_context()

        assert APP_CONTEXT_KEY not in self.session_state
        assert self.context.is_open is False

    def test_refresh_gallery(self):
        get_app_context()
        self.metadata.cards.append(make_card("new", minutes_ago=0))

        refresh_gallery()

        assert self.context.catalog.cards[0].id == "new"

    def test_flash_messages_are_popped_in_order(self):
        push_flash("warning", "first")
        push_flash("success", "second")

        assert pop_flash_messages() == [("warning", "first"), ("success", "second")]
        assert pop_flash_messages() == []


class TestAuthHandlers(UIHandlerTestCase):
    """Test cases for login and logout handlers."""

    def test_login_success(self):
        assert handle_login(f"  {ADMIN_EMAIL} ", ADMIN_PASSWORD) is None
        assert is_admin() is True
        assert current_admin_email() == ADMIN_EMAIL

    def test_login_failure_returns_user_message(self):
        message = handle_login(ADMIN_EMAIL, "wrong")

        assert message == "Failed to login. Please check your credentials."
        assert is_admin() is False

    def test_logout(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert handle_logout() is None
        assert is_admin() is False
        assert current_admin_email() is None


class TestCardHandlers(UIHandlerTestCase):
    """Test cases for upload and delete handlers."""

    def test_upload_requires_admin(self, image_factory):
        outcome = handle_upload(image_factory(), "prompt", "Leo")

        assert outcome.success is False
        assert outcome.message == "Please sign in as an admin to continue."

    def test_upload_without_file(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)

        outcome = handle_upload(None, "prompt", "Leo")

        assert outcome.success is False
        assert outcome.message == "Please select an image."

    def test_upload_success(self, image_factory):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)

        outcome = handle_upload(image_factory(), "prompt", "Leo")

        assert outcome.success is True
        assert outcome.card.category == "Leo"
        assert self.context.catalog.cards[0] == outcome.card

    def test_upload_success_queues_message(self, image_factory):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)

        handle_upload(image_factory(), "prompt", "Leo")

        assert pop_flash_messages() == [("success", "Image added to the gallery.")]

    def test_delete_success(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)

        outcome = handle_delete("a")

        assert outcome.success is True
        assert outcome.warning is None
        assert "a" not in self.context.catalog

    def test_delete_with_storage_warning(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.blobs.remove_error = StorageError("timeout")

        outcome = handle_delete("a")

        assert outcome.success is True
        assert outcome.warning == "Entry deleted, but its image file could not be removed from storage."

    def test_storage_warning_survives_the_rerun(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.blobs.remove_error = StorageError("timeout")
        handle_delete("a")

        # Next script run, after the dialog's rerun
        with patch("promptgallery.ui.components.common.st") as mock_st:
            render_flash_messages()

        mock_st.warning.assert_called_once_with("Entry deleted, but its image file could not be removed from storage.")
        mock_st.success.assert_called_once_with("Entry deleted.")
        assert pop_flash_messages() == []

    def test_failed_delete_queues_nothing(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.metadata.deny_deletes = True

        handle_delete("a")

        assert pop_flash_messages() == []

    def test_delete_refused(self):
        handle_login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.metadata.deny_deletes = True

        outcome = handle_delete("a")

        assert outcome.success is False
        assert "refused" in outcome.message
        assert "a" in self.context.catalog

    @patch("promptgallery.ui.handlers.cards.handle_error")
    def test_errors_are_classified(self, mock_handle_error):
        mock_handle_error.return_value = MagicMock(user_message="classified")

        outcome = handle_delete("missing")

        assert outcome.message == "classified"
        assert mock_handle_error.call_args[0][1] == {"operation": "delete", "card_id": "missing"}

    def test_open_and_close_card(self):
        assert open_card("b").id == "b"
        assert self.context.catalog.selected_id == "b"

        close_card()

        assert self.context.catalog.selected is None
