"""
Pytest configuration and fixtures for promptgallery tests.
"""

import io
from collections.abc import Callable

import pytest
from PIL import Image

from promptgallery.services.auth import DevelopmentAuthService
from promptgallery.services.context import AppContext
from tests.fakes import ADMIN_EMAIL, ADMIN_PASSWORD, InMemoryBlobRepository, InMemoryMetadataRepository


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """Return a function producing encoded test images."""

    def create_image(width: int = 100, height: int = 100, format_type: str = "PNG", mode: str = "RGB") -> bytes:
        color = (200, 30, 30, 128) if mode == "RGBA" else "red"
        image = Image.new(mode, (width, height), color=color)
        buffer = io.BytesIO()
        image.save(buffer, format=format_type)
        return buffer.getvalue()

    return create_image


@pytest.fixture
def metadata_repo() -> InMemoryMetadataRepository:
    return InMemoryMetadataRepository()


@pytest.fixture
def blob_repo() -> InMemoryBlobRepository:
    return InMemoryBlobRepository()


@pytest.fixture
def dev_auth() -> DevelopmentAuthService:
    return DevelopmentAuthService(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def app_context(metadata_repo, blob_repo, dev_auth) -> AppContext:
    """An opened context with nobody signed in."""
    context = AppContext(metadata=metadata_repo, blobs=blob_repo, auth=dev_auth)
    context.open()
    yield context
    context.close()


@pytest.fixture
def admin_context(app_context) -> AppContext:
    """An opened context with the admin signed in."""
    app_context.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    return app_context
