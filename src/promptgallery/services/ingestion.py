"""Image ingestion: compress, upload, persist and publish a new card."""

import uuid
from datetime import datetime

from ..error_handling import DatabaseError, MetadataWriteError, StorageError, UploadError, ValidationError
from ..logging_config import get_logger, log_context, log_performance, log_user_action
from ..models.card import DEFAULT_CATEGORY, Card
from .catalog import CatalogStore
from .image_processor import DEFAULT_MAX_WIDTH, DEFAULT_QUALITY, JPEG_CONTENT_TYPE, ImageCompressor
from .repositories import BlobRepository, MetadataRepository
from .session import SessionGate

logger = get_logger(__name__)


def generate_storage_key() -> str:
    """Return a fresh object key for a compressed image."""
    return f"{uuid.uuid4().hex}.jpg"


class IngestionPipeline:
    """
    Adds an uploaded image to the gallery.

    Steps run strictly in order and stop at the first failure. A row is only
    written after its binary was uploaded; if the row write fails the binary
    stays behind as an orphan.
    """

    def __init__(
        self,
        session: SessionGate,
        catalog: CatalogStore,
        metadata: MetadataRepository,
        blobs: BlobRepository,
        compressor: ImageCompressor | None = None,
    ) -> None:
        self.session = session
        self.catalog = catalog
        self.metadata = metadata
        self.blobs = blobs
        self.compressor = compressor or ImageCompressor()

    def ingest(self, raw_image: bytes, prompt: str, category: str | None = None) -> Card:
        """
        Compress and store an image, then record and publish its card.

        Args:
            raw_image: Image bytes as selected by the admin
            prompt: Prompt text shown with the image
            category: Movie category; defaults to the first known category

        Returns:
            Card: The stored card, now first in the catalog

        Raises:
            AuthenticationError: If no admin is signed in
            ValidationError: If the image or prompt is empty
            DecodeError: If the image cannot be decoded
            EncodeError: If the image cannot be re-encoded
            UploadError: If object storage rejects the upload
            MetadataWriteError: If the metadata store does not return the new row
        """
        user = self.session.require_authenticated("ingest")

        if not raw_image:
            raise ValidationError("Image data is empty", code="empty_image", user_message="Please select an image.")
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt is empty", code="empty_prompt", user_message="Please enter a prompt.")
        category = category or DEFAULT_CATEGORY

        start_time = datetime.now()
        with log_context(__name__, user_id=user.user_id, category=category) as log:
            log.info("ingestion_started", size=len(raw_image))

            compressed = self.compressor.compress(raw_image, quality=DEFAULT_QUALITY, max_width=DEFAULT_MAX_WIDTH)
            log.info("image_compressed", original_size=len(raw_image), compressed_size=len(compressed))

            key = generate_storage_key()
            try:
                self.blobs.upload(key, compressed, JPEG_CONTENT_TYPE)
                image_url = self.blobs.public_url(key)
            except StorageError as e:
                raise UploadError(
                    f"Failed to upload image: {e}",
                    details={"storage_key": key, "size": len(compressed)},
                    original_exception=e,
                ) from e
            log.info("image_uploaded", storage_key=key, image_url=image_url)

            try:
                card = self.metadata.insert_card(prompt=prompt, image_url=image_url, category=category)
            except DatabaseError as e:
                raise MetadataWriteError(
                    f"Failed to save card metadata: {e}",
                    user_message="The image was uploaded but its entry could not be saved. Please try again.",
                    details={"storage_key": key, "image_url": image_url},
                    original_exception=e,
                ) from e
            log.info("card_saved", card_id=card.id)

            self.catalog.prepend(card)

        log_performance("ingest_card", (datetime.now() - start_time).total_seconds(), card_id=card.id)
        log_user_action(user.user_id, "upload_card", card_id=card.id, category=category, storage_key=key)
        return card
