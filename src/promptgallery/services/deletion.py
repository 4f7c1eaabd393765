"""Card deletion: remove the row, then clean up the stored image."""

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from ..error_handling import (
    DatabaseError,
    MetadataWriteError,
    NotFoundError,
    PermissionDeniedError,
    StorageCleanupWarning,
)
from ..logging_config import get_logger, log_context, log_security_event, log_user_action
from ..models.card import Card
from .catalog import CatalogStore
from .repositories import BlobRepository, MetadataRepository
from .session import SessionGate

logger = get_logger(__name__)


def derive_storage_key(image_url: str, path_marker: str) -> str:
    """
    Extract the object key from a public image URL.

    The key is the path after ``path_marker`` when present, otherwise the last
    path segment. Query string and fragment are ignored and the key is
    URL-decoded.
    """
    path = urlsplit(image_url).path
    if path_marker and path_marker in path:
        key = path.split(path_marker, 1)[1]
    else:
        key = path.rsplit("/", 1)[-1]
    return unquote(key)


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of a deletion whose row was removed."""

    card: Card
    storage_key: str
    warning: StorageCleanupWarning | None = None

    @property
    def fully_succeeded(self) -> bool:
        return self.warning is None


class DeletionPipeline:
    """
    Removes a card from the gallery.

    The row is deleted first. Removing the binary afterwards is best effort:
    a failure is reported on the result and the card still leaves the catalog.
    """

    def __init__(
        self,
        session: SessionGate,
        catalog: CatalogStore,
        metadata: MetadataRepository,
        blobs: BlobRepository,
    ) -> None:
        self.session = session
        self.catalog = catalog
        self.metadata = metadata
        self.blobs = blobs

    def delete(self, card_id: str) -> DeletionResult:
        """
        Delete the card with ``card_id``.

        Raises:
            AuthenticationError: If no admin is signed in
            NotFoundError: If the card is not in the catalog
            MetadataWriteError: If the metadata store call fails
            PermissionDeniedError: If the store deleted no rows
        """
        user = self.session.require_authenticated("delete")

        card = self.catalog.get(card_id)
        if card is None:
            raise NotFoundError(f"Card '{card_id}' is not in the catalog", details={"card_id": card_id})

        with log_context(__name__, user_id=user.user_id, card_id=card_id) as log:
            log.info("deletion_started")

            try:
                deleted = self.metadata.delete_card(card_id)
            except DatabaseError as e:
                raise MetadataWriteError(
                    f"Failed to delete card metadata: {e}",
                    user_message="The entry could not be deleted. Please try again.",
                    details={"card_id": card_id},
                    original_exception=e,
                ) from e

            if not deleted:
                # Row-level security filters the row out instead of failing
                log_security_event("delete_refused", user_id=user.user_id, card_id=card_id)
                raise PermissionDeniedError(
                    f"Delete of card '{card_id}' affected no rows",
                    details={"card_id": card_id, "user_id": user.user_id},
                )
            log.info("card_row_deleted", affected=len(deleted))

            storage_key = derive_storage_key(card.image_url, self.blobs.path_marker)
            warning = None
            try:
                self.blobs.remove(storage_key)
                log.info("image_removed", storage_key=storage_key)
            except Exception as e:
                # The row is already gone; any cleanup failure is only a warning
                warning = StorageCleanupWarning(
                    "Row deleted, binary cleanup failed",
                    details={"card_id": card_id, "storage_key": storage_key},
                    original_exception=e,
                )

            self.catalog.remove(card_id)

        log_user_action(
            user.user_id, "delete_card", card_id=card_id, storage_key=storage_key, cleanup_failed=warning is not None
        )
        return DeletionResult(card=card, storage_key=storage_key, warning=warning)
