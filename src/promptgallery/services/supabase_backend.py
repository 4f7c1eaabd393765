"""Supabase-backed metadata and object storage repositories."""

from typing import Any

from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..error_handling import ConfigurationError, DatabaseError, StorageError
from ..logging_config import get_logger
from ..models.card import Card
from .repositories import BlobRepository, MetadataRepository

logger = get_logger(__name__)


def create_supabase_client(url: str, key: str) -> Client:
    """
    Create a Supabase client.

    Each browser session gets its own client because the client carries the
    signed-in admin's session; sharing one would share the login.

    Args:
        url: Supabase project URL
        key: Anon (public) API key

    Returns:
        Client: Initialized Supabase client

    Raises:
        ConfigurationError: If the URL or key is missing or rejected by the client
    """
    if not url or not key:
        raise ConfigurationError("Supabase URL or key not configured", details={"has_url": bool(url)})

    try:
        client = create_client(url, key)
    except Exception as e:
        raise ConfigurationError(f"Failed to initialize Supabase client: {e}", details={"url": url}) from e

    logger.info("supabase_client_initialized", url=url)
    return client


class SupabaseMetadataRepository(MetadataRepository):
    """Cards stored in a Supabase (PostgREST) table."""

    def __init__(self, client: Client, table: str = "cards") -> None:
        self.client = client
        self.table = table

    def _rows(self, response: Any) -> list[dict[str, Any]]:
        return list(response.data or [])

    def insert_card(self, prompt: str, image_url: str, category: str) -> Card:
        try:
            response = self.client.table(self.table).insert(Card.new_row(prompt, image_url, category)).execute()
        except APIError as e:
            raise DatabaseError(
                f"Failed to insert card: {e.message}",
                code="insert_failed",
                details={"table": self.table, "postgrest_code": e.code},
                original_exception=e,
            ) from e
        except Exception as e:
            raise DatabaseError(
                f"Unexpected error inserting card: {e}",
                code="insert_failed",
                details={"table": self.table},
                original_exception=e,
            ) from e

        rows = self._rows(response)
        if not rows:
            raise DatabaseError("Insert returned no rows", code="insert_not_returned", details={"table": self.table})

        card = Card.from_row(rows[0])
        logger.debug("card_row_inserted", table=self.table, card_id=card.id)
        return card

    def delete_card(self, card_id: str) -> list[Card]:
        try:
            response = self.client.table(self.table).delete().eq("id", card_id).execute()
        except APIError as e:
            raise DatabaseError(
                f"Failed to delete card: {e.message}",
                code="delete_failed",
                details={"table": self.table, "card_id": card_id, "postgrest_code": e.code},
                original_exception=e,
            ) from e
        except Exception as e:
            raise DatabaseError(
                f"Unexpected error deleting card: {e}",
                code="delete_failed",
                details={"table": self.table, "card_id": card_id},
                original_exception=e,
            ) from e

        deleted = [Card.from_row(row) for row in self._rows(response)]
        logger.debug("card_rows_deleted", table=self.table, card_id=card_id, affected=len(deleted))
        return deleted

    def list_cards(self) -> list[Card]:
        try:
            response = self.client.table(self.table).select("*").order("created_at", desc=True).execute()
        except APIError as e:
            raise DatabaseError(
                f"Failed to list cards: {e.message}",
                code="select_failed",
                details={"table": self.table, "postgrest_code": e.code},
                original_exception=e,
            ) from e
        except Exception as e:
            raise DatabaseError(
                f"Unexpected error listing cards: {e}",
                code="select_failed",
                details={"table": self.table},
                original_exception=e,
            ) from e

        return [Card.from_row(row) for row in self._rows(response)]

    def backfill_category(self, category: str) -> int:
        try:
            response = (
                self.client.table(self.table)
                .update({"category": category})
                .or_("category.is.null,category.eq.")
                .execute()
            )
        except APIError as e:
            raise DatabaseError(
                f"Failed to backfill categories: {e.message}",
                code="update_failed",
                details={"table": self.table, "postgrest_code": e.code},
                original_exception=e,
            ) from e
        except Exception as e:
            raise DatabaseError(
                f"Unexpected error backfilling categories: {e}",
                code="update_failed",
                details={"table": self.table},
                original_exception=e,
            ) from e

        return len(self._rows(response))


class SupabaseBlobRepository(BlobRepository):
    """Images stored in a public Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str = "images") -> None:
        self.client = client
        self.bucket = bucket

    @property
    def path_marker(self) -> str:
        return f"/storage/v1/object/public/{self.bucket}/"

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.storage.from_(self.bucket).upload(
                path=key,
                file=data,
                file_options={"content-type": content_type},
            )
        except Exception as e:
            raise StorageError(
                f"Failed to upload '{key}': {e}",
                code="upload_failed",
                details={"bucket": self.bucket, "key": key, "size": len(data)},
                original_exception=e,
            ) from e

        logger.debug("object_uploaded", bucket=self.bucket, key=key, size=len(data))

    def public_url(self, key: str) -> str:
        try:
            url = self.client.storage.from_(self.bucket).get_public_url(key)
        except Exception as e:
            raise StorageError(
                f"Failed to resolve public URL for '{key}': {e}",
                code="public_url_failed",
                details={"bucket": self.bucket, "key": key},
                original_exception=e,
            ) from e

        # Some storage client releases append an empty query string
        return str(url).rstrip("?")

    def remove(self, key: str) -> None:
        try:
            removed = self.client.storage.from_(self.bucket).remove([key])
        except Exception as e:
            raise StorageError(
                f"Failed to remove '{key}': {e}",
                code="remove_failed",
                details={"bucket": self.bucket, "key": key},
                original_exception=e,
            ) from e

        if isinstance(removed, list) and not removed:
            raise StorageError(
                f"No object removed for '{key}'",
                code="remove_no_effect",
                details={"bucket": self.bucket, "key": key},
            )

        logger.debug("object_removed", bucket=self.bucket, key=key)
