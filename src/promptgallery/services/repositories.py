"""
Repository interfaces for the gallery's external collaborators.

The pipelines talk to the metadata store and object storage only through
these two narrow capability sets, so backends (Supabase, DuckDB, Google Cloud
Storage, or in-memory fakes in tests) can be swapped without touching them.
"""

from abc import ABC, abstractmethod

from ..models.card import Card


class MetadataRepository(ABC):
    """Row-level persistence for Cards."""

    @abstractmethod
    def insert_card(self, prompt: str, image_url: str, category: str) -> Card:
        """
        Insert a new row and return it as stored.

        Raises:
            DatabaseError: If the store rejects the insert or returns no row
        """

    @abstractmethod
    def delete_card(self, card_id: str) -> list[Card]:
        """
        Delete the row with ``card_id`` and return the rows actually deleted.

        An empty list means nothing was deleted, either because nothing
        matched or because an access policy silently filtered the request.

        Raises:
            DatabaseError: If the store reports an error
        """

    @abstractmethod
    def list_cards(self) -> list[Card]:
        """
        Return every Card ordered by ``created_at`` descending.

        Raises:
            DatabaseError: If the store reports an error
        """

    @abstractmethod
    def backfill_category(self, category: str) -> int:
        """
        Set ``category`` on every row that has none.

        Returns:
            int: Number of rows updated

        Raises:
            DatabaseError: If the store reports an error
        """


class BlobRepository(ABC):
    """Binary object persistence for uploaded images."""

    @property
    @abstractmethod
    def path_marker(self) -> str:
        """URL path prefix that precedes the object key in public URLs."""

    @abstractmethod
    def upload(self, key: str, data: bytes, content_type: str) -> None:
        """
        Store ``data`` under ``key``.

        Raises:
            StorageError: If the upload fails
        """

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Return the publicly resolvable URL of ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete the object stored under ``key``.

        Raises:
            StorageError: If the removal fails
        """
