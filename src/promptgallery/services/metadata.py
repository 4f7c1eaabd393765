"""
Local DuckDB metadata repository.

Used for development and self-hosted setups where the hosted metadata table
is not available. Rows follow the same column layout as the hosted table, and
id and created_at are assigned here the way the hosted store assigns them.
"""

import uuid
from datetime import UTC, datetime

import duckdb

from ..error_handling import DatabaseError
from ..logging_config import get_logger, log_performance
from ..models.card import Card
from ..models.database import DatabaseManager, get_database_manager
from .repositories import MetadataRepository

logger = get_logger(__name__)


class DuckDBMetadataRepository(MetadataRepository):
    """Cards stored in a local DuckDB database file."""

    def __init__(self, db_path: str, table: str = "cards") -> None:
        """
        Open (creating when missing) the database at ``db_path``.

        Raises:
            DatabaseError: If the database cannot be created or opened
        """
        self.db_path = db_path
        self.table = table

        try:
            self.db_manager: DatabaseManager = get_database_manager(db_path, table, create_if_missing=True)
        except (RuntimeError, duckdb.Error) as e:
            raise DatabaseError(
                f"Failed to open metadata database: {e}",
                code="database_open_failed",
                details={"db_path": db_path},
                original_exception=e,
            ) from e

        logger.info("duckdb_metadata_repository_initialized", db_path=db_path, table=table)

    def insert_card(self, prompt: str, image_url: str, category: str) -> Card:
        card_id = str(uuid.uuid4())
        created_at = datetime.now(UTC).replace(tzinfo=None)

        try:
            with self.db_manager as db:
                rows = db.execute_query(
                    f"""INSERT INTO {self.table} (id, image_url, prompt, category, created_at)
                        VALUES (?, ?, ?, ?, ?)
                        RETURNING id, image_url, prompt, category, created_at""",
                    (card_id, image_url, prompt, category, created_at),
                )
        except duckdb.Error as e:
            raise DatabaseError(
                f"Failed to insert card: {e}",
                code="insert_failed",
                details={"db_path": self.db_path, "card_id": card_id},
                original_exception=e,
            ) from e

        if not rows:
            raise DatabaseError("Insert returned no rows", code="insert_not_returned", details={"card_id": card_id})

        return Card.from_row(rows[0])

    def delete_card(self, card_id: str) -> list[Card]:
        try:
            with self.db_manager as db:
                rows = db.execute_query(
                    f"""DELETE FROM {self.table} WHERE id = ?
                        RETURNING id, image_url, prompt, category, created_at""",
                    (card_id,),
                )
        except duckdb.Error as e:
            raise DatabaseError(
                f"Failed to delete card: {e}",
                code="delete_failed",
                details={"db_path": self.db_path, "card_id": card_id},
                original_exception=e,
            ) from e

        if not rows:
            logger.warning("card_not_found_for_deletion", card_id=card_id)

        return [Card.from_row(row) for row in rows]

    def list_cards(self) -> list[Card]:
        start_time = datetime.now()
        try:
            with self.db_manager as db:
                rows = db.execute_query(
                    f"""SELECT id, image_url, prompt, category, created_at
                        FROM {self.table}
                        ORDER BY created_at DESC"""
                )
        except duckdb.Error as e:
            raise DatabaseError(
                f"Failed to list cards: {e}",
                code="select_failed",
                details={"db_path": self.db_path},
                original_exception=e,
            ) from e

        log_performance("list_cards", (datetime.now() - start_time).total_seconds(), count=len(rows))
        return [Card.from_row(row) for row in rows]

    def backfill_category(self, category: str) -> int:
        try:
            with self.db_manager as db:
                rows = db.execute_query(
                    f"""UPDATE {self.table} SET category = ?
                        WHERE category IS NULL OR category = ''
                        RETURNING id""",
                    (category,),
                )
        except duckdb.Error as e:
            raise DatabaseError(
                f"Failed to backfill categories: {e}",
                code="update_failed",
                details={"db_path": self.db_path, "category": category},
                original_exception=e,
            ) from e

        return len(rows)
