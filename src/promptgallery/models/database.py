"""
Database initialization and management for the local DuckDB backend.

This module provides functions to initialize DuckDB databases and manage
database connections.
"""

import logging
from pathlib import Path
from typing import Any

import duckdb

from .schema import CARD_COLUMNS, get_schema_statements, validate_schema_compatibility

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages DuckDB database connections and initialization.
    """

    def __init__(self, db_path: str, table: str = "cards"):
        """
        Initialize DatabaseManager.

        Args:
            db_path: Path to the DuckDB database file
            table: Name of the cards table
        """
        self.db_path = db_path
        self.table = table
        self._connection: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Get or create a database connection.

        Returns:
            DuckDB connection object
        """
        if self._connection is None:
            self._connection = duckdb.connect(self.db_path)
            logger.debug(f"Connected to DuckDB database at {self.db_path}")

        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug("Closed DuckDB database connection")

    def initialize_schema(self) -> None:
        """
        Create the cards table and its indexes if they don't exist.

        Raises:
            RuntimeError: If the schema does not match the Card model
            duckdb.Error: If database operations fail
        """
        if not validate_schema_compatibility():
            raise RuntimeError("Schema is not compatible with Card model")

        conn = self.connect()

        try:
            for statement in get_schema_statements(self.table):
                logger.debug(f"Executing SQL: {statement}")
                conn.execute(statement)

            conn.commit()
            logger.info(f"Database schema initialized for table {self.table}")

        except duckdb.Error as e:
            logger.error(f"Failed to initialize database schema: {e}")
            raise

    def verify_schema(self) -> bool:
        """
        Verify that the cards table exists with every required column.

        Returns:
            True if schema is valid, False otherwise
        """
        conn = self.connect()

        try:
            columns = conn.execute(
                "SELECT column_name FROM information_schema.columns WHERE table_name = ?", (self.table,)
            ).fetchall()
            column_names = {col[0] for col in columns}

            if not column_names:
                logger.warning(f"Table {self.table} does not exist")
                return False

            missing_columns = set(CARD_COLUMNS) - column_names
            if missing_columns:
                logger.warning(f"Missing columns: {missing_columns}")
                return False

            return True

        except duckdb.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False

    def execute_query(self, query: str, parameters: tuple | None = None) -> list[dict[str, Any]]:
        """
        Execute a SQL statement and return its rows as dictionaries.

        Args:
            query: SQL query string
            parameters: Optional query parameters

        Returns:
            One dictionary per result row, keyed by column name; empty for statements without results

        Raises:
            duckdb.Error: If query execution fails
        """
        conn = self.connect()

        try:
            result = conn.execute(query, parameters) if parameters else conn.execute(query)

            if result.description is None:
                return []

            names = [column[0] for column in result.description]
            return [dict(zip(names, row, strict=True)) for row in result.fetchall()]

        except duckdb.Error as e:
            logger.error(f"Query execution failed: {query}, error: {e}")
            raise

    def __enter__(self) -> "DatabaseManager":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()


def create_database(db_path: str, table: str = "cards") -> DatabaseManager:
    """
    Create and initialize a new DuckDB database.

    Args:
        db_path: Path where the database file should be created
        table: Name of the cards table

    Returns:
        Initialized DatabaseManager instance

    Raises:
        RuntimeError: If database creation fails
    """
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        db_manager = DatabaseManager(db_path, table)
        db_manager.initialize_schema()

        if not db_manager.verify_schema():
            raise RuntimeError("Schema verification failed after creation")

        db_manager.close()
        logger.info(f"Successfully created database at {db_path}")
        return db_manager

    except Exception as e:
        logger.error(f"Failed to create database at {db_path}: {e}")
        raise RuntimeError(f"Database creation failed: {e}") from e


def get_database_manager(db_path: str, table: str = "cards", create_if_missing: bool = True) -> DatabaseManager:
    """
    Get a DatabaseManager instance, optionally creating the database if it doesn't exist.

    Args:
        db_path: Path to the database file
        table: Name of the cards table
        create_if_missing: Whether to create the database if it doesn't exist

    Returns:
        DatabaseManager instance

    Raises:
        FileNotFoundError: If database doesn't exist and create_if_missing is False
        RuntimeError: If database operations fail
    """
    if not Path(db_path).exists():
        if create_if_missing:
            return create_database(db_path, table)
        raise FileNotFoundError(f"Database file not found: {db_path}")

    db_manager = DatabaseManager(db_path, table)

    if not db_manager.verify_schema():
        logger.warning("Schema verification failed, reinitializing...")
        db_manager.initialize_schema()

    db_manager.close()
    return db_manager
