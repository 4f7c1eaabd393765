"""
Unit tests for database module.
"""

import os
import tempfile

import duckdb
import pytest

from promptgallery.models.database import DatabaseManager, create_database, get_database_manager


class TestDatabaseManager:
    """Test cases for DatabaseManager class."""

    def test_init(self):
        """Test DatabaseManager initialization."""
        manager = DatabaseManager("/tmp/test.db", "cards")

        assert manager.db_path == "/tmp/test.db"
        assert manager.table == "cards"
        assert manager._connection is None

    def test_connect_reuses_connection(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            manager = DatabaseManager(os.path.join(tmp_dir, "test.db"))
            conn = manager.connect()

            assert isinstance(conn, duckdb.DuckDBPyConnection)
            assert manager.connect() is conn

            manager.close()
            assert manager._connection is None

    def test_initialize_and_verify_schema(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            manager = DatabaseManager(os.path.join(tmp_dir, "test.db"))

            assert manager.verify_schema() is False
            manager.initialize_schema()
            assert manager.verify_schema() is True

            manager.close()

    def test_execute_query_returns_dicts(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            with DatabaseManager(os.path.join(tmp_dir, "test.db")) as manager:
                manager.initialize_schema()
                manager.execute_query(
                    "INSERT INTO cards (id, image_url, prompt, category) VALUES (?, ?, ?, ?)",
                    ("c1", "https://example.com/c1.jpg", "prompt", "GOAT"),
                )

                rows = manager.execute_query("SELECT id, category FROM cards")

            assert rows == [{"id": "c1", "category": "GOAT"}]
            assert manager._connection is None

    def test_execute_query_error_propagates(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            with DatabaseManager(os.path.join(tmp_dir, "test.db")) as manager:
                with pytest.raises(duckdb.Error):
                    manager.execute_query("SELECT * FROM missing_table")


class TestDatabaseFactories:
    """Test cases for create_database and get_database_manager."""

    def test_create_database_creates_parent_directories(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_path = os.path.join(tmp_dir, "nested", "dir", "gallery.db")

            manager = create_database(db_path)

            assert os.path.exists(db_path)
            assert manager._connection is None
            assert manager.verify_schema() is True
            manager.close()

    def test_get_database_manager_missing_without_create(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            with pytest.raises(FileNotFoundError):
                get_database_manager(os.path.join(tmp_dir, "missing.db"), create_if_missing=False)

    def test_get_database_manager_repairs_schema(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_path = os.path.join(tmp_dir, "existing.db")
            duckdb.connect(db_path).close()

            manager = get_database_manager(db_path, table="gallery")

            assert manager.verify_schema() is True
            manager.close()
