"""
Unit tests for schema definitions.
"""

import pytest

from promptgallery.models.schema import CARD_COLUMNS, get_schema_statements, validate_schema_compatibility


class TestSchema:
    """Test cases for schema statements."""

    def test_statements_use_table_name(self):
        statements = get_schema_statements("gallery_cards")

        assert len(statements) == 3
        assert "CREATE TABLE IF NOT EXISTS gallery_cards" in statements[0]
        assert all("gallery_cards" in statement for statement in statements)

    def test_table_defines_every_card_column(self):
        table_sql = get_schema_statements()[0]

        for column in CARD_COLUMNS:
            assert column in table_sql

    @pytest.mark.parametrize("table", ["cards; DROP TABLE x", "my-table", "a b"])
    def test_rejects_non_identifier_table_names(self, table):
        with pytest.raises(ValueError, match="Invalid table name"):
            get_schema_statements(table)

    def test_schema_matches_card_model(self):
        assert validate_schema_compatibility() is True
