"""
Database schema definitions for the local DuckDB metadata backend.

The column set mirrors the hosted ``cards`` table so that rows from either
backend convert through ``Card.from_row`` unchanged.
"""

from dataclasses import fields

from .card import Card

CARDS_TABLE_TEMPLATE = """
CREATE TABLE IF NOT EXISTS {table} (
    id TEXT PRIMARY KEY,
    image_url TEXT NOT NULL,
    prompt TEXT NOT NULL,
    category TEXT,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

CARDS_INDEX_TEMPLATES = [
    "CREATE INDEX IF NOT EXISTS idx_{table}_created_at ON {table}(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_{table}_category ON {table}(category);",
]

CARD_COLUMNS = ("id", "image_url", "prompt", "category", "created_at")


def get_schema_statements(table: str = "cards") -> list[str]:
    """
    Get all schema creation statements for the given table name.

    Args:
        table: Table name; must be a plain identifier

    Returns:
        List of SQL statements creating the table and its indexes

    Raises:
        ValueError: If the table name is not a plain identifier
    """
    if not table.replace("_", "").isalnum():
        raise ValueError(f"Invalid table name: {table!r}")
    return [CARDS_TABLE_TEMPLATE.format(table=table)] + [t.format(table=table) for t in CARDS_INDEX_TEMPLATES]


def validate_schema_compatibility() -> bool:
    """Check that the table columns match the Card model fields."""
    return set(CARD_COLUMNS) == {field.name for field in fields(Card)}
