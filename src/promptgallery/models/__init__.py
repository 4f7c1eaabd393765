"""
Models module for the promptgallery application.

This module contains data models and schemas:
- Card: one gallery entry and its row conversion
- Database schemas and table definitions for the local DuckDB backend
- DatabaseManager: DuckDB connection and schema management
"""

from .card import DEFAULT_CATEGORIES, DEFAULT_CATEGORY, Card, parse_timestamp
from .database import DatabaseManager, create_database, get_database_manager
from .schema import get_schema_statements, validate_schema_compatibility

__all__ = [
    "Card",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "parse_timestamp",
    "DatabaseManager",
    "create_database",
    "get_database_manager",
    "get_schema_statements",
    "validate_schema_compatibility",
]
