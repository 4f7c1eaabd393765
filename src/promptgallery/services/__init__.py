"""
Services module for the promptgallery application.

This module contains the UI-independent core:
- ImageCompressor: width-bounded JPEG compression
- CatalogStore: in-memory ordered card collection and category filtering
- IngestionPipeline / DeletionPipeline: admin mutations
- SessionGate and auth services: Supabase or development sign-in
- Repositories: Supabase, DuckDB and Google Cloud Storage backends
- AppContext: per-session wiring of all of the above
"""

from .auth import AuthService, AuthSubscription, DevelopmentAuthService, SupabaseAuthService, UserInfo
from .catalog import ALL_CATEGORIES_LABEL, CatalogStore, derive_categories, filter_by_category
from .context import AppContext, create_app_context
from .deletion import DeletionPipeline, DeletionResult, derive_storage_key
from .image_processor import ImageCompressor, calculate_target_size, get_image_compressor
from .ingestion import IngestionPipeline
from .repositories import BlobRepository, MetadataRepository
from .session import SessionGate

__all__ = [
    "AuthService",
    "AuthSubscription",
    "DevelopmentAuthService",
    "SupabaseAuthService",
    "UserInfo",
    "ALL_CATEGORIES_LABEL",
    "CatalogStore",
    "derive_categories",
    "filter_by_category",
    "AppContext",
    "create_app_context",
    "DeletionPipeline",
    "DeletionResult",
    "derive_storage_key",
    "ImageCompressor",
    "calculate_target_size",
    "get_image_compressor",
    "IngestionPipeline",
    "BlobRepository",
    "MetadataRepository",
    "SessionGate",
]
