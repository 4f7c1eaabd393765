"""
Application context wiring repositories, auth and the pipelines together.

One context belongs to one browser session (or one CLI run). It is opened
once, which restores the auth session, subscribes to session changes and
loads the catalog, and closed once, which cancels the subscription.
"""

from typing import Any

from supabase import Client

from ..config import Config, get_config
from ..logging_config import get_logger
from ..models.card import Card
from .auth import AuthService, AuthSubscription, DevelopmentAuthService, SupabaseAuthService, UserInfo
from .catalog import CatalogStore
from .deletion import DeletionPipeline, DeletionResult
from .image_processor import ImageCompressor
from .ingestion import IngestionPipeline
from .metadata import DuckDBMetadataRepository
from .repositories import BlobRepository, MetadataRepository
from .session import SessionGate
from .storage import GCSBlobRepository
from .supabase_backend import SupabaseBlobRepository, SupabaseMetadataRepository, create_supabase_client

logger = get_logger(__name__)


class AppContext:
    """Owns the collaborators and in-memory state of one gallery session."""

    def __init__(
        self,
        metadata: MetadataRepository,
        blobs: BlobRepository,
        auth: AuthService,
        compressor: ImageCompressor | None = None,
    ) -> None:
        self.metadata = metadata
        self.blobs = blobs
        self.auth = auth
        self.catalog = CatalogStore()
        self.session = SessionGate()
        self.ingestion = IngestionPipeline(self.session, self.catalog, metadata, blobs, compressor)
        self.deletion = DeletionPipeline(self.session, self.catalog, metadata, blobs)
        self._subscription: AuthSubscription | None = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    def open(self) -> "AppContext":
        """Restore the session, follow auth changes and load the catalog."""
        if self.is_open:
            return self
        self._subscription = self.session.attach(self.auth)
        try:
            self.refresh_catalog()
        except Exception:
            self.close()
            raise
        logger.info("app_context_opened", authenticated=self.session.is_authenticated, cards=len(self.catalog))
        return self

    def close(self) -> None:
        """Cancel the auth subscription. Safe to call more than once."""
        if self._subscription is None:
            return
        self._subscription.unsubscribe()
        self._subscription = None
        logger.info("app_context_closed")

    def __enter__(self) -> "AppContext":
        return self.open()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def refresh_catalog(self) -> list[Card]:
        """Reload every card from the metadata store, newest first."""
        cards = self.metadata.list_cards()
        self.catalog.replace_all(cards)
        return cards

    def sign_in(self, email: str, password: str) -> UserInfo:
        user = self.auth.sign_in_with_password(email, password)
        # Subscriptions may deliver asynchronously; reflect the sign-in now
        self.session.handle_session_change("SIGNED_IN", user)
        return user

    def sign_out(self) -> None:
        self.auth.sign_out()
        self.session.handle_session_change("SIGNED_OUT", None)
        self.catalog.clear_selection()

    def ingest(self, raw_image: bytes, prompt: str, category: str | None = None) -> Card:
        return self.ingestion.ingest(raw_image, prompt, category)

    def delete(self, card_id: str) -> DeletionResult:
        return self.deletion.delete(card_id)


def create_app_context(config: Config | None = None) -> AppContext:
    """
    Build an unopened AppContext from configuration.

    Raises:
        ConfigurationError: If a backend is unknown or its settings are missing
        DatabaseError: If the local metadata database cannot be opened
        StorageError: If the object storage client cannot be created
    """
    config = config or get_config()
    metadata_backend = config.metadata_backend
    storage_backend = config.storage_backend
    auth_backend = config.auth_backend

    client: Client | None = None
    if "supabase" in (metadata_backend, storage_backend, auth_backend):
        client = create_supabase_client(config.supabase_url, config.supabase_key)

    metadata: MetadataRepository
    if metadata_backend == "duckdb":
        metadata = DuckDBMetadataRepository(config.duckdb_path, config.cards_table)
    else:
        metadata = SupabaseMetadataRepository(client, config.cards_table)

    blobs: BlobRepository
    if storage_backend == "gcs":
        blobs = GCSBlobRepository(config.gcs_bucket, config.gcs_project)
    else:
        blobs = SupabaseBlobRepository(client, config.images_bucket)

    auth: AuthService
    if auth_backend == "development":
        auth = DevelopmentAuthService(config.dev_admin_email, config.dev_admin_password)
    else:
        auth = SupabaseAuthService(client)

    logger.info(
        "app_context_created",
        metadata_backend=metadata_backend,
        storage_backend=storage_backend,
        auth_backend=auth_backend,
    )
    return AppContext(metadata=metadata, blobs=blobs, auth=auth)
