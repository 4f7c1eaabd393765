"""Google Cloud Storage blob repository."""

from urllib.parse import quote

from google.cloud import storage  # type: ignore[attr-defined]
from google.cloud.exceptions import GoogleCloudError, NotFound

from ..error_handling import StorageError
from ..logging_config import get_logger
from .repositories import BlobRepository

logger = get_logger(__name__)

GCS_PUBLIC_HOST = "https://storage.googleapis.com"


class GCSBlobRepository(BlobRepository):
    """Images stored in a publicly readable Google Cloud Storage bucket."""

    def __init__(self, bucket_name: str, project_id: str | None = None, client: storage.Client | None = None) -> None:
        """
        Initialize the GCS repository.

        Args:
            bucket_name: Bucket holding the gallery images
            project_id: GCP project ID (the client's default project when omitted)
            client: Pre-built storage client, mainly for tests

        Raises:
            StorageError: If the bucket name is empty or the client cannot be created
        """
        if not bucket_name:
            raise StorageError("GCS bucket name is required", code="missing_bucket")

        self.bucket_name = bucket_name
        self.project_id = project_id

        try:
            self.client = client or storage.Client(project=project_id)
            self.bucket = self.client.bucket(bucket_name)
        except Exception as e:
            raise StorageError(f"Failed to initialize GCS client: {e}", original_exception=e) from e

        logger.info("gcs_repository_initialized", bucket=bucket_name, project_id=project_id)

    @property
    def path_marker(self) -> str:
        return f"/{self.bucket_name}/"

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        blob = self.bucket.blob(key)
        try:
            blob.upload_from_string(data, content_type=content_type)
        except GoogleCloudError as e:
            raise StorageError(
                f"Failed to upload '{key}': {e}",
                code="upload_failed",
                details={"bucket": self.bucket_name, "key": key, "size": len(data)},
                original_exception=e,
            ) from e
        except Exception as e:
            raise StorageError(
                f"Unexpected error uploading '{key}': {e}",
                code="upload_failed",
                details={"bucket": self.bucket_name, "key": key, "size": len(data)},
                original_exception=e,
            ) from e

        logger.info("object_uploaded", bucket=self.bucket_name, key=key, size=len(data), content_type=content_type)

    def public_url(self, key: str) -> str:
        return f"{GCS_PUBLIC_HOST}/{self.bucket_name}/{quote(key)}"

    def remove(self, key: str) -> None:
        try:
            self.bucket.blob(key).delete()
        except NotFound as e:
            raise StorageError(
                f"Object '{key}' not found",
                code="object_not_found",
                details={"bucket": self.bucket_name, "key": key},
                original_exception=e,
            ) from e
        except GoogleCloudError as e:
            raise StorageError(
                f"Failed to delete '{key}': {e}",
                code="remove_failed",
                details={"bucket": self.bucket_name, "key": key},
                original_exception=e,
            ) from e
        except Exception as e:
            raise StorageError(
                f"Unexpected error deleting '{key}': {e}",
                code="remove_failed",
                details={"bucket": self.bucket_name, "key": key},
                original_exception=e,
            ) from e

        logger.info("object_removed", bucket=self.bucket_name, key=key)
