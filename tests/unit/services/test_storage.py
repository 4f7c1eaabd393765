"""
Unit tests for the Google Cloud Storage repository.
"""

from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import TransportError
from google.cloud.exceptions import GoogleCloudError, NotFound

from promptgallery.error_handling import StorageError
from promptgallery.services.storage import GCSBlobRepository


class TestGCSBlobRepository:
    """Test cases for GCSBlobRepository class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = MagicMock()
        self.bucket = self.client.bucket.return_value
        self.blob = self.bucket.blob.return_value
        self.repo = GCSBlobRepository("gallery-bucket", "test-project", client=self.client)

    @patch("promptgallery.services.storage.storage.Client")
    def test_init_builds_client(self, mock_client_class):
        repo = GCSBlobRepository("gallery-bucket", "test-project")

        mock_client_class.assert_called_once_with(project="test-project")
        mock_client_class.return_value.bucket.assert_called_once_with("gallery-bucket")
        assert repo.bucket is mock_client_class.return_value.bucket.return_value

    def test_init_missing_bucket_name(self):
        with pytest.raises(StorageError, match="bucket name is required"):
            GCSBlobRepository("")

    @patch("promptgallery.services.storage.storage.Client")
    def test_init_client_error(self, mock_client_class):
        mock_client_class.side_effect = Exception("Client initialization failed")

        with pytest.raises(StorageError, match="Failed to initialize GCS client"):
            GCSBlobRepository("gallery-bucket")

    def test_path_marker(self):
        assert self.repo.path_marker == "/gallery-bucket/"

    def test_public_url(self):
        assert self.repo.public_url("my photo.jpg") == "https://storage.googleapis.com/gallery-bucket/my%20photo.jpg"

    def test_upload(self):
        self.repo.upload("abc.jpg", b"data", "image/jpeg")

        self.bucket.blob.assert_called_with("abc.jpg")
        self.blob.upload_from_string.assert_called_once_with(b"data", content_type="image/jpeg")

    def test_upload_gcs_error(self):
        self.blob.upload_from_string.side_effect = GoogleCloudError("Upload failed")

        with pytest.raises(StorageError, match="Failed to upload 'abc.jpg'"):
            self.repo.upload("abc.jpg", b"data", "image/jpeg")

    def test_upload_unexpected_error(self):
        self.blob.upload_from_string.side_effect = ValueError("bad data")

        with pytest.raises(StorageError, match="Unexpected error uploading"):
            self.repo.upload("abc.jpg", b"data", "image/jpeg")

    def test_remove(self):
        self.repo.remove("abc.jpg")

        self.blob.delete.assert_called_once_with()

    def test_remove_not_found(self):
        self.blob.delete.side_effect = NotFound("No such object")

        with pytest.raises(StorageError) as exc_info:
            self.repo.remove("abc.jpg")

        assert exc_info.value.code == "object_not_found"

    def test_remove_gcs_error(self):
        self.blob.delete.side_effect = GoogleCloudError("Permission denied")

        with pytest.raises(StorageError) as exc_info:
            self.repo.remove("abc.jpg")

        assert exc_info.value.code == "remove_failed"

    def test_remove_transport_error(self):
        self.blob.delete.side_effect = TransportError("connection reset")

        with pytest.raises(StorageError, match="Unexpected error deleting") as exc_info:
            self.repo.remove("abc.jpg")

        assert exc_info.value.code == "remove_failed"
        assert isinstance(exc_info.value.original_exception, TransportError)
