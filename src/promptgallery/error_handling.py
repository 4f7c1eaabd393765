"""
Centralized error classification for the promptgallery application.

Every failure surfaced to the UI is a ``GalleryError`` carrying a category, a
severity, a stable code and a user-facing message. Errors log themselves when
constructed so that call sites only have to raise.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    UPLOAD = "upload"
    IMAGE_PROCESSING = "image_processing"
    DATABASE = "database"
    STORAGE = "storage"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorInfo:
    """Structured error information."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True
    retry_suggested: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert error info to dictionary."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "retry_suggested": self.retry_suggested,
        }


DEFAULT_USER_MESSAGES = {
    ErrorCategory.AUTHENTICATION: "Please sign in as an admin to continue.",
    ErrorCategory.AUTHORIZATION: "You are not allowed to perform this action.",
    ErrorCategory.UPLOAD: "Failed to upload the image. Please try again.",
    ErrorCategory.IMAGE_PROCESSING: "The image could not be processed. Please check the file.",
    ErrorCategory.DATABASE: "Could not save the gallery entry. Please try again.",
    ErrorCategory.STORAGE: "A storage error occurred. Please try again.",
    ErrorCategory.VALIDATION: "Some of the provided information is invalid.",
    ErrorCategory.NOT_FOUND: "The requested entry no longer exists.",
    ErrorCategory.CONFIGURATION: "The application is not configured correctly.",
    ErrorCategory.UNKNOWN: "An unexpected error occurred.",
}


class GalleryError(Exception):
    """Base exception class for the promptgallery application."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        retry_suggested: bool = False,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.code = code or f"{category.value}_error"
        self.user_message = user_message or DEFAULT_USER_MESSAGES.get(category, "An error occurred.")
        self.details = details or {}
        self.recoverable = recoverable
        self.retry_suggested = retry_suggested
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with appropriate level."""
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            **self.details,
        }

        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        if self.severity is ErrorSeverity.LOW:
            logger.warning("gallery_warning", error_message=str(self), **error_context)
        else:
            log_error(self, error_context)

        if self.category in (ErrorCategory.AUTHENTICATION, ErrorCategory.AUTHORIZATION):
            log_security_event(self.category.value, code=self.code, details=self.details)

    def get_error_info(self) -> ErrorInfo:
        """Get structured error information."""
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
            retry_suggested=self.retry_suggested,
        )


class AuthenticationError(GalleryError):
    """Sign-in failed or an anonymous caller reached an admin operation."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            severity=ErrorSeverity.HIGH,
            code=code or "auth_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


class ValidationError(GalleryError):
    """Caller supplied invalid input."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            code=code or "validation_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=False,
            original_exception=original_exception,
        )


class ConfigurationError(GalleryError):
    """Required configuration is missing or contradictory."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            code="configuration_invalid",
            details=details,
            recoverable=False,
        )


class DatabaseError(GalleryError):
    """A metadata repository call failed."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.DATABASE,
            severity=ErrorSeverity.HIGH,
            code=code or "database_error",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


class StorageError(GalleryError):
    """A blob repository call failed."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.HIGH,
            code=code or "storage_error",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


# Compression stage


class ImageProcessingError(GalleryError):
    """Base for failures while compressing an image."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.IMAGE_PROCESSING,
            severity=ErrorSeverity.MEDIUM,
            code=code or "image_processing_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=False,
            original_exception=original_exception,
        )


class DecodeError(ImageProcessingError):
    """The input could not be decoded as an image."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, original_exception: Exception | None = None):
        super().__init__(
            message,
            code="image_decode_failed",
            user_message="The selected file is not a readable image.",
            details=details,
            original_exception=original_exception,
        )


class EncodeError(ImageProcessingError):
    """Re-encoding the image as JPEG failed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, original_exception: Exception | None = None):
        super().__init__(
            message,
            code="image_encode_failed",
            user_message="The image could not be compressed. Try a different file.",
            details=details,
            original_exception=original_exception,
        )


# Ingestion stage


class UploadError(GalleryError):
    """The compressed image could not be written to object storage."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.UPLOAD,
            severity=ErrorSeverity.MEDIUM,
            code="upload_failed",
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


class MetadataWriteError(GalleryError):
    """The metadata store rejected an insert or delete."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.DATABASE,
            severity=ErrorSeverity.HIGH,
            code="metadata_write_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


# Deletion stage


class NotFoundError(GalleryError):
    """The card is not present in the catalog."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.LOW,
            code="card_not_found",
            details=details,
        )


class PermissionDeniedError(GalleryError):
    """The backend accepted a delete but affected no rows."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, original_exception: Exception | None = None):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHORIZATION,
            severity=ErrorSeverity.HIGH,
            code="delete_not_permitted",
            user_message="The entry was not deleted: the backend refused the request for this account.",
            details=details,
            recoverable=False,
            original_exception=original_exception,
        )


class StorageCleanupWarning(GalleryError):
    """Row deleted but the stored binary could not be removed. Carried, never raised."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, original_exception: Exception | None = None):
        super().__init__(
            message=message,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.LOW,
            code="storage_cleanup_failed",
            user_message="Entry deleted, but its image file could not be removed from storage.",
            details=details,
            original_exception=original_exception,
        )


CLASSIFICATION_RULES: list[tuple[tuple[str, ...], type[GalleryError]]] = [
    (("authentication", "login", "jwt", "token", "unauthorized", "invalid credentials"), AuthenticationError),
    (("permission", "access denied", "forbidden", "row-level security", "not allowed"), PermissionDeniedError),
    (("cannot identify image", "decode", "truncated", "image file"), DecodeError),
    (("upload", "payload too large", "bucket"), UploadError),
    (("database", "duckdb", "postgrest", "relation", "violates"), DatabaseError),
    (("storage", "gcs", "object"), StorageError),
    (("validation", "invalid", "required", "missing"), ValidationError),
]


class ErrorHandler:
    """Centralized error handler turning arbitrary exceptions into ErrorInfo."""

    def __init__(self) -> None:
        self.error_counts: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def handle_error(self, error: Exception, context: dict[str, Any] | None = None) -> ErrorInfo:
        """
        Handle and classify an error.

        Args:
            error: Exception to handle
            context: Additional context information

        Returns:
            ErrorInfo: Structured error information
        """
        context = context or {}

        if isinstance(error, GalleryError):
            error_info = error.get_error_info()
        else:
            error_info = self._classify_error(error, context).get_error_info()

        self._track_error(error_info.code)
        return error_info

    def _classify_error(self, error: Exception, context: dict[str, Any]) -> GalleryError:
        """Classify a foreign exception by keywords in its message."""
        error_message = str(error)
        lowered = error_message.lower()
        details = {"original_type": type(error).__name__, **context}

        for keywords, error_class in CLASSIFICATION_RULES:
            if any(keyword in lowered for keyword in keywords):
                return error_class(message=error_message, details=details, original_exception=error)

        return GalleryError(message=error_message, details=details, original_exception=error)

    def _track_error(self, error_code: str) -> None:
        """Count occurrences per error code."""
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1

        if self.error_counts[error_code] % 10 == 0:
            self.logger.warning("frequent_error_detected", error_code=error_code, count=self.error_counts[error_code])

    def get_error_statistics(self) -> dict[str, int]:
        """Get error occurrence statistics."""
        return self.error_counts.copy()

    def reset_statistics(self) -> None:
        """Reset error statistics."""
        self.error_counts.clear()


error_handler = ErrorHandler()


def handle_error(error: Exception, context: dict[str, Any] | None = None) -> ErrorInfo:
    """Classify an error with the global handler."""
    return error_handler.handle_error(error, context)


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return error_handler
