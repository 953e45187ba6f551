"""
Centralized error handling and classification for photogallery.

Every failure the core surfaces is a ``GalleryError`` subclass. Each carries
a category, a machine-readable code, a user-facing message and the HTTP
status the API layer answers with, so that every handler-level failure can
be rendered as the same structured payload.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    STORAGE = "storage"
    IMAGE_PROCESSING = "image_processing"
    AUTHENTICATION = "authentication"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


HTTP_STATUS_BY_CATEGORY = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.STORAGE: 500,
    ErrorCategory.IMAGE_PROCESSING: 500,
    ErrorCategory.AUTHENTICATION: 401,
    ErrorCategory.SYSTEM: 500,
}


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
    status_code: int

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
            "status_code": self.status_code,
        }

    def to_response_payload(self) -> dict[str, Any]:
        """Payload returned to API clients."""
        return {"error": self.user_message, "code": self.code}


class GalleryError(Exception):
    """Base exception class for photogallery."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.code = code or f"{category.value}_error"
        self.user_message = user_message or message
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CATEGORY.get(self.category, 500)

    def _log_error(self) -> None:
        """Log the error with a level matching its severity."""
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            **self.details,
        }

        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        if self.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            log_error(self, error_context)
        else:
            log_error(self, error_context, level="warning")

        if self.category == ErrorCategory.AUTHENTICATION:
            log_security_event(self.category.value, **error_context)

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
            status_code=self.status_code,
        )


class NotFoundError(GalleryError):
    """Lookup or mutation target is absent."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.LOW,
            code=code or "not_found",
            user_message=user_message or "Not found",
            details=details,
        )


class ValidationError(GalleryError):
    """Caller supplied missing or malformed input."""

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
            code=code or "invalid_input",
            user_message=user_message or message,
            details=details,
            original_exception=original_exception,
        )


class StorageError(GalleryError):
    """An underlying blob or metadata store operation failed."""

    default_code = "storage_error"

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
            code=code or self.default_code,
            user_message=user_message or "A storage error occurred. Please try again later.",
            details=details,
            original_exception=original_exception,
        )


class StorageReadError(StorageError):
    """Reading from the blob or metadata store failed."""

    default_code = "storage_read_failed"


class StorageWriteError(StorageError):
    """Writing to (or deleting from) the blob or metadata store failed."""

    default_code = "storage_write_failed"


class ImageProcessingError(GalleryError):
    """An image could not be decoded or re-encoded."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.IMAGE_PROCESSING,
            severity=ErrorSeverity.MEDIUM,
            code=code or "image_processing_failed",
            user_message="The image could not be processed.",
            details=details,
            original_exception=original_exception,
        )


class AuthenticationError(GalleryError):
    """Caller lacks a valid admin session."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            severity=ErrorSeverity.MEDIUM,
            code=code or "unauthorized",
            user_message=user_message or "Unauthorized",
            details=details,
        )


class GallerySystemError(GalleryError):
    """Unexpected failure; rendered to clients as a generic internal error."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.SYSTEM,
            severity=ErrorSeverity.CRITICAL,
            code=code or "internal_error",
            user_message="Internal server error",
            details=details,
            original_exception=original_exception,
        )


class ErrorHandler:
    """Converts arbitrary exceptions into structured error information."""

    def __init__(self) -> None:
        self.error_counts: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def handle_error(
        self,
        error: Exception,
        context: dict[str, Any] | None = None,
    ) -> ErrorInfo:
        """
        Handle and classify errors.

        Gallery errors keep their own classification; anything else becomes
        a generic internal error so no exception detail leaks to clients.

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
            wrapped = GallerySystemError(
                message=str(error) or type(error).__name__,
                details={"original_type": type(error).__name__, **context},
                original_exception=error,
            )
            error_info = wrapped.get_error_info()

        self._track_error(error_info.code)
        return error_info

    def _track_error(self, error_code: str) -> None:
        """Track error occurrence for monitoring."""
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


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return error_handler
