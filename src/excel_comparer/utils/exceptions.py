"""Centralized exception classes for the Excel comparer.

The comparison core never raises for irregular spreadsheet content; these
exceptions belong to the layers around it (workbook loading, upload
validation and the HTTP service). Each carries an error code, an HTTP
status and structured details so the API can render consistent error bodies.

Exception Hierarchy:
    ComparerError (base)
    ├── FileError
    │   ├── WorkbookNotFoundError
    │   ├── FileTooLargeError
    │   ├── UnsupportedFormatError
    │   └── WorkbookReadError
    └── ValidationError

Error Codes:
    E1xxx: File/workbook errors
    E2xxx: Request validation errors
    E9xxx: Internal/unexpected errors
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application."""

    # File errors (E1xxx)
    FILE_NOT_FOUND = "E1001"
    FILE_TOO_LARGE = "E1002"
    UNSUPPORTED_FORMAT = "E1003"
    FILE_READ_ERROR = "E1004"

    # Validation errors (E2xxx)
    INVALID_PARAMETER = "E2001"
    MISSING_FILE = "E2002"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses should set the `http_status` class attribute.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception."""
        return self.http_status


class ComparerError(Exception, HTTPStatusMixin):
    """Base exception for all Excel comparer errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses."""
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(ComparerError):
    """Base class for file-related errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path or upload name of the problematic file.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class WorkbookNotFoundError(FileError):
    """Raised when a workbook path does not exist."""

    http_status: int = 404

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f"Workbook not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class FileTooLargeError(FileError):
    """Raised when an uploaded workbook exceeds the maximum allowed size."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual file size in bytes.
            max_size: Maximum allowed size in bytes.
            file_path: Optional file name.
            details: Additional details.
        """
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class UnsupportedFormatError(FileError):
    """Raised when an upload is not a supported spreadsheet format."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        detected_mime: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if detected_mime:
            details["detected_mime_type"] = detected_mime
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_FORMAT,
            file_path=file_path,
            details=details,
        )
        self.detected_mime = detected_mime


class WorkbookReadError(FileError):
    """Raised when workbook content cannot be decoded."""

    http_status: int = 422

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        cause: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the underlying decoder failure.

        Args:
            message: Error message.
            file_path: Optional file path or upload name.
            cause: Description of the underlying decoding error.
            details: Additional details.
        """
        details = details or {}
        if cause:
            details["cause"] = cause
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_READ_ERROR,
            file_path=file_path,
            details=details,
        )


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================


class ValidationError(ComparerError):
    """General validation error for request input."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: ErrorCode = ErrorCode.INVALID_PARAMETER,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with validation details.

        Args:
            message: Main error message.
            field: Field that failed validation.
            error_code: Error code.
            details: Additional details.
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
        self.field = field
