"""Utilities package for the Excel comparer.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
- Column labelling helpers (columns.py)
"""

from excel_comparer.utils.columns import cell_address, column_letter
from excel_comparer.utils.exceptions import (
    ComparerError,
    ErrorCode,
    FileError,
    FileTooLargeError,
    HTTPStatusMixin,
    UnsupportedFormatError,
    ValidationError,
    WorkbookNotFoundError,
    WorkbookReadError,
)
from excel_comparer.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Columns
    "cell_address",
    "column_letter",
    # Exceptions
    "ComparerError",
    "ErrorCode",
    "FileError",
    "FileTooLargeError",
    "HTTPStatusMixin",
    "UnsupportedFormatError",
    "ValidationError",
    "WorkbookNotFoundError",
    "WorkbookReadError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
