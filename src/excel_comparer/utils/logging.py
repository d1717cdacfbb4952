"""Structured logging utilities for the Excel comparer.

This module provides:
- Request ID tracking using contextvars for correlation across a request
- Structured logging with consistent format and metadata
- Performance metrics logging for comparisons
- Progress tracking across the sheets of a workbook pair

Usage:
    from excel_comparer.utils.logging import get_logger, LogContext

    logger = get_logger(__name__)

    with LogContext(sheet="Sheet1"):
        logger.info("Comparing sheet", header_row=1)
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_extra_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "extra_context", default=None
)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return _request_id_var.get()


def set_request_id(request_id: str | None) -> None:
    """Set the request ID in context.

    Args:
        request_id: The request ID to set, or None to clear.
    """
    _request_id_var.set(request_id)


def get_extra_context() -> dict[str, Any]:
    """Get additional context from context vars."""
    ctx = _extra_context_var.get()
    return ctx if ctx is not None else {}


def set_extra_context(context: dict[str, Any]) -> None:
    """Set additional context in context vars."""
    _extra_context_var.set(context)


def clear_context() -> None:
    """Clear all context variables."""
    _request_id_var.set(None)
    _extra_context_var.set(None)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics of a comparison.

    Attributes:
        operation: Name of the operation being measured.
        start_time: When the operation started.
        end_time: When the operation ended.
        duration_seconds: Duration in seconds.
        sheets_compared: Number of sheet names compared.
        cells_compared: Number of cell positions scanned.
        differences_found: Number of cell differences recorded.
        cache_hit: Whether the result was served from the cache.
        custom_metrics: Additional custom metrics.
    """

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    sheets_compared: int = 0
    cells_compared: int = 0
    differences_found: int = 0
    cache_hit: bool = False
    custom_metrics: dict[str, Any] = field(default_factory=dict)

    def finish(self) -> None:
        """Mark the operation as complete and calculate duration."""
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging, omitting zero counters."""
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        if self.sheets_compared > 0:
            result["sheets_compared"] = self.sheets_compared
        if self.cells_compared > 0:
            result["cells_compared"] = self.cells_compared
        if self.differences_found > 0:
            result["differences_found"] = self.differences_found
        if self.cache_hit:
            result["cache_hit"] = True
        if self.custom_metrics:
            result["custom_metrics"] = self.custom_metrics
        return result


class StructuredLogFormatter(logging.Formatter):
    """Log formatter that prefixes records with context variables.

    Adds request_id and any extra context to log records when available.
    """

    def format(self, record: logging.LogRecord) -> str:
        prefix_parts = []
        request_id = get_request_id()
        if request_id:
            prefix_parts.append(f"request_id={request_id}")

        for key, value in get_extra_context().items():
            prefix_parts.append(f"{key}={value}")

        prefix = f"[{' '.join(prefix_parts)}] " if prefix_parts else ""

        original_msg = record.msg
        record.msg = f"{prefix}{original_msg}"
        result = super().format(record)
        record.msg = original_msg

        return result


class StructuredLogger:
    """Logger wrapper that renders keyword arguments as key=value pairs."""

    def __init__(self, name: str) -> None:
        """Initialize the structured logger.

        Args:
            name: Logger name (typically __name__ of the module).
        """
        self._logger = logging.getLogger(name)
        self._name = name

    @property
    def logger(self) -> logging.Logger:
        """Access the underlying Python logger."""
        return self._logger

    def _build_message(
        self,
        message: str,
        **kwargs: Any,
    ) -> str:
        if not kwargs:
            return message

        parts = [f"{k}={v}" for k, v in kwargs.items()]
        return f"{message} | {', '.join(parts)}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._build_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._build_message(message, **kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.error(self._build_message(message, **kwargs), exc_info=exc_info)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        """Log performance metrics.

        Args:
            metrics: Performance metrics to log.
        """
        self.info(
            f"Performance: {metrics.operation}",
            **metrics.to_dict(),
        )

    def log_progress(
        self,
        stage: str,
        current: int,
        total: int,
        details: str | None = None,
    ) -> None:
        """Log progress for multi-step operations.

        Args:
            stage: Current processing stage.
            current: Current progress count.
            total: Total items to process.
            details: Optional additional details.
        """
        percentage = (current / total * 100) if total > 0 else 0
        kwargs: dict[str, Any] = {
            "current": current,
            "total": total,
            "percentage": f"{percentage:.1f}%",
        }
        if details:
            kwargs["details"] = details
        self.debug(f"Progress: {stage}", **kwargs)

    def log_comparison_result(
        self,
        sheets_compared: int,
        sheets_with_differences: int,
        total_differences: int,
        header_row: int,
        active_sheet: str | None = None,
    ) -> None:
        """Log the outcome of a workbook comparison."""
        kwargs: dict[str, Any] = {
            "sheets_compared": sheets_compared,
            "sheets_with_differences": sheets_with_differences,
            "total_differences": total_differences,
            "header_row": header_row,
        }
        if active_sheet is not None:
            kwargs["active_sheet"] = active_sheet
        self.info("Comparison completed", **kwargs)


class LogContext:
    """Context manager for adding temporary context to logs.

    Usage:
        with LogContext(sheet="Sheet1"):
            logger.info("Diffing...")  # Will include sheet=Sheet1
    """

    def __init__(self, **kwargs: Any) -> None:
        self._new_context = kwargs
        self._old_context: dict[str, Any] = {}
        self._old_request_id: str | None = None

    def __enter__(self) -> "LogContext":
        self._old_context = get_extra_context().copy()
        self._old_request_id = get_request_id()

        new_context = dict(self._new_context)
        request_id = new_context.pop("request_id", None)
        if request_id is not None:
            set_request_id(request_id)

        merged = self._old_context.copy()
        merged.update(new_context)
        set_extra_context(merged)

        return self

    def __exit__(self, *args: Any) -> None:
        set_extra_context(self._old_context)
        set_request_id(self._old_request_id)


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Context manager for timing operations.

    Usage:
        with timed_operation(logger, "compare_workbooks") as metrics:
            metrics.sheets_compared = 3

    Args:
        logger: Logger to use for output.
        operation: Name of the operation.

    Yields:
        PerformanceMetrics instance for tracking.
    """
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    use_structured_formatter: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (int or string like "INFO").
        format_string: Custom format string (uses default if None).
        use_structured_formatter: Whether to use the structured formatter.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)

    formatter: logging.Formatter
    if use_structured_formatter:
        formatter = StructuredLogFormatter(format_string)
    else:
        formatter = logging.Formatter(format_string)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module.

    Example:
        logger = get_logger(__name__)
        logger.info("Comparing workbooks", sheets=3)
    """
    return StructuredLogger(name)


class ProgressTracker:
    """Helper for tracking and logging progress of multi-step operations.

    Usage:
        tracker = ProgressTracker(logger, "Comparing sheets", total=len(names))
        for name in names:
            compare(name)
            tracker.update(details=name)
        tracker.complete()
    """

    def __init__(
        self,
        logger: StructuredLogger,
        stage: str,
        total: int,
        log_interval: int = 1,
    ) -> None:
        self._logger = logger
        self._stage = stage
        self._total = total
        self._current = 0
        self._log_interval = log_interval
        self._start_time = time.time()

    @property
    def current(self) -> int:
        return self._current

    def update(
        self,
        increment: int = 1,
        details: str | None = None,
    ) -> None:
        """Update progress.

        Args:
            increment: Number of items completed.
            details: Optional details about current item.
        """
        self._current += increment
        if self._current % self._log_interval == 0 or self._current == self._total:
            self._logger.log_progress(
                self._stage,
                self._current,
                self._total,
                details,
            )

    def complete(self) -> float:
        """Mark progress as complete.

        Returns:
            Total duration in seconds.
        """
        duration = time.time() - self._start_time
        self._logger.debug(
            f"Completed: {self._stage}",
            total_items=self._total,
            duration_seconds=f"{duration:.2f}",
        )
        return duration
