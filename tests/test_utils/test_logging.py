"""Tests for the structured logging utilities."""

import logging
from unittest.mock import MagicMock, patch

from excel_comparer.utils.logging import (
    LogContext,
    PerformanceMetrics,
    ProgressTracker,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_extra_context,
    get_logger,
    get_request_id,
    set_extra_context,
    set_request_id,
    timed_operation,
)


def _record(msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestContextVariables:
    """Tests for context variable management."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_request_id_default_none(self) -> None:
        assert get_request_id() is None

    def test_set_and_get_request_id(self) -> None:
        set_request_id("req-123")
        assert get_request_id() == "req-123"

    def test_extra_context_default_empty(self) -> None:
        assert get_extra_context() == {}

    def test_clear_context(self) -> None:
        """Clear context should reset all context variables."""
        set_request_id("req-123")
        set_extra_context({"sheet": "Sheet1"})

        clear_context()

        assert get_request_id() is None
        assert get_extra_context() == {}


class TestPerformanceMetrics:
    """Tests for PerformanceMetrics class."""

    def test_initialization(self) -> None:
        metrics = PerformanceMetrics(operation="compare")
        assert metrics.duration_seconds == 0.0
        assert metrics.sheets_compared == 0
        assert metrics.cells_compared == 0
        assert metrics.differences_found == 0
        assert metrics.cache_hit is False

    def test_finish_sets_end_time(self) -> None:
        metrics = PerformanceMetrics(operation="compare")
        metrics.finish()
        assert metrics.end_time is not None
        assert metrics.duration_seconds >= 0

    def test_to_dict_with_all_fields(self) -> None:
        metrics = PerformanceMetrics(operation="compare")
        metrics.duration_seconds = 2.0
        metrics.sheets_compared = 3
        metrics.cells_compared = 120
        metrics.differences_found = 7
        metrics.cache_hit = True
        metrics.custom_metrics = {"header_row": 2}

        result = metrics.to_dict()

        assert result == {
            "operation": "compare",
            "duration_seconds": 2.0,
            "sheets_compared": 3,
            "cells_compared": 120,
            "differences_found": 7,
            "cache_hit": True,
            "custom_metrics": {"header_row": 2},
        }

    def test_to_dict_excludes_zero_values(self) -> None:
        result = PerformanceMetrics(operation="compare").to_dict()
        assert set(result) == {"operation", "duration_seconds"}


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        assert isinstance(get_logger(__name__), StructuredLogger)
        assert isinstance(self.logger.logger, logging.Logger)

    def test_build_message(self) -> None:
        assert self.logger._build_message("Plain") == "Plain"
        msg = self.logger._build_message("Sheet compared", sheet="S", differences=2)
        assert msg == "Sheet compared | sheet=S, differences=2"

    @patch.object(logging.Logger, "info")
    def test_info_logging(self, mock_info: MagicMock) -> None:
        self.logger.info("Test info", status="ok")
        call_args = mock_info.call_args[0][0]
        assert "Test info" in call_args
        assert "status=ok" in call_args

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        self.logger.warning("Test warning")
        mock_warning.assert_called_once()

    @patch.object(logging.Logger, "exception")
    def test_exception_logging(self, mock_exception: MagicMock) -> None:
        self.logger.exception("Test exception")
        mock_exception.assert_called_once()

    @patch.object(logging.Logger, "info")
    def test_log_performance(self, mock_info: MagicMock) -> None:
        metrics = PerformanceMetrics(operation="compare_workbooks")
        metrics.differences_found = 4
        self.logger.log_performance(metrics)
        call_args = mock_info.call_args[0][0]
        assert "Performance: compare_workbooks" in call_args
        assert "differences_found=4" in call_args

    @patch.object(logging.Logger, "debug")
    def test_log_progress(self, mock_debug: MagicMock) -> None:
        self.logger.log_progress("Comparing sheets", current=1, total=4, details="S")
        call_args = mock_debug.call_args[0][0]
        assert "Progress: Comparing sheets" in call_args
        assert "25.0%" in call_args
        assert "details=S" in call_args

    @patch.object(logging.Logger, "info")
    def test_log_comparison_result(self, mock_info: MagicMock) -> None:
        self.logger.log_comparison_result(
            sheets_compared=3,
            sheets_with_differences=1,
            total_differences=5,
            header_row=1,
            active_sheet="Sheet1",
        )
        call_args = mock_info.call_args[0][0]
        assert "Comparison completed" in call_args
        assert "total_differences=5" in call_args
        assert "active_sheet=Sheet1" in call_args

    @patch.object(logging.Logger, "info")
    def test_log_comparison_result_without_active_sheet(
        self, mock_info: MagicMock
    ) -> None:
        self.logger.log_comparison_result(0, 0, 0, 1)
        assert "active_sheet" not in mock_info.call_args[0][0]


class TestLogContext:
    """Tests for LogContext context manager."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_context_restores_values(self) -> None:
        set_extra_context({"original": "value"})

        with LogContext(sheet="Sheet1"):
            assert get_extra_context() == {"original": "value", "sheet": "Sheet1"}

        assert get_extra_context() == {"original": "value"}

    def test_context_with_request_id(self) -> None:
        with LogContext(request_id="req-456", sheet="S"):
            assert get_request_id() == "req-456"
            assert "request_id" not in get_extra_context()

        assert get_request_id() is None

    def test_nested_contexts(self) -> None:
        with LogContext(sheet="outer"):
            with LogContext(sheet="inner"):
                assert get_extra_context()["sheet"] == "inner"
            assert get_extra_context()["sheet"] == "outer"


class TestTimedOperation:
    """Tests for timed_operation context manager."""

    @patch.object(StructuredLogger, "log_performance")
    def test_timed_operation_logs_metrics(self, mock_log: MagicMock) -> None:
        with timed_operation(get_logger("test"), "compare") as metrics:
            metrics.sheets_compared = 2

        logged_metrics = mock_log.call_args[0][0]
        assert logged_metrics.operation == "compare"
        assert logged_metrics.sheets_compared == 2
        assert logged_metrics.duration_seconds >= 0

    @patch.object(StructuredLogger, "log_performance")
    def test_metrics_logged_when_block_raises(self, mock_log: MagicMock) -> None:
        try:
            with timed_operation(get_logger("test"), "compare"):
                raise ValueError("boom")
        except ValueError:
            pass
        mock_log.assert_called_once()


class TestProgressTracker:
    """Tests for ProgressTracker class."""

    @patch.object(StructuredLogger, "log_progress")
    def test_update_with_interval(self, mock_log: MagicMock) -> None:
        tracker = ProgressTracker(
            get_logger("test"), "Comparing", total=10, log_interval=5
        )
        for _ in range(4):
            tracker.update()
        assert mock_log.call_count == 0
        tracker.update()
        assert mock_log.call_count == 1
        assert tracker.current == 5

    @patch.object(StructuredLogger, "log_progress")
    def test_last_item_always_logged(self, mock_log: MagicMock) -> None:
        tracker = ProgressTracker(
            get_logger("test"), "Comparing", total=3, log_interval=5
        )
        for _ in range(3):
            tracker.update()
        mock_log.assert_called_once()

    @patch.object(StructuredLogger, "debug")
    def test_complete_returns_duration(self, mock_debug: MagicMock) -> None:
        tracker = ProgressTracker(get_logger("test"), "Comparing", total=0)
        assert tracker.complete() >= 0
        mock_debug.assert_called_once()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_with_string_level(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_structured_formatter(self) -> None:
        configure_logging(level=logging.WARNING)
        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert isinstance(root_logger.handlers[0].formatter, StructuredLogFormatter)

    def test_configure_without_structured_formatter(self) -> None:
        configure_logging(use_structured_formatter=False)
        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, StructuredLogFormatter)


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter class."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_format_without_context(self) -> None:
        result = StructuredLogFormatter("%(message)s").format(_record())
        assert result == "Test message"

    def test_format_with_request_id_and_extra_context(self) -> None:
        set_request_id("req-123")
        set_extra_context({"sheet": "Sheet1"})

        result = StructuredLogFormatter("%(message)s").format(_record())

        assert result == "[request_id=req-123 sheet=Sheet1] Test message"

    def test_record_message_restored(self) -> None:
        set_request_id("req-123")
        record = _record()
        StructuredLogFormatter("%(message)s").format(record)
        assert record.msg == "Test message"
