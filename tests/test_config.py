"""Tests for configuration management module."""

import logging
import os
from unittest.mock import patch

import pytest

from excel_comparer.config import Settings, validate_settings_on_startup


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        # Comparison defaults
        assert settings.default_header_row == 1
        assert settings.cache_max_entries == 32

        # Upload defaults
        assert settings.max_file_size_mb == 10

        # Logging defaults
        assert settings.log_level == "INFO"
        assert settings.debug is False

        # Server defaults
        assert settings.cors_origins == "*"
        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000

    def test_environment_variable_prefix(self) -> None:
        """Environment variables use the EXC_ prefix."""
        env_vars = {
            "EXC_DEFAULT_HEADER_ROW": "3",
            "EXC_MAX_FILE_SIZE_MB": "25",
            "EXC_LOG_LEVEL": "DEBUG",
            "DEFAULT_HEADER_ROW": "9",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings(_env_file=None)

        assert settings.default_header_row == 3
        assert settings.max_file_size_mb == 25
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(("given", "expected"), [(0, 1), (-5, 1), (4, 4)])
    def test_header_row_is_clamped(self, given: int, expected: int) -> None:
        settings = Settings(_env_file=None, default_header_row=given)
        assert settings.default_header_row == expected

    def test_cache_can_be_disabled(self) -> None:
        assert Settings(_env_file=None, cache_max_entries=0).cache_max_entries == 0

    def test_negative_cache_size_rejected(self) -> None:
        with pytest.raises(ValueError, match="cache_max_entries"):
            Settings(_env_file=None, cache_max_entries=-1)

    def test_log_level_normalized(self) -> None:
        settings = Settings(_env_file=None, log_level="warning")
        assert settings.log_level == "WARNING"
        assert settings.log_level_int == logging.WARNING

    def test_invalid_log_level_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            Settings(_env_file=None, log_level="LOUD")

    @pytest.mark.parametrize("size", [0, 501])
    def test_file_size_bounds(self, size: int) -> None:
        with pytest.raises(ValueError, match="max_file_size_mb"):
            Settings(_env_file=None, max_file_size_mb=size)

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_bounds(self, port: int) -> None:
        with pytest.raises(ValueError, match="server_port"):
            Settings(_env_file=None, server_port=port)

    def test_max_file_size_bytes(self) -> None:
        settings = Settings(_env_file=None, max_file_size_mb=2)
        assert settings.max_file_size_bytes == 2 * 1024 * 1024

    def test_cors_origins_list(self) -> None:
        assert Settings(_env_file=None).cors_origins_list == ["*"]
        settings = Settings(
            _env_file=None, cors_origins="http://a.test, http://b.test"
        )
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_to_safe_dict(self) -> None:
        safe = Settings(_env_file=None).to_safe_dict()
        assert safe["default_header_row"] == 1
        assert safe["cache_max_entries"] == 32
        assert set(safe) == {
            "default_header_row",
            "cache_max_entries",
            "max_file_size_mb",
            "log_level",
            "debug",
            "cors_origins",
            "server_host",
            "server_port",
        }


class TestValidateSettingsOnStartup:
    """Tests for validate_settings_on_startup."""

    def test_warns_on_permissive_cors(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="excel_comparer.config")

        validate_settings_on_startup(Settings(_env_file=None))

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("CORS" in r.getMessage() for r in warnings)
        assert any("Configuration loaded" in r.getMessage() for r in caplog.records)

    def test_no_cors_warning_when_restricted(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="excel_comparer.config")

        validate_settings_on_startup(
            Settings(_env_file=None, cors_origins="http://a.test")
        )

        assert not [r for r in caplog.records if r.levelno == logging.WARNING]
