"""Configuration management for the Excel comparer.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
EXC_ prefix, or via a .env file in the project root.

Environment Variables:
    EXC_DEFAULT_HEADER_ROW: Header row used when a request omits it (default: 1)
    EXC_MAX_FILE_SIZE_MB: Maximum workbook upload size in MB (default: 10)
    EXC_CACHE_MAX_ENTRIES: Comparison results kept in memory, 0 disables (default: 32)
    EXC_LOG_LEVEL: Logging level (default: INFO)
    EXC_DEBUG: Enable debug mode (default: false)
    EXC_CORS_ORIGINS: Comma-separated CORS origins (default: *)
    EXC_SERVER_HOST: Server bind host (default: 0.0.0.0)
    EXC_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        EXC_DEFAULT_HEADER_ROW=2
        EXC_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="EXC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Comparison Settings
    # =========================================================================

    default_header_row: int = 1
    """1-based row holding column headers; rows up to it are not compared."""

    cache_max_entries: int = 32
    """Number of comparison results memoized in memory. 0 disables caching."""

    # =========================================================================
    # Upload Settings
    # =========================================================================

    max_file_size_mb: int = 10
    """Maximum workbook upload size in megabytes."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging and error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("default_header_row")
    @classmethod
    def clamp_header_row(cls, v: int) -> int:
        """Header rows are 1-based; lower values mean the first row."""
        return max(1, v)

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"cache_max_entries must be at least 0, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary suitable for logging."""
        return {
            "default_header_row": self.default_header_row,
            "cache_max_entries": self.cache_max_entries,
            "max_file_size_mb": self.max_file_size_mb,
            "log_level": self.log_level,
            "debug": self.debug,
            "cors_origins": self.cors_origins,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Log warnings and a configuration summary on application startup.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.cors_origins == "*" and not s.debug:
        logger.warning(
            "CORS is configured to allow all origins (*). "
            "Consider restricting this in production."
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"default_header_row={s.default_header_row}, "
        f"max_file_size_mb={s.max_file_size_mb}, "
        f"cache_max_entries={s.cache_max_entries}"
    )


settings = Settings()
