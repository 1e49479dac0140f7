"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Bookmark limits are exposed through a provider so they can change between
requests without restarting the process.
"""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_log_settings() -> "LogSettings":
    return LogSettings()


def _build_bookmark_settings() -> "BookmarkSettings":
    return BookmarkSettings()


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10_485_760,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class BookmarkSettings(BaseSettings):
    """Bookmark admission policy configuration."""

    max_per_day: int = Field(
        20,
        description="Maximum bookmarks a user may create per rate limit window",
    )
    max_per_user: int = Field(
        2000,
        description="Maximum total bookmarks a user may own",
    )
    rate_limit_enabled: bool = Field(
        True,
        description="Enable the per-user creation rate limit",
    )
    rate_limit_window_seconds: int = Field(
        86_400,
        description="Rate limit window size in seconds (default: one UTC day)",
        ge=1,
    )
    base_url: str = Field(
        "http://localhost:8000",
        description="Public base URL used to link users to their bookmark list",
    )
    name_max_length: int = Field(
        100,
        description="Maximum length of the optional bookmark name",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="BOOKMARK_",
        case_sensitive=False,
    )

    @property
    def user_bookmarks_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/my/activity/bookmarks"


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    bookmarks: BookmarkSettings = Field(default_factory=_build_bookmark_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


@dataclass(frozen=True)
class BookmarkLimits:
    """Snapshot of the dynamic limits applied to a single request.

    Attributes:
        max_per_day: Creations allowed per user per rate limit window.
        max_per_user: Total bookmarks a user may own.
    """

    max_per_day: int
    max_per_user: int


class AbstractLimitsProvider(ABC):
    """Source of the current bookmark limits."""

    @abstractmethod
    def current(self) -> BookmarkLimits:
        """Return the limits to apply to the request being handled."""
        raise NotImplementedError


class StaticLimitsProvider(AbstractLimitsProvider):
    """In-process limits that can be swapped at runtime (admin/tests)."""

    def __init__(self, *, max_per_day: int, max_per_user: int) -> None:
        self._lock = threading.Lock()
        self._limits = BookmarkLimits(max_per_day=max_per_day, max_per_user=max_per_user)

    def current(self) -> BookmarkLimits:
        with self._lock:
            return self._limits

    def update(
        self,
        *,
        max_per_day: int | None = None,
        max_per_user: int | None = None,
    ) -> BookmarkLimits:
        """Replace one or both limits; unspecified values are kept."""
        with self._lock:
            self._limits = BookmarkLimits(
                max_per_day=self._limits.max_per_day if max_per_day is None else max_per_day,
                max_per_user=self._limits.max_per_user if max_per_user is None else max_per_user,
            )
            return self._limits


class EnvironmentLimitsProvider(AbstractLimitsProvider):
    """Re-read BOOKMARK_* environment variables on every call."""

    def current(self) -> BookmarkLimits:
        fresh = BookmarkSettings()
        return BookmarkLimits(
            max_per_day=fresh.max_per_day,
            max_per_user=fresh.max_per_user,
        )


# Global settings instance - composed from domain-specific settings
settings = Settings()
