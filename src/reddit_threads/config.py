"""Configuration via pydantic-settings (reads from .env or environment variables)."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root = two levels up from this file (src/reddit_threads/config.py)
_ROOT = Path(__file__).parent.parent.parent

TOOL_VERSION = "1.0.0"

# Reddit refuses more than this many ids per /api/morechildren call
MAX_BATCH_SIZE = 100


class FetchConfig(BaseSettings):
    """Thread acquisition parameters."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="FETCH_",
        populate_by_name=True,
    )

    user_agent: str = Field(
        default=f"reddit-threads/{TOOL_VERSION}",
        alias="REDDIT_USER_AGENT",
    )
    max_retries: int = Field(default=3, ge=1)
    # Upper bound on free 429 retries so a permanently throttled call still ends
    max_rate_limit_waits: int = Field(default=10, ge=0)
    request_timeout: float = 15.0  # seconds per HTTP request
    batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1)
    batch_delay: float = 1.0  # seconds between more-children batches
    max_more_batches: int = Field(default=-1, ge=-1)
    default_sort: str = "confidence"

    @field_validator("batch_size")
    @classmethod
    def _clamp_batch_size(cls, value: int) -> int:
        return min(value, MAX_BATCH_SIZE)


class ServerConfig(BaseSettings):
    """HTTP service parameters."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="SERVER_",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    max_concurrency: int = Field(default=20, ge=1)
    fetch_timeout: float = 30.0  # seconds per thread fetch
    comment_limit: int = Field(default=-1, ge=-1)
    max_more_batches: int = Field(default=-1, ge=-1)


class LogConfig(BaseSettings):
    """Logging parameters."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


# Singleton instances (import these in application code)
fetch_config = FetchConfig()
server_config = ServerConfig()
log_config = LogConfig()
