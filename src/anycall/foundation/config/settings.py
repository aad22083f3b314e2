"""Environment-based configuration using pydantic-settings.

Example:
    >>> from anycall.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.http.timeout
    30.0
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # ANYCALL_HTTP_TIMEOUT=60
    # ANYCALL_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import ByteSize, Field, PositiveFloat, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="ANYCALL_LOG_", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class HttpSettings(BaseSettings):
    """Defaults for the httpx transport."""

    model_config = SettingsConfigDict(env_prefix="ANYCALL_HTTP_", extra="ignore")

    timeout: PositiveFloat = Field(default=30.0, description="Default request timeout in seconds")
    max_response_size: ByteSize = Field(
        default=ByteSize(10 * 1024 * 1024),
        description="Max response size (e.g. '10MB')",
    )
    verify_ssl: bool = True
    follow_redirects: bool = True
    user_agent: str = "anycall/0.1"

    @computed_field
    @property
    def max_response_size_bytes(self) -> int:
        return int(self.max_response_size)


class AnycallSettings(BaseSettings):
    """Root settings, loaded from ANYCALL_* variables and an optional .env file.

    Example environment variables:
        ANYCALL_DEBUG=true
        ANYCALL_LOG_FORMAT=json
        ANYCALL_HTTP_TIMEOUT=60
        ANYCALL_HTTP__VERIFY_SSL=false
    """

    model_config = SettingsConfigDict(
        env_prefix="ANYCALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = False
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)


@lru_cache(maxsize=1)
def get_settings() -> AnycallSettings:
    """Get the process-wide settings instance (cached)."""
    return AnycallSettings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
