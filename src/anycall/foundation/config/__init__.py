"""Configuration management using pydantic-settings."""

from .settings import AnycallSettings, HttpSettings, LoggingSettings, clear_settings_cache, get_settings

__all__ = ["AnycallSettings", "HttpSettings", "LoggingSettings", "clear_settings_cache", "get_settings"]
