"""Foundation layer: errors and configuration."""

from .config import AnycallSettings, clear_settings_cache, get_settings
from .errors import (
    AnycallError,
    ConfigurationError,
    CredentialNotFoundError,
    CustomAuthParseError,
    ErrorCode,
    ParseError,
    ResponseParseError,
    ResponseTooLargeError,
    ResponseTypeError,
    ToolError,
    classify_exception,
)

__all__ = [
    "AnycallSettings", "get_settings", "clear_settings_cache",
    "ErrorCode", "ToolError", "classify_exception",
    "AnycallError", "ConfigurationError", "ParseError", "CustomAuthParseError",
    "ResponseParseError", "ResponseTypeError", "CredentialNotFoundError", "ResponseTooLargeError",
]
