"""Error handling for anycall.

- ErrorCode: Standard error codes
- AnycallError and subclasses: raised by the dispatcher, optimizer and transport
- ToolError: Structured error rendered for agents
"""

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
    "ErrorCode", "ToolError", "classify_exception",
    "AnycallError", "ConfigurationError", "ParseError", "CustomAuthParseError",
    "ResponseParseError", "ResponseTypeError", "CredentialNotFoundError", "ResponseTooLargeError",
]
