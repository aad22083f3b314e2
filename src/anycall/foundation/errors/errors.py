"""Error codes and exceptions for request dispatch and response shaping.

Exceptions carry the item index of the call that produced them so batch
callers can point at the offending item. ToolError is the structured form
rendered back to the agent.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Machine-readable failure classes."""
    INVALID_PARAMS = "INVALID_PARAMS"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    CREDENTIALS_MISSING = "CREDENTIALS_MISSING"
    RESPONSE_TOO_LARGE = "RESPONSE_TOO_LARGE"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UNKNOWN = "UNKNOWN"


_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "connect": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "credential": ErrorCode.CREDENTIALS_MISSING,
    "forbidden": ErrorCode.PERMISSION_DENIED,
    "unauthorized": ErrorCode.PERMISSION_DENIED,
    "json": ErrorCode.PARSE_ERROR,
    "decode": ErrorCode.PARSE_ERROR,
    "validation": ErrorCode.INVALID_PARAMS,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES)

_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({ErrorCode.TIMEOUT, ErrorCode.NETWORK_ERROR})


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map an exception to an error code. Own errors keep their code."""
    if isinstance(exc, AnycallError):
        return exc.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


class ToolError(BaseModel):
    """Structured error returned to the agent instead of a response body.

    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        code: Error classification
        item_index: Index of the input item being processed, if known
        recoverable: Whether the same call might succeed on retry
        details: Optional verbose info (stack trace)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Tool Error",
            "examples": [{
                "tool_name": "get_weather",
                "message": "Invalid Custom Auth JSON",
                "code": "PARSE_ERROR",
                "item_index": 0,
                "recoverable": False,
            }],
        },
    )

    tool_name: Annotated[str, Field(min_length=1)]
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode = ErrorCode.UNKNOWN
    item_index: int | None = None
    recoverable: bool = False
    details: str | None = Field(default=None, repr=False)

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return (str(v) or type(v).__name__) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_retryable(self) -> bool:
        return self.code in _RETRYABLE_CODES

    @classmethod
    def from_exception(cls, tool_name: str, exc: Exception, *, include_trace: bool = False) -> Self:
        """Create from any exception, keeping code and item index of own errors."""
        code = classify_exception(exc)
        return cls(
            tool_name=tool_name,
            message=exc,  # type: ignore[arg-type]
            code=code,
            item_index=getattr(exc, "item_index", None),
            recoverable=code in _RETRYABLE_CODES,
            details="".join(traceback.format_exception(exc)) if include_trace else None,
        )

    def render(self) -> str:
        """Format error for LLM consumption."""
        where = f" (item {self.item_index})" if self.item_index is not None else ""
        parts = [f"**Tool Error ({self.tool_name}){where}:** {self.message} [{self.code}]"]
        if self.recoverable:
            parts.append("\n_This error may be recoverable - consider retrying._")
        if self.details:
            parts.append(f"\n\nDetails:\n```\n{self.details}\n```")
        return "".join(parts)

    __str__ = render


class AnycallError(Exception):
    """Base for errors raised by the dispatcher and optimizer."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, item_index: int | None = None, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.item_index = item_index
        if code is not None:
            self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, item_index={self.item_index})"


class ConfigurationError(AnycallError):
    """Call configuration or input shape does not fit the selected strategy."""

    code = ErrorCode.CONFIGURATION_ERROR


class ParseError(AnycallError, ValueError):
    """A JSON document could not be parsed."""

    code = ErrorCode.PARSE_ERROR


class CustomAuthParseError(ParseError, ConfigurationError):
    """The custom auth credential does not hold a JSON object."""

    code = ErrorCode.PARSE_ERROR


class ResponseParseError(ParseError):
    """The response body is not valid JSON."""


class ResponseTypeError(ConfigurationError, TypeError):
    """The response value has the wrong type for the selected optimizer."""


class CredentialNotFoundError(AnycallError, LookupError):
    code = ErrorCode.CREDENTIALS_MISSING


class ResponseTooLargeError(AnycallError):
    code = ErrorCode.RESPONSE_TOO_LARGE
