"""Structured logging with bound context.

Human-readable console output for development, JSON Lines for production.

Quick Start:
    >>> from anycall.observability import configure_logging, get_logger
    >>> configure_logging(format="console", level="DEBUG")
    >>> log = get_logger("anycall.auth", item_index=0)
    >>> log.debug("strategy resolved", strategy="httpHeaderAuth")

Credentials never go through the logger; callers log names and kinds only.
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

import orjson

if TYPE_CHECKING:
    from types import TracebackType

    from anycall.foundation.config import AnycallSettings

JsonDict = dict[str, Any]

# Context var for scoped context (persists across awaits)
_log_context: ContextVar[JsonDict] = ContextVar("anycall_log_context", default={})


@dataclass(slots=True)
class LogEntry:
    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Console output. Format: timestamp [level] event key=value ..."""

    output: TextIO = field(default_factory=lambda: sys.stderr)

    def render(self, entry: LogEntry) -> None:
        fields = " ".join(f"{k}={v!r}" for k, v in sorted(entry.context.items()))
        print(f"{entry.ts_human} [{entry.level}] {entry.event} {fields}".rstrip(), file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        timestamp = datetime.fromtimestamp(entry.timestamp, tz=UTC).isoformat()
        line = orjson.dumps(
            {"timestamp": timestamp, "level": entry.level, "event": entry.event, **entry.context},
            option=orjson.OPT_NON_STR_KEYS,
            default=str,
        )
        print(line.decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer for testing."""

    def render(self, entry: LogEntry) -> None:
        pass


@dataclass(slots=True)
class BoundLogger:
    """Logger with bound context. bind() returns a new logger.

    Example:
        >>> log = BoundLogger(context={"tool": "get_weather"})
        >>> log.info("request dispatched", status=200)
        # => 10:30:45.123 [info] request dispatched status=200 tool='get_weather'
    """

    context: JsonDict = field(default_factory=dict)

    def bind(self, **kw: Any) -> BoundLogger:
        return BoundLogger(context={**self.context, **kw})

    def _log(self, level: int, event: str, **kw: Any) -> None:
        if level < _default_level.get():
            return
        merged = {**_log_context.get(), **self.context, **kw}
        _get_renderer().render(LogEntry(time.time(), logging.getLevelName(level).lower(), event, merged))

    def debug(self, event: str, **kw: Any) -> None: self._log(logging.DEBUG, event, **kw)
    def info(self, event: str, **kw: Any) -> None: self._log(logging.INFO, event, **kw)
    def warning(self, event: str, **kw: Any) -> None: self._log(logging.WARNING, event, **kw)
    def error(self, event: str, **kw: Any) -> None: self._log(logging.ERROR, event, **kw)


_renderer: ContextVar[LogRenderer | None] = ContextVar("anycall_log_renderer", default=None)
_default_level: ContextVar[int] = ContextVar("anycall_log_level", default=logging.INFO)


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "INFO",
    *,
    output: TextIO | None = None,
) -> LogRenderer:
    """Configure global structured logging. Format: "console", "json" or "none"."""
    _default_level.set(getattr(logging, level.upper(), logging.INFO))
    match format:
        case "console": renderer: LogRenderer = ConsoleRenderer(output=output or sys.stderr)
        case "json": renderer = JsonRenderer(output=output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _renderer.set(renderer)
    return renderer


def configure_logging_from_settings(settings: AnycallSettings | None = None) -> LogRenderer:
    """Configure logging from ANYCALL_LOG_* settings; ANYCALL_DEBUG forces DEBUG."""
    from anycall.foundation.config import get_settings
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.logging.level
    return configure_logging(format=settings.logging.format, level=level)


def get_logger(name: str | None = None, **initial_context: Any) -> BoundLogger:
    """Get a structured logger. Name is added to context as 'logger'."""
    ctx = {**initial_context, **({"logger": name} if name else {})}
    return BoundLogger(context=ctx)


def _get_renderer() -> LogRenderer:
    if (renderer := _renderer.get()) is None:
        _renderer.set(renderer := ConsoleRenderer())
    return renderer


class log_context:
    """Context manager adding key-value pairs to every log entry within the scope."""

    __slots__ = ("_ctx", "_token")

    def __init__(self, **kw: Any) -> None:
        self._ctx: JsonDict = dict(kw)
        self._token: object | None = None

    def __enter__(self) -> log_context:
        self._token = _log_context.set({**_log_context.get(), **self._ctx})
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        if self._token is not None:
            _log_context.reset(self._token)  # type: ignore[arg-type]
