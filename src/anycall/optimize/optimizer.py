"""Response optimizer: shape a raw HTTP response into a bounded string.

``configure_response_optimizer`` reads its configuration once and returns a
function applied to each raw response:

- ``None`` (optimization off): strings unchanged, everything else pretty JSON
- html: inner HTML / text of every element matching a CSS selector, as a JSON array
- text: truncation to ``max_length`` characters
- json: optional unwrapping via ``data_field`` then field projection

Example:
    >>> optimize = configure_response_optimizer(JsonOptimizerConfig(fields_to_include="selected", fields="id"))
    >>> optimize('[{"id": 1, "name": "a"}]')
    '[\\n  {\\n    "id": 1\\n  }\\n]'
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any, TypeAlias

import orjson
from bs4 import BeautifulSoup

from anycall.foundation.errors import ConfigurationError, ResponseParseError, ResponseTypeError
from anycall.observability import get_logger

from .config import HtmlOptimizerConfig, JsonOptimizerConfig, OptimizerConfig, TextOptimizerConfig
from .paths import MISSING, get_path, set_path, unset_path
from .text import html_to_text

ResponseOptimizer: TypeAlias = Callable[[Any], str]

log = get_logger("anycall.optimize")


_INT64_MIN, _UINT64_MAX = -(2**63), 2**64 - 1
_DUMP_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS


def _widen_ints(value: Any) -> Any:
    """Replace integers orjson cannot encode with floats, or strings past float range."""
    match value:
        case bool():
            return value
        case int() if not _INT64_MIN <= value <= _UINT64_MAX:
            try:
                return float(value)
            except OverflowError:
                return str(value)
        case dict():
            return {k: _widen_ints(v) for k, v in value.items()}
        case list() | tuple():
            return [_widen_ints(v) for v in value]
    return value


def to_pretty_json(value: Any) -> str:
    """Two-space indented JSON; unknown types fall back to str()."""
    try:
        return orjson.dumps(value, option=_DUMP_OPTIONS, default=str).decode()
    except TypeError:
        return orjson.dumps(_widen_ints(value), option=_DUMP_OPTIONS, default=str).decode()


def serialize_response(response: Any) -> str:
    """Serializer used when optimization is off."""
    if isinstance(response, str):
        return response
    if isinstance(response, (bytes, bytearray)):
        return response.decode("utf-8", errors="replace")
    if response is None or isinstance(response, (dict, list, tuple, bool, int, float)):
        return to_pretty_json(response)
    return str(response)


def configure_response_optimizer(config: OptimizerConfig | None, *, item_index: int = 0) -> ResponseOptimizer:
    """Build the optimizer for ``config``.

    Raises (from the returned function):
        ResponseTypeError: html/text optimizers received a non-string response.
        ResponseParseError: The json optimizer received malformed JSON text.
        ConfigurationError: The json optimizer received a scalar, or the
            CSS selector is invalid.
    """
    match config:
        case None:
            return serialize_response
        case HtmlOptimizerConfig():
            optimize = _html_optimizer(config, item_index)
        case TextOptimizerConfig():
            optimize = _text_optimizer(config, item_index)
        case JsonOptimizerConfig():
            optimize = _json_optimizer(config, item_index)
        case _:
            raise ConfigurationError(f"Unsupported response optimizer: {config!r}", item_index=item_index)

    kind = config.kind

    def run(response: Any) -> str:
        output = optimize(response)
        log.debug("response optimized", kind=kind, item_index=item_index, chars=len(output))
        return output

    return run


def _require_string(response: Any, item_index: int) -> str:
    if not isinstance(response, str):
        raise ResponseTypeError(
            f"The response type must be a string. Received: {type(response).__name__}",
            item_index=item_index,
        )
    return response


# ─────────────────────────────────────────────────────────────────────────────
# html
# ─────────────────────────────────────────────────────────────────────────────

def _normalize_whitespace(value: str) -> str:
    return " ".join(value.strip().replace("\r", "").replace("\n", "").split())


def _html_optimizer(config: HtmlOptimizerConfig, item_index: int) -> ResponseOptimizer:
    selector = config.css_selector
    only_content = config.only_content
    omit = config.elements_to_omit

    def optimize(response: Any) -> str:
        soup = BeautifulSoup(_require_string(response, item_index), "html.parser")
        try:
            elements = soup.select(selector)
        except Exception as e:
            raise ConfigurationError(f"Invalid CSS selector '{selector}': {e}", item_index=item_index) from e

        values: list[str] = []
        for element in elements:
            value = element.decode_contents() or ""
            if only_content:
                value = html_to_text(value, omit, item_index=item_index)
            values.append(_normalize_whitespace(value))
        return to_pretty_json(values)

    return optimize


# ─────────────────────────────────────────────────────────────────────────────
# text
# ─────────────────────────────────────────────────────────────────────────────

def _text_optimizer(config: TextOptimizerConfig, item_index: int) -> ResponseOptimizer:
    max_length = config.max_length

    def optimize(response: Any) -> str:
        text = _require_string(response, item_index)
        if max_length > 0 and len(text) > max_length:
            return text[:max_length]
        return text

    return optimize


# ─────────────────────────────────────────────────────────────────────────────
# json
# ─────────────────────────────────────────────────────────────────────────────

def _load_json(response: Any, item_index: int) -> Any:
    if isinstance(response, (str, bytes, bytearray)):
        try:
            return orjson.loads(response)
        except orjson.JSONDecodeError as e:
            raise ResponseParseError(f"Response is not valid JSON: {e}", item_index=item_index) from None
    # Caller-owned data: work on a copy so projections never touch it
    return copy.deepcopy(response)


def _select_items(data: dict[str, Any] | list[Any], data_field: str | None) -> list[Any]:
    if isinstance(data, list):
        return [get_path(item, data_field) for item in data] if data_field else data
    if not data_field:
        return [data]
    inner = get_path(data, data_field)
    return inner if isinstance(inner, list) else [inner]


def _json_optimizer(config: JsonOptimizerConfig, item_index: int) -> ResponseOptimizer:
    data_field = config.data_field
    mode = config.fields_to_include
    fields = config.fields

    def optimize(response: Any) -> str:
        data = _load_json(response, item_index)
        if not isinstance(data, (dict, list)):
            raise ConfigurationError(
                "The response type must be an object or an array of objects", item_index=item_index
            )
        items = _select_items(data, data_field)

        match mode:
            case "all":
                result = items
            case "selected":
                result = []
                for item in items:
                    projected: dict[str, Any] = {}
                    for path in fields:
                        set_path(projected, path, get_path(item, path, MISSING))
                    result.append(projected)
            case "except":
                for item in items:
                    for path in fields:
                        unset_path(item, path)
                result = items
        return to_pretty_json(result)

    return optimize
