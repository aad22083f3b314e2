"""Response optimization: html extraction, text truncation, json projection."""

from .config import (
    FieldsToInclude,
    HtmlOptimizerConfig,
    JsonOptimizerConfig,
    OptimizerConfig,
    OptimizerParameters,
    ResponseKind,
    TextOptimizerConfig,
)
from .optimizer import ResponseOptimizer, configure_response_optimizer, serialize_response, to_pretty_json
from .paths import MISSING, get_path, has_path, set_path, to_path, unset_path
from .text import html_to_text

__all__ = [
    # Configuration
    "ResponseKind", "FieldsToInclude", "OptimizerConfig", "OptimizerParameters",
    "HtmlOptimizerConfig", "TextOptimizerConfig", "JsonOptimizerConfig",
    # Optimizer
    "ResponseOptimizer", "configure_response_optimizer", "serialize_response", "to_pretty_json",
    # Helpers
    "html_to_text", "MISSING", "to_path", "get_path", "has_path", "set_path", "unset_path",
]
