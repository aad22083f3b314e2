"""anycall - authenticated HTTP calls with agent-sized responses.

Dispatches a request through the configured authentication strategy and
shapes the response into a bounded string an agent can consume.

Quick Start:
    >>> from anycall import (
    ...     Collaborators, GenericCredentialAuth, HttpxTransport, MemoryCredentialStore,
    ...     RequestSpec, TextOptimizerConfig, configure_response_optimizer, resolve_request_function,
    ... )
    >>>
    >>> store = MemoryCredentialStore({"httpHeaderAuth": {"name": "X-Api-Key", "value": "secret"}})
    >>> collaborators = Collaborators(transport=HttpxTransport(), credentials=store)
    >>>
    >>> send = await resolve_request_function(GenericCredentialAuth(kind="httpHeaderAuth"), collaborators)
    >>> optimize = configure_response_optimizer(TextOptimizerConfig(max_length=2000))
    >>> text = optimize(await send(RequestSpec(url="https://api.example.com/readme")))

Tool facade:
    >>> from anycall.tools import HttpRequestTool, HttpRequestToolConfig
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
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
)

# Settings
from .foundation.config import AnycallSettings, get_settings

# Dispatch
from .http import (
    OAUTH2_ADDITIONAL_PARAMETERS,
    AuthConfig,
    BasicCredentials,
    Collaborators,
    GenericCredentialAuth,
    GenericCredentialKind,
    HttpxTransport,
    MemoryCredentialStore,
    NoAuthConfig,
    OAuth2Options,
    PredefinedCredentialAuth,
    RequestSpec,
    resolve_request_function,
)

# Logging
from .observability import configure_logging, get_logger

# Optimization
from .optimize import (
    HtmlOptimizerConfig,
    JsonOptimizerConfig,
    OptimizerConfig,
    OptimizerParameters,
    TextOptimizerConfig,
    configure_response_optimizer,
    serialize_response,
)

__all__ = [
    "__version__",
    # Errors
    "ErrorCode", "ToolError", "AnycallError", "ConfigurationError", "ParseError", "CustomAuthParseError",
    "ResponseParseError", "ResponseTypeError", "CredentialNotFoundError", "ResponseTooLargeError",
    # Settings
    "AnycallSettings", "get_settings",
    # Dispatch
    "RequestSpec", "BasicCredentials", "AuthConfig", "NoAuthConfig", "GenericCredentialAuth",
    "GenericCredentialKind", "PredefinedCredentialAuth", "OAuth2Options", "OAUTH2_ADDITIONAL_PARAMETERS",
    "Collaborators", "MemoryCredentialStore", "HttpxTransport", "resolve_request_function",
    # Optimization
    "OptimizerConfig", "OptimizerParameters", "HtmlOptimizerConfig", "TextOptimizerConfig",
    "JsonOptimizerConfig", "configure_response_optimizer", "serialize_response",
    # Logging
    "configure_logging", "get_logger",
]
