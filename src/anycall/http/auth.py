"""Auth dispatcher: turn an auth configuration into a request function.

``resolve_request_function`` looks up credentials once and returns an async
callable with the chosen strategy bound in. Each call copies the incoming
RequestSpec before injecting auth material, so the caller's instance never
carries credentials and concurrent calls cannot see each other's changes.

Example:
    >>> send = await resolve_request_function(
    ...     GenericCredentialAuth(kind="httpHeaderAuth"), collaborators, item_index=0
    ... )
    >>> body = await send(RequestSpec(url="https://api.example.com/items"))
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias, TypeVar

import orjson

from anycall.foundation.errors import ConfigurationError, CustomAuthParseError
from anycall.observability import get_logger

from .collaborators import Collaborators
from .types import (
    AuthConfig,
    AuthenticationOverrides,
    BasicCredentials,
    GenericCredentialAuth,
    GenericCredentialKind,
    NoAuthConfig,
    OAuth2Options,
    PredefinedCredentialAuth,
    RequestSpec,
    get_oauth2_additional_parameters,
)

RequestFunction: TypeAlias = Callable[[RequestSpec], Awaitable[Any]]
T = TypeVar("T")

log = get_logger("anycall.auth")


async def resolve_request_function(
    auth: AuthConfig,
    collaborators: Collaborators,
    *,
    item_index: int = 0,
) -> RequestFunction:
    """Select the auth strategy for ``auth`` and bind it into a request function.

    Raises:
        ConfigurationError: The strategy needs a collaborator that was not
            provided, or the auth configuration is not a known variant.
        Whatever the credential store raises for missing credentials.
    """
    match auth:
        case NoAuthConfig():
            send = _plain(collaborators)
            strategy = "none"
        case GenericCredentialAuth(kind=kind):
            send = await _resolve_generic(kind, collaborators, item_index)
            strategy = str(kind)
        case PredefinedCredentialAuth(credential_type=credential_type):
            send = _predefined(credential_type, collaborators, item_index)
            strategy = credential_type
        case _:
            raise ConfigurationError(f"Unsupported authentication mode: {auth!r}", item_index=item_index)
    log.debug("auth strategy resolved", mode=auth.mode, strategy=strategy, item_index=item_index)
    return send


def _plain(collaborators: Collaborators) -> RequestFunction:
    transport = collaborators.transport

    async def send(spec: RequestSpec) -> Any:
        return await transport.request(spec.evolve())

    return send


async def _resolve_generic(
    kind: GenericCredentialKind,
    collaborators: Collaborators,
    item_index: int,
) -> RequestFunction:
    transport = collaborators.transport
    credentials = collaborators.credentials

    match kind:
        case GenericCredentialKind.HTTP_BASIC | GenericCredentialKind.HTTP_DIGEST:
            record = await credentials.get_credentials(GenericCredentialKind.HTTP_BASIC.value, item_index)
            basic = BasicCredentials(
                username=str(record["user"]),
                password=str(record["password"]),
                send_immediately=False if kind is GenericCredentialKind.HTTP_DIGEST else None,
            )

            async def send(spec: RequestSpec) -> Any:
                return await transport.request(spec.evolve(auth=basic))

        case GenericCredentialKind.HTTP_HEADER:
            record = await credentials.get_credentials(kind.value, item_index)
            name, value = str(record["name"]), record["value"]

            async def send(spec: RequestSpec) -> Any:
                return await transport.request(spec.evolve(headers={**spec.headers, name: value}))

        case GenericCredentialKind.HTTP_QUERY:
            record = await credentials.get_credentials(kind.value, item_index)
            name, value = str(record["name"]), record["value"]

            async def send(spec: RequestSpec) -> Any:
                return await transport.request(spec.evolve(qs={**(spec.qs or {}), name: value}))

        case GenericCredentialKind.HTTP_CUSTOM:
            record = await credentials.get_credentials(kind.value, item_index)
            raw = record.get("json") or "{}"

            async def send(spec: RequestSpec) -> Any:
                custom = _parse_custom_auth(raw, item_index)
                return await transport.request(_merge_custom_auth(spec, custom, item_index))

        case GenericCredentialKind.OAUTH1:
            signer = _require(collaborators.oauth, "an OAuth signer", kind, item_index)

            async def send(spec: RequestSpec) -> Any:
                return await signer.request_oauth1(kind.value, spec.evolve())

        case GenericCredentialKind.OAUTH2:
            signer = _require(collaborators.oauth, "an OAuth signer", kind, item_index)
            options = OAuth2Options(token_type="Bearer")

            async def send(spec: RequestSpec) -> Any:
                return await signer.request_oauth2(kind.value, spec.evolve(), options)

        case _:
            raise ConfigurationError(f"Unsupported generic credential type: {kind!r}", item_index=item_index)

    return send


def _predefined(credential_type: str, collaborators: Collaborators, item_index: int) -> RequestFunction:
    requester = _require(collaborators.authenticated, "an authenticated requester", credential_type, item_index)
    oauth2 = get_oauth2_additional_parameters(credential_type)
    overrides = AuthenticationOverrides(oauth2=oauth2) if oauth2 else None

    async def send(spec: RequestSpec) -> Any:
        return await requester.request_with_authentication(credential_type, spec.evolve(), overrides, item_index)

    return send


def _require(collaborator: T | None, what: str, strategy: str, item_index: int) -> T:
    if collaborator is None:
        raise ConfigurationError(f"Authentication '{strategy}' requires {what}", item_index=item_index)
    return collaborator


# ─────────────────────────────────────────────────────────────────────────────
# Custom auth
# ─────────────────────────────────────────────────────────────────────────────

_CUSTOM_AUTH_SECTIONS = ("headers", "qs", "body")


def _parse_custom_auth(raw: str | bytes | Mapping[str, Any], item_index: int) -> dict[str, Any]:
    """Parse the custom auth document: {"headers": {}, "qs": {}, "body": {}}.

    Each section present must be an object.
    """
    if isinstance(raw, Mapping):
        parsed: Any = dict(raw)
    else:
        try:
            parsed = orjson.loads(raw)
        except orjson.JSONDecodeError:
            raise CustomAuthParseError("Invalid Custom Auth JSON", item_index=item_index) from None
    if not isinstance(parsed, dict):
        raise CustomAuthParseError("Invalid Custom Auth JSON", item_index=item_index)
    for section in _CUSTOM_AUTH_SECTIONS:
        if parsed.get(section) is not None and not isinstance(parsed[section], Mapping):
            raise CustomAuthParseError(
                f"Invalid Custom Auth JSON: '{section}' must be an object", item_index=item_index
            )
    return parsed


def _merge_custom_auth(spec: RequestSpec, custom: Mapping[str, Any], item_index: int) -> RequestSpec:
    """Shallow-merge custom headers, qs and body into a copy of ``spec``. Injected keys win."""
    updates: dict[str, Any] = {}
    if headers := custom.get("headers"):
        updates["headers"] = {**spec.headers, **headers}
    if qs := custom.get("qs"):
        updates["qs"] = {**(spec.qs or {}), **qs}
    if body := custom.get("body"):
        if spec.body is not None and not isinstance(spec.body, Mapping):
            raise ConfigurationError(
                "Custom auth body can only be merged into an object body", item_index=item_index
            )
        updates["body"] = {**(spec.body or {}), **body}
    return spec.evolve(**updates)
