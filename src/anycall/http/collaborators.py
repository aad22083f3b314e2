"""Collaborator protocols consumed by the auth dispatcher.

Credential storage, OAuth signing and the "request with authentication"
helper belong to the host application; only their call shape is fixed here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from anycall.foundation.errors import CredentialNotFoundError

if TYPE_CHECKING:
    from .types import AuthenticationOverrides, OAuth2Options, RequestSpec


@runtime_checkable
class Transport(Protocol):
    """Sends one request, single attempt, no implicit retry."""

    async def request(self, spec: RequestSpec) -> Any: ...


@runtime_checkable
class CredentialStore(Protocol):
    """Resolves a credential record for the item being processed."""

    async def get_credentials(self, kind: str, item_index: int) -> Mapping[str, Any]: ...


@runtime_checkable
class OAuthSigner(Protocol):
    """Signs and sends OAuth1/OAuth2 requests (token refresh is its concern)."""

    async def request_oauth1(self, credential_type: str, spec: RequestSpec) -> Any: ...

    async def request_oauth2(self, credential_type: str, spec: RequestSpec, options: OAuth2Options) -> Any: ...


@runtime_checkable
class AuthenticatedRequester(Protocol):
    """Sends a request authenticated with a predefined credential type."""

    async def request_with_authentication(
        self,
        credential_type: str,
        spec: RequestSpec,
        overrides: AuthenticationOverrides | None,
        item_index: int,
    ) -> Any: ...


@dataclass(slots=True, frozen=True)
class Collaborators:
    """Everything the dispatcher may call. Signer and requester are optional
    and only required by the strategies that delegate to them."""

    transport: Transport
    credentials: CredentialStore
    oauth: OAuthSigner | None = None
    authenticated: AuthenticatedRequester | None = None


@dataclass(slots=True)
class MemoryCredentialStore:
    """Dict-backed credential store keyed by credential kind.

    Example:
        >>> store = MemoryCredentialStore({"httpHeaderAuth": {"name": "X-Key", "value": "v1"}})
    """

    records: dict[str, Mapping[str, Any]] = field(default_factory=dict)

    def add(self, kind: str, **fields: Any) -> None:
        self.records[kind] = dict(fields)

    async def get_credentials(self, kind: str, item_index: int) -> Mapping[str, Any]:
        try:
            return dict(self.records[kind])
        except KeyError:
            raise CredentialNotFoundError(
                f"No credentials of type '{kind}' available", item_index=item_index
            ) from None
