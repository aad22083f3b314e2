"""Shared fakes for collaborator protocols."""

from __future__ import annotations

from typing import Any

import pytest

from anycall.foundation.config import clear_settings_cache
from anycall.http import AuthenticationOverrides, Collaborators, MemoryCredentialStore, OAuth2Options, RequestSpec


class RecordingTransport:
    """Transport that records every request and returns a canned response."""

    def __init__(self, response: Any = "ok") -> None:
        self.response = response
        self.requests: list[RequestSpec] = []

    async def request(self, spec: RequestSpec) -> Any:
        self.requests.append(spec)
        return self.response

    @property
    def last(self) -> RequestSpec:
        return self.requests[-1]


class FailingTransport:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    async def request(self, spec: RequestSpec) -> Any:
        self.calls += 1
        raise self.exc


class RecordingOAuthSigner:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, RequestSpec, OAuth2Options | None]] = []

    async def request_oauth1(self, credential_type: str, spec: RequestSpec) -> Any:
        self.calls.append(("oauth1", credential_type, spec, None))
        return "signed-1"

    async def request_oauth2(self, credential_type: str, spec: RequestSpec, options: OAuth2Options) -> Any:
        self.calls.append(("oauth2", credential_type, spec, options))
        return "signed-2"


class RecordingRequester:
    def __init__(self) -> None:
        self.calls: list[tuple[str, RequestSpec, AuthenticationOverrides | None, int]] = []

    async def request_with_authentication(
        self,
        credential_type: str,
        spec: RequestSpec,
        overrides: AuthenticationOverrides | None,
        item_index: int,
    ) -> Any:
        self.calls.append((credential_type, spec, overrides, item_index))
        return {"via": credential_type}


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore({
        "httpBasicAuth": {"user": "alice", "password": "s3cret"},
        "httpHeaderAuth": {"name": "X-Key", "value": "v1"},
        "httpQueryAuth": {"name": "api_key", "value": "q1"},
        "httpCustomAuth": {"json": '{"headers": {"A": "1"}, "qs": {"b": "2"}}'},
    })


@pytest.fixture
def signer() -> RecordingOAuthSigner:
    return RecordingOAuthSigner()


@pytest.fixture
def requester() -> RecordingRequester:
    return RecordingRequester()


@pytest.fixture
def collaborators(
    transport: RecordingTransport,
    store: MemoryCredentialStore,
    signer: RecordingOAuthSigner,
    requester: RecordingRequester,
) -> Collaborators:
    return Collaborators(transport=transport, credentials=store, oauth=signer, authenticated=requester)


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Re-read settings from the environment for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
