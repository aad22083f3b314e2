"""Authenticated request dispatch.

- RequestSpec: one outgoing request
- AuthConfig: none / generic credential / predefined credential
- resolve_request_function: bind an auth strategy into a request function
- HttpxTransport: default transport
"""

from .auth import RequestFunction, resolve_request_function
from .collaborators import (
    AuthenticatedRequester,
    Collaborators,
    CredentialStore,
    MemoryCredentialStore,
    OAuthSigner,
    Transport,
)
from .transport import HttpxTransport
from .types import (
    OAUTH2_ADDITIONAL_PARAMETERS,
    AuthConfig,
    AuthenticationOverrides,
    BasicCredentials,
    GenericCredentialAuth,
    GenericCredentialKind,
    HttpMethod,
    NoAuthConfig,
    OAuth2Options,
    PredefinedCredentialAuth,
    RequestSpec,
    get_oauth2_additional_parameters,
)

__all__ = [
    # Requests
    "RequestSpec", "BasicCredentials", "HttpMethod",
    # Auth configuration
    "AuthConfig", "NoAuthConfig", "GenericCredentialAuth", "GenericCredentialKind", "PredefinedCredentialAuth",
    "OAuth2Options", "AuthenticationOverrides", "OAUTH2_ADDITIONAL_PARAMETERS", "get_oauth2_additional_parameters",
    # Dispatch
    "RequestFunction", "resolve_request_function",
    # Collaborators
    "Transport", "CredentialStore", "OAuthSigner", "AuthenticatedRequester", "Collaborators",
    "MemoryCredentialStore", "HttpxTransport",
]
