"""Request records and authentication configuration.

Auth configuration is a closed discriminated union over the ``mode`` field,
mirroring the declarative options an agent tool exposes:

- ``none``: plain request
- ``genericCredentialType``: one of the GenericCredentialKind strategies
- ``predefinedCredentialType``: a named credential type handled by the
  "request with authentication" collaborator
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, SecretStr, Tag, field_serializer, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


class BasicCredentials(BaseModel):
    """Username/password pair attached to a request by basic or digest auth.

    ``send_immediately`` is False for digest auth (wait for the challenge) and
    None for basic auth (transport default: send pre-emptively).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    username: str
    password: SecretStr
    send_immediately: bool | None = None

    @field_serializer("password", when_used="json")
    def _mask_password(self, v: SecretStr) -> str:
        return "***"


class RequestSpec(BaseModel):
    """One outgoing HTTP request.

    Auth strategies never modify an instance in place; they return a copy
    in which only the fields they own were added or overwritten.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    url: Annotated[str, Field(min_length=1)]
    method: HttpMethod = "GET"
    headers: dict[str, Any] = Field(default_factory=dict, repr=False)
    qs: dict[str, Any] | None = Field(default=None, repr=False)
    body: Any = Field(default=None, repr=False)
    auth: BasicCredentials | None = Field(default=None, repr=False)
    timeout: Annotated[float, Field(gt=0, le=300.0)] | None = None

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    def evolve(self, **updates: Any) -> RequestSpec:
        """Return a deep copy with ``updates`` applied."""
        return self.model_copy(update=updates, deep=True)


# ─────────────────────────────────────────────────────────────────────────────
# OAuth2 quirks per predefined credential type
# ─────────────────────────────────────────────────────────────────────────────

class OAuth2Options(BaseModel):
    """Per-credential-type tweaks for the OAuth2 signer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    token_type: str | None = None
    include_credentials_on_refresh_on_body: bool | None = None
    token_expired_status_code: int | None = None
    property: str | None = None
    keep_bearer: bool | None = None
    key_to_include_in_access_token_header: str | None = None


class AuthenticationOverrides(BaseModel):
    """Extra options passed along with a predefined credential request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    oauth2: OAuth2Options


OAUTH2_ADDITIONAL_PARAMETERS: Mapping[str, OAuth2Options] = MappingProxyType({
    "bitlyOAuth2Api": OAuth2Options(token_type="Bearer"),
    "boxOAuth2Api": OAuth2Options(include_credentials_on_refresh_on_body=True),
    "ciscoWebexOAuth2Api": OAuth2Options(token_type="Bearer"),
    "clickUpOAuth2Api": OAuth2Options(keep_bearer=False, token_type="Bearer"),
    "goToWebinarOAuth2Api": OAuth2Options(token_expired_status_code=403),
    "hubspotDeveloperApi": OAuth2Options(token_type="Bearer", include_credentials_on_refresh_on_body=True),
    "hubspotOAuth2Api": OAuth2Options(token_type="Bearer", include_credentials_on_refresh_on_body=True),
    "lineNotifyOAuth2Api": OAuth2Options(token_type="Bearer"),
    "linkedInOAuth2Api": OAuth2Options(token_type="Bearer"),
    "mailchimpOAuth2Api": OAuth2Options(token_type="Bearer"),
    "mauticOAuth2Api": OAuth2Options(include_credentials_on_refresh_on_body=True),
    "microsoftDynamicsOAuth2Api": OAuth2Options(property="id_token"),
    "philipsHueOAuth2Api": OAuth2Options(token_type="Bearer"),
    "raindropOAuth2Api": OAuth2Options(include_credentials_on_refresh_on_body=True),
    "shopifyOAuth2Api": OAuth2Options(
        token_type="Bearer",
        key_to_include_in_access_token_header="X-Shopify-Access-Token",
    ),
    "slackOAuth2Api": OAuth2Options(token_type="Bearer", property="authed_user.access_token"),
    "stravaOAuth2Api": OAuth2Options(include_credentials_on_refresh_on_body=True),
})


def get_oauth2_additional_parameters(credential_type: str) -> OAuth2Options | None:
    """Look up OAuth2 quirks for a predefined credential type."""
    return OAUTH2_ADDITIONAL_PARAMETERS.get(credential_type)


# ─────────────────────────────────────────────────────────────────────────────
# Authentication configuration
# ─────────────────────────────────────────────────────────────────────────────

class GenericCredentialKind(StrEnum):
    """How generic credential fields are injected into a request."""
    HTTP_BASIC = "httpBasicAuth"
    HTTP_DIGEST = "httpDigestAuth"
    HTTP_HEADER = "httpHeaderAuth"
    HTTP_QUERY = "httpQueryAuth"
    HTTP_CUSTOM = "httpCustomAuth"
    OAUTH1 = "oAuth1Api"
    OAUTH2 = "oAuth2Api"


class NoAuthConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    mode: Literal["none"] = "none"


class GenericCredentialAuth(BaseModel):
    """Authenticate with a generic credential of the given kind."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)
    mode: Literal["genericCredentialType"] = "genericCredentialType"
    kind: GenericCredentialKind = Field(alias="genericAuthType")


class PredefinedCredentialAuth(BaseModel):
    """Authenticate with a named, service-specific credential type."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)
    mode: Literal["predefinedCredentialType"] = "predefinedCredentialType"
    credential_type: Annotated[str, Field(min_length=1, alias="nodeCredentialType")]


def _auth_discriminator(v: dict[str, object] | BaseModel) -> str:
    if isinstance(v, dict):
        return str(v.get("mode", "none"))
    return getattr(v, "mode", "none")


AuthConfig = Annotated[
    Annotated[NoAuthConfig, Tag("none")]
    | Annotated[GenericCredentialAuth, Tag("genericCredentialType")]
    | Annotated[PredefinedCredentialAuth, Tag("predefinedCredentialType")],
    Discriminator(_auth_discriminator),
]
