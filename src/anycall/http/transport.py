"""httpx-backed Transport.

Maps a RequestSpec onto ``httpx.AsyncClient.request``:
- ``qs`` becomes query params
- dict/list bodies are sent as JSON, str/bytes as raw content
- BasicCredentials become ``httpx.BasicAuth``, or ``httpx.DigestAuth`` when
  ``send_immediately`` is False

Non-2xx responses raise ``httpx.HTTPStatusError``. JSON responses are
decoded, everything else is returned as text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import orjson

from anycall.foundation.config import HttpSettings, get_settings
from anycall.foundation.errors import ResponseTooLargeError
from anycall.observability import get_logger

if TYPE_CHECKING:
    from .types import BasicCredentials, RequestSpec

log = get_logger("anycall.transport")


def _to_httpx_auth(auth: BasicCredentials | None) -> httpx.Auth | None:
    if auth is None:
        return None
    password = auth.password.get_secret_value()
    if auth.send_immediately is False:
        return httpx.DigestAuth(auth.username, password)
    return httpx.BasicAuth(auth.username, password)


def _is_json(content_type: str) -> bool:
    media = content_type.split(";")[0].strip().lower()
    return media == "application/json" or media.endswith("+json")


class HttpxTransport:
    """Transport with one lazily created httpx client.

    Example:
        >>> async with HttpxTransport() as transport:
        ...     data = await transport.request(RequestSpec(url="https://api.example.com/items"))
    """

    __slots__ = ("_settings", "_client", "_transport")

    def __init__(
        self,
        settings: HttpSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings().http
        self._transport = transport  # e.g. httpx.MockTransport in tests
        self._client: httpx.AsyncClient | None = None

    @property
    def settings(self) -> HttpSettings:
        return self._settings

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=self._settings.follow_redirects,
                verify=self._settings.verify_ssl,
                timeout=self._settings.timeout,
                headers={"User-Agent": self._settings.user_agent},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def request(self, spec: RequestSpec) -> Any:
        content: str | bytes | None = None
        json_body: Any = None
        if isinstance(spec.body, (str, bytes)):
            content = spec.body
        elif spec.body is not None:
            json_body = spec.body

        response = await self._get_client().request(
            method=spec.method,
            url=spec.url,
            headers={k: str(v) for k, v in spec.headers.items()},
            params=spec.qs or None,
            content=content,
            json=json_body,
            auth=_to_httpx_auth(spec.auth) or httpx.USE_CLIENT_DEFAULT,
            timeout=spec.timeout or self._settings.timeout,
        )
        log.debug("response received", method=spec.method, url=str(response.url), status=response.status_code)
        response.raise_for_status()

        body = await response.aread()
        max_size = self._settings.max_response_size_bytes
        if len(body) > max_size:
            raise ResponseTooLargeError(f"Response too large: {len(body)} bytes (max: {max_size})")

        if body and _is_json(response.headers.get("content-type", "")):
            return orjson.loads(body)
        return response.text
