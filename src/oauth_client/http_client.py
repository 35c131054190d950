"""Outbound HTTP transport for the flow drivers.

Executes an :class:`~oauth_client.request.ApiRequest` with ``httpx`` and
returns the raw body according to its ``response_type``.  Connection pooling,
TLS and redirects are left to ``httpx``; nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx

from oauth_client.errors import ResponseFormatError, TransportError
from oauth_client.request import ApiRequest

_LOG = logging.getLogger("oauth-client.http_client")

HttpMethod = Literal["GET", "POST"]

DEFAULT_TIMEOUT: float = 30.0
_BODY_PREVIEW_LEN = 200


class HttpClient:
    """Thin async wrapper around :class:`httpx.AsyncClient`.

    Parameters
    ----------
    client:
        Optional caller-owned client (shared pool, custom transport).  It is
        never closed by this class.  When omitted a short-lived client is
        opened for every call.
    timeout:
        Timeout in seconds for the short-lived clients.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def post(self, request: ApiRequest) -> Any:
        return await self.send("POST", request)

    async def get(self, request: ApiRequest) -> Any:
        return await self.send("GET", request)

    async def send(self, method: HttpMethod, request: ApiRequest) -> Any:
        """Perform the call and return the body as JSON, text or bytes."""
        kwargs = _build_request_kwargs(request)
        _LOG.debug(
            "Making %s request url=%s params=%s fields=%s",
            method,
            request.url,
            sorted(request.params),
            sorted(request.fields),
        )

        if self._client is not None:
            return await self._send(self._client, method, request, kwargs)

        async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
            return await self._send(client, method, request, kwargs)

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: HttpMethod,
        request: ApiRequest,
        kwargs: dict[str, Any],
    ) -> Any:
        try:
            response = await client.request(method, request.url, **kwargs)
        except httpx.RequestError as exc:
            _LOG.warning("%s %s failed: %s", method, request.url, type(exc).__name__)
            raise TransportError(f"{method} {request.url} failed: {exc}") from exc

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = response.text[:_BODY_PREVIEW_LEN]
            _LOG.warning(
                "%s %s returned status=%s", method, request.url, response.status_code
            )
            raise TransportError(
                f"{method} {request.url} returned {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            ) from exc

        return _read_body(response, request)


def _build_request_kwargs(request: ApiRequest) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "params": dict(request.params),
        "headers": {k: str(v) for k, v in request.headers.items()},
    }
    if request.fields:
        if request.request_type == "json":
            kwargs["json"] = dict(request.fields)
        else:
            kwargs["data"] = dict(request.fields)
    return kwargs


def _read_body(response: httpx.Response, request: ApiRequest) -> Any:
    if request.response_type == "json":
        try:
            return response.json()
        except ValueError as exc:
            body = response.text[:_BODY_PREVIEW_LEN]
            raise ResponseFormatError(body, "Authorization server response is not valid JSON") from exc
    if request.response_type == "text":
        return response.text
    return response.content
