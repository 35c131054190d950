"""Per-call request configuration handed to driver hooks and caller callbacks.

An :class:`ApiRequest` is created fresh for every outbound call, configured
through the fluent methods below, consumed once by
:class:`~oauth_client.http_client.HttpClient` and then discarded.
"""

from __future__ import annotations

from typing import Any, Callable, Final, Literal, get_args

RequestType = Literal["json", "urlencoded"]
ResponseType = Literal["json", "text", "buffer"]

_REQUEST_TYPES: Final[tuple[str, ...]] = get_args(RequestType)
_RESPONSE_TYPES: Final[tuple[str, ...]] = get_args(ResponseType)


class ApiRequest:
    """Query params, oauth1-only signing params, body fields and headers for one call.

    ``oauth1_params`` never reach the wire directly: they only take part in the
    OAuth1 signature and therefore end up in the ``Authorization`` header.
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._params: dict[str, Any] = {}
        self._oauth1_params: dict[str, Any] = {}
        self._fields: dict[str, Any] = {}
        self._headers: dict[str, Any] = {}
        self._request_type: RequestType = "urlencoded"
        self._response_type: ResponseType = "text"

    def __repr__(self) -> str:
        return (
            f"ApiRequest(url={self._url!r}, request_type={self._request_type!r}, "
            f"response_type={self._response_type!r})"
        )

    # ------------------------------------------------------------------ #
    # Accessors                                                          #
    # ------------------------------------------------------------------ #
    @property
    def url(self) -> str:
        return self._url

    @property
    def params(self) -> dict[str, Any]:
        return self._params

    @property
    def oauth1_params(self) -> dict[str, Any]:
        return self._oauth1_params

    @property
    def fields(self) -> dict[str, Any]:
        return self._fields

    @property
    def headers(self) -> dict[str, Any]:
        return self._headers

    @property
    def request_type(self) -> RequestType:
        return self._request_type

    @property
    def response_type(self) -> ResponseType:
        return self._response_type

    # ------------------------------------------------------------------ #
    # Fluent setters                                                     #
    # ------------------------------------------------------------------ #
    def param(self, key: str, value: Any) -> ApiRequest:
        """Define a query string param."""
        self._params[key] = value
        return self

    def clear_param(self, key: str) -> ApiRequest:
        self._params.pop(key, None)
        return self

    def oauth1_param(self, key: str, value: Any) -> ApiRequest:
        """Define a param that is only used to compute the OAuth1 signature."""
        self._oauth1_params[key] = value
        return self

    def clear_oauth1_param(self, key: str) -> ApiRequest:
        self._oauth1_params.pop(key, None)
        return self

    def field(self, key: str, value: Any) -> ApiRequest:
        """Define a request body field."""
        self._fields[key] = value
        return self

    def clear_field(self, key: str) -> ApiRequest:
        self._fields.pop(key, None)
        return self

    def header(self, key: str, value: Any) -> ApiRequest:
        self._headers[key] = value
        return self

    def clear_header(self, key: str) -> ApiRequest:
        self._headers.pop(key, None)
        return self

    def send_as(self, request_type: RequestType) -> ApiRequest:
        """Encode the body as JSON or ``application/x-www-form-urlencoded``."""
        if request_type not in _REQUEST_TYPES:
            raise ValueError(f"unsupported request type: {request_type}")
        self._request_type = request_type
        return self

    def parse_as(self, response_type: ResponseType) -> ApiRequest:
        """Select how the response body is read."""
        if response_type not in _RESPONSE_TYPES:
            raise ValueError(f"unsupported response type: {response_type}")
        self._response_type = response_type
        return self

    def clear(self) -> ApiRequest:
        """Reset every map and both modes to their defaults."""
        self._params = {}
        self._oauth1_params = {}
        self._fields = {}
        self._headers = {}
        self._request_type = "urlencoded"
        self._response_type = "text"
        return self


RequestCallback = Callable[[ApiRequest], None]


def run_hooks(target: Any, *hooks: Callable[[Any], None] | None) -> None:
    """Invoke each hook on *target* in order; later hooks see earlier changes."""
    for hook in hooks:
        if hook is not None:
            hook(target)
