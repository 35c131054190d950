"""Normalize authorization-server responses into flat mappings.

Servers reply with either JSON or ``application/x-www-form-urlencoded`` bodies;
both drivers run the raw body through :func:`normalize_response` so token
extraction does not care which one it got.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

from oauth_client.errors import ResponseFormatError
from oauth_client.request import ResponseType


def parse_urlencoded(body: str) -> dict[str, Any]:
    """Parse a query string; keys repeated in *body* map to a list of values."""
    parsed: dict[str, Any] = {}
    for key, value in parse_qsl(body, keep_blank_values=True):
        if key not in parsed:
            parsed[key] = value
        elif isinstance(parsed[key], list):
            parsed[key].append(value)
        else:
            parsed[key] = [parsed[key], value]
    return parsed


def normalize_response(body: Any, response_type: ResponseType) -> dict[str, Any]:
    """Return *body* as a flat, string-keyed dict.

    Parameters
    ----------
    body:
        Raw body as returned by :class:`~oauth_client.http_client.HttpClient`.
    response_type:
        The mode the body was read with.  ``json`` bodies pass through,
        ``text`` and ``buffer`` bodies are parsed as urlencoded strings.

    Raises
    ------
    ResponseFormatError
        If a ``json`` body is not an object, or a ``buffer`` body is not UTF-8.
    """
    if response_type == "json":
        if not isinstance(body, Mapping):
            raise ResponseFormatError(body)
        return dict(body)

    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ResponseFormatError(
                body, "Authorization server response is not valid UTF-8"
            ) from exc
    return parse_urlencoded(body or "")
