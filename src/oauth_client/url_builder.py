"""Fluent builder for redirect URLs."""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


class UrlBuilder:
    """Append or remove query params on a base URL and serialize the result.

    Params keep insertion order and a key may be appended more than once.
    Values are serialized with ``application/x-www-form-urlencoded`` escaping.
    """

    def __init__(self, base_url: str) -> None:
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"invalid base URL: {base_url!r}")
        self._parts = parts._replace(query="")
        self._params: list[tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)

    def get_params(self) -> dict[str, str]:
        """Return the params as a dict; the last value wins for repeated keys."""
        return dict(self._params)

    def param(self, key: str, value: Any) -> UrlBuilder:
        self._params.append((key, stringify_value(value)))
        return self

    def clear_param(self, key: str) -> UrlBuilder:
        """Remove every value of *key*."""
        self._params = [(k, v) for k, v in self._params if k != key]
        return self

    def clear(self) -> UrlBuilder:
        self._params = []
        return self

    def make_url(self) -> str:
        return urlunsplit(self._parts._replace(query=urlencode(self._params)))


def stringify_value(value: Any) -> str:
    """Render a param value the way it appears in URLs and signatures."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


RedirectCallback = Callable[[UrlBuilder], None]
