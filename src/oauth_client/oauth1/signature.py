"""OAuth 1.0a HMAC-SHA1 request signing.

Implements the signature base string and ``Authorization`` header rules of
RFC 5849 §3.4 / §3.5.1:

1. The protocol params (``oauth_consumer_key``, ``oauth_nonce``,
   ``oauth_signature_method``, ``oauth_timestamp``, ``oauth_version`` and,
   once a token exists, ``oauth_token``) are merged with the request params.
2. Every key and value is percent-encoded (RFC 3986, space becomes ``%20``),
   rendered as ``key=value`` and the *pairs* are sorted as whole strings.
3. The URL is normalized (lowercase scheme/host, default port dropped, query
   and fragment removed; its query params are signed as request params).
4. ``METHOD&enc(url)&enc(params)`` is signed with
   ``enc(consumer_secret)&enc(token_secret)``.

Nonce and timestamp are supplied by the caller through
:class:`~oauth_client.models.SignatureInput` and must be fresh for every
request.  Nothing in this module is logged: signatures and secrets stay out
of log records.
"""

from __future__ import annotations

import base64
import hmac
from dataclasses import dataclass
from hashlib import sha1
from typing import Any, Final, Iterable, Mapping
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from oauth_client.models import SignatureInput
from oauth_client.url_builder import stringify_value

SIGNATURE_METHOD: Final[str] = "HMAC-SHA1"
OAUTH_VERSION: Final[str] = "1.0"

_DEFAULT_PORTS: Final[dict[str, int]] = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Output of :func:`generate_signature`."""

    params: dict[str, Any]
    oauth_params: dict[str, Any]
    base_string: str
    signature: str
    oauth_header: str

    @property
    def authorization(self) -> str:
        """Complete ``Authorization`` header value."""
        return f"OAuth {self.oauth_header}"


def percent_encode(value: Any) -> str:
    """Percent-encode *value* per RFC 3986; only ``A-Z a-z 0-9 - . _ ~`` stay literal."""
    return quote(stringify_value(value), safe="")


def normalize_url(url: str) -> tuple[str, list[tuple[str, str]]]:
    """Return the base string URI of *url* and the query params it carried.

    >>> normalize_url("HTTPS://Example.com:443/a?b=c")
    ('https://example.com/a', [('b', 'c')])
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        raise ValueError(f"cannot sign a request to {url!r}")
    if ":" in host:  # IPv6 literal
        host = f"[{host}]"

    port = parts.port
    netloc = host if port is None or _DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"
    base_url = urlunsplit((scheme, netloc, parts.path or "/", "", ""))
    return base_url, parse_qsl(parts.query, keep_blank_values=True)


def _expand(params: Mapping[str, Any]) -> Iterable[tuple[str, Any]]:
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            for item in value:
                yield key, item
        else:
            yield key, value


def build_parameter_string(pairs: Iterable[tuple[str, Any]]) -> str:
    """Encode, sort (by the full encoded ``key=value`` pair) and join *pairs*."""
    encoded = sorted(f"{percent_encode(k)}={percent_encode(v)}" for k, v in pairs)
    return "&".join(encoded)


def build_base_string(method: str, base_url: str, parameter_string: str) -> str:
    return "&".join(
        [method.upper(), percent_encode(base_url), percent_encode(parameter_string)]
    )


def build_signing_key(consumer_secret: str, token_secret: str | None = None) -> str:
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


def sign(base_string: str, signing_key: str) -> str:
    """Return the base64-encoded HMAC-SHA1 of *base_string*."""
    digest = hmac.new(
        signing_key.encode("utf-8"), base_string.encode("utf-8"), sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_oauth_header(oauth_params: Mapping[str, Any]) -> str:
    """Render ``enc(key)="enc(value)"`` entries, sorted and joined with ``,``."""
    return ",".join(
        sorted(f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in oauth_params.items())
    )


def generate_signature(signature_input: SignatureInput) -> SignatureResult:
    """Sign one request and build its ``Authorization`` header value.

    Parameters
    ----------
    signature_input:
        Method, URL, consumer credentials, nonce, timestamp, request params
        and the optional token pair.

    Returns
    -------
    SignatureResult
        The full param set, the ``oauth_*`` subset incl. ``oauth_signature``,
        the base string, the signature and the header value (without the
        ``OAuth `` prefix).
    """
    params: dict[str, Any] = dict(signature_input.params)
    if signature_input.oauth_token:
        params["oauth_token"] = signature_input.oauth_token
    params.update(
        {
            "oauth_consumer_key": signature_input.consumer_key,
            "oauth_nonce": signature_input.nonce,
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": signature_input.unix_timestamp,
            "oauth_version": OAUTH_VERSION,
        }
    )

    base_url, query_pairs = normalize_url(signature_input.url)
    parameter_string = build_parameter_string([*query_pairs, *_expand(params)])
    base_string = build_base_string(signature_input.method, base_url, parameter_string)
    signature = sign(
        base_string,
        build_signing_key(signature_input.consumer_secret, signature_input.oauth_token_secret),
    )

    oauth_params: dict[str, Any] = {"oauth_signature": signature}
    oauth_params.update({k: v for k, v in params.items() if k.startswith("oauth_")})

    return SignatureResult(
        params=params,
        oauth_params=oauth_params,
        base_string=base_string,
        signature=signature,
        oauth_header=build_oauth_header(oauth_params),
    )
