"""HMAC-signed cookie values for the demo server.

The demo keeps the OAuth2 ``state`` and the OAuth1 request token pair in
cookies between the redirect and the callback.  Values are signed so a client
cannot swap them:

Format (plain text before base64-url encoding)::

    <value>:<sig>

where ``sig`` is a truncated HMAC-SHA256 hex digest of ``value``.  The value
is only signed, not encrypted.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
from hashlib import sha256
from typing import Final

_LOG = logging.getLogger("oauth-client.servers.cookies")

_SIG_LEN: Final[int] = 16  # characters kept from hex digest


class InvalidSignedValueError(Exception):
    """Raised when a signed value is malformed or its signature does not match."""


def _b64e(data: str) -> str:
    """Base64-URL encode *without* padding."""
    return base64.urlsafe_b64encode(data.encode("utf-8")).rstrip(b"=").decode("ascii")


def _b64d(data: str) -> str:
    """Decode base64-URL data that may lack padding."""
    pad_len = (-len(data)) % 4
    return base64.urlsafe_b64decode(data + "=" * pad_len).decode("utf-8")


def _sign(message: str, secret: str) -> str:
    digest = hmac.new(secret.encode(), msg=message.encode(), digestmod=sha256).hexdigest()
    return digest[:_SIG_LEN]


def sign_value(value: str, secret: str) -> str:
    """Return *value* with an appended signature, base64-url encoded."""
    return _b64e(f"{value}:{_sign(value, secret)}")


def unsign_value(signed: str, secret: str) -> str:
    """Verify and strip the signature added by :func:`sign_value`.

    Raises
    ------
    InvalidSignedValueError
        If the value cannot be decoded or the signature does not validate.
    """
    try:
        decoded = _b64d(signed)
    except (ValueError, binascii.Error):
        raise InvalidSignedValueError("signed value cannot be decoded") from None

    value, sep, sig = decoded.rpartition(":")
    if not sep:
        raise InvalidSignedValueError("signed value has an unexpected format")
    if not hmac.compare_digest(sig, _sign(value, secret)):
        raise InvalidSignedValueError("signature mismatch")

    _LOG.debug("Verified signed cookie value")
    return value
