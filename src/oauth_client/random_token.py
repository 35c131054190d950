"""Cryptographically secure, URL-safe random strings.

Used for the OAuth2 ``state`` value and OAuth1 nonces.  Every call draws fresh
randomness from :mod:`secrets`; values are never cached or reused.

This module intentionally performs **no logging** of generated values.
"""

from __future__ import annotations

import secrets
from typing import Final

DEFAULT_LENGTH: Final[int] = 32
_ALLOWED_CHARS: Final[str] = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789"
    "-_"
)


def generate_random(length: int = DEFAULT_LENGTH) -> str:
    """Return a random URL-safe string of exactly *length* characters.

    Parameters
    ----------
    length:
        Number of characters, must be positive (default 32).

    Returns
    -------
    str
        Characters drawn from ``A-Z a-z 0-9 - _``.
    """
    if length < 1:
        raise ValueError("random token length must be positive")
    return "".join(secrets.choice(_ALLOWED_CHARS) for _ in range(length))
