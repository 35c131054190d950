"""CSRF ``state`` helpers shared by both flow drivers.

The *state* value is an opaque random string round-tripped through the
authorization redirect.  The library only generates and compares it; keeping
it between the redirect and the callback (cookie, session…) is up to the
caller.

Logging
-------
State values are never written to logs.
"""

from __future__ import annotations

from oauth_client.errors import StateMismatchError
from oauth_client.random_token import DEFAULT_LENGTH, generate_random


def generate_state(length: int = DEFAULT_LENGTH) -> str:
    """Return a fresh URL-safe random state value (32 characters by default)."""
    return generate_random(length)


def verify_state(expected: str | None, received: str | None) -> None:
    """Compare the stored state with the value received on the callback.

    Raises
    ------
    StateMismatchError
        If either value is empty or they differ.
    """
    if not expected or not received or expected != received:
        raise StateMismatchError()
