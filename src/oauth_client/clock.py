"""Injectable time source for the flow drivers.

Two values depend on the current time: the ``oauth_timestamp`` sent with
every signed OAuth1 call, and ``Oauth2AccessToken.expires_at`` derived from a
token response's ``expires_in``.  Drivers take a ``clock`` argument so tests
can freeze both; production code uses :func:`default_clock`.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Zero-argument callable returning UNIX seconds as ``float``."""

    def __call__(self) -> float: ...


def default_clock() -> float:
    return time.time()


def unix_timestamp(clock: Clock = default_clock) -> int:
    """Whole UNIX seconds from *clock*, as used for ``oauth_timestamp`` and ``expires_at``.

    >>> unix_timestamp(lambda: 1_700_000_000.9)
    1700000000
    """
    return int(clock())
