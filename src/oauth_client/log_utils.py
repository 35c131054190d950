"""Structured logging helpers for the OAuth flow drivers.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  The adapter
ONLY injects the following *non-sensitive* fields:

- ``flow``           – ``oauth1`` or ``oauth2``
- ``client_id``      – The client / consumer key (first 6 chars kept)
- ``correlation_id`` – Optional identifier supplied by outer layers

Usage
-----
>>> from oauth_client.log_utils import get_flow_logger
>>> log = get_flow_logger(flow="oauth2", client_id="abcdef123456")
>>> log.info("Exchanging authorization code")
INFO oauth-client.oauth2 flow=oauth2 client_id=abcdef ...

The adapter is a thin wrapper around :class:`logging.LoggerAdapter`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

BASE_LOGGER_NAME = "oauth-client"


def mask_sensitive(value: Any, keep_chars: int = 4) -> str:
    """Return *value* (stringified) with everything after the first *keep_chars* characters masked."""
    if value is None or value == "":
        return ""
    value = str(value)
    if len(value) <= keep_chars:
        return "*" * len(value)
    return value[:keep_chars] + "*" * min(len(value) - keep_chars, 8)


class _FlowLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted flow context into log records."""

    extra_keys = ("flow", "client_id", "correlation_id")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if k == "client_id" and extra and extra.get("client_id"):
                # keep only first 6 characters of the client identifier
                extra_clean[k] = str(extra["client_id"])[:6]
            elif extra and k in extra and extra[k] is not None:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_flow_logger(
    *,
    flow: str,
    client_id: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter named ``oauth-client.<flow>`` pre-filled with context."""
    logger = logging.getLogger(f"{BASE_LOGGER_NAME}.{flow}")
    return _FlowLoggerAdapter(
        logger,
        {"flow": flow, "client_id": client_id, "correlation_id": correlation_id},
    )
