"""Typed, immutable records used by the OAuth flow drivers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any, Literal, Mapping, TypeVar

TokenRequestMethod = Literal["GET", "POST"]

_ConfigT = TypeVar("_ConfigT", bound="ClientConfig")


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Credentials and endpoints of an OAuth2 client."""

    client_id: str
    client_secret: str
    callback_url: str
    authorize_url: str | None = None
    access_token_url: str | None = None

    @classmethod
    def from_env(cls: type[_ConfigT], prefix: str = "OAUTH_") -> _ConfigT | None:
        """Build a config from ``<prefix><FIELD_NAME>`` environment variables.

        Returns ``None`` when ``<prefix>CLIENT_ID`` is not set so callers can
        treat the client as disabled.
        """
        if not os.getenv(f"{prefix}CLIENT_ID"):
            return None

        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(f"{prefix}{f.name.upper()}")
            if raw is not None and raw.strip():
                values[f.name] = raw.strip()
        values.setdefault("client_secret", "")
        values.setdefault("callback_url", "")
        return cls(**values)


@dataclass(frozen=True, slots=True)
class Oauth1ClientConfig(ClientConfig):
    """OAuth 1.0(a) consumer config; ``client_id``/``client_secret`` are the consumer key pair."""

    request_token_url: str | None = None
    # HTTP verb for the signed request-token and access-token calls
    token_request_method: TokenRequestMethod = "POST"

    def __post_init__(self) -> None:
        method = str(self.token_request_method).upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"unsupported token_request_method: {self.token_request_method}")
        object.__setattr__(self, "token_request_method", method)


@dataclass(frozen=True, slots=True)
class RequestToken:
    """OAuth1 temporary credentials returned by the request-token step."""

    token: str
    secret: str
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return an extra response field."""
        return self.extras.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "secret": self.secret, **self.extras}


@dataclass(frozen=True, slots=True)
class Oauth1AccessToken(RequestToken):
    """Final OAuth1 token pair."""


@dataclass(frozen=True, slots=True)
class Oauth2AccessToken:
    """Access token returned by the OAuth2 authorization-code exchange.

    ``expires_at`` is a UNIX timestamp computed when the response was parsed.
    """

    token: str
    type: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    expires_at: int | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return an extra response field."""
        return self.extras.get(key, default)

    def is_expired(self, now: float) -> bool:
        """Return *True* when ``expires_at`` is known and not after *now*."""
        return self.expires_at is not None and self.expires_at <= now

    def to_dict(self) -> dict[str, Any]:
        core = {
            "token": self.token,
            "type": self.type,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "expires_at": self.expires_at,
        }
        return {**{k: v for k, v in core.items() if v is not None}, **self.extras}


@dataclass(frozen=True, slots=True)
class SignatureInput:
    """Everything the OAuth1 signature engine needs for one request."""

    method: str
    url: str
    consumer_key: str
    consumer_secret: str
    nonce: str
    unix_timestamp: int
    params: Mapping[str, Any] = field(default_factory=dict)
    oauth_token: str | None = None
    oauth_token_secret: str | None = None
