"""Exception types raised by the OAuth flow drivers.

Only lightweight, **data-carrying** exceptions live here so that web/CLI layers
can transform them into HTTP responses or user-friendly messages.  Every error
exposes a stable ``code``, an HTTP-ish ``status`` and :meth:`to_payload`.
"""

from __future__ import annotations

from typing import Any, ClassVar, Mapping


class OAuthClientError(Exception):
    """Base class for every error raised by ``oauth_client``."""

    code: ClassVar[str] = "E_OAUTH_CLIENT"
    status: ClassVar[int] = 500
    default_message: ClassVar[str] = "OAuth client error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.code, "message": str(self)}


class ConfigurationError(OAuthClientError):
    """Raised when a URL required by the operation is missing from the config."""

    code = "E_OAUTH_CONFIGURATION"

    def __init__(self, field: str, *, purpose: str) -> None:
        super().__init__(
            f'Missing "config.{field}". The property is required to {purpose}'
        )
        self.field: str = field

    def to_payload(self) -> dict[str, Any]:
        return {**super().to_payload(), "field": self.field}


class InvalidRequestTokenError(OAuthClientError, ValueError):
    """Raised when the OAuth1 request token pair passed by the caller is incomplete."""

    code = "E_OAUTH_INVALID_REQUEST_TOKEN"
    status = 400

    def __init__(self, field: str) -> None:
        super().__init__(
            f'Missing "request_token.{field}". '
            "The property is required to generate access token"
        )
        self.field: str = field

    def to_payload(self) -> dict[str, Any]:
        return {**super().to_payload(), "field": self.field}


class StateMismatchError(OAuthClientError):
    """Raised when the CSRF state cannot be verified after the redirect."""

    code = "E_OAUTH_STATE_MISMATCH"
    status = 400
    default_message = "Unable to verify re-redirect state"


class MissingTokenError(OAuthClientError):
    """Raised when the authorization server response lacks the token fields.

    ``response`` holds the parsed response minus the token fields so callers
    can surface it for debugging.
    """

    code = "E_OAUTH_MISSING_TOKEN"
    status = 400
    oauth2_message: ClassVar[str] = 'Invalid oauth2 response. Missing "access_token"'
    oauth1_message: ClassVar[str] = (
        'Invalid oauth1 response. Missing "oauth_token" and "oauth_token_secret"'
    )

    def __init__(self, message: str, *, response: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.response: dict[str, Any] = dict(response or {})


class ResponseFormatError(OAuthClientError):
    """Raised when a JSON response body is malformed or not an object."""

    code = "E_OAUTH_RESPONSE_FORMAT"
    status = 502

    def __init__(self, body: Any, message: str | None = None) -> None:
        super().__init__(
            message
            or f"Expected a JSON object from the authorization server, got {type(body).__name__}"
        )
        self.body: Any = body


class TransportError(OAuthClientError):
    """Raised when the outbound HTTP call fails or returns a non-2xx status."""

    code = "E_OAUTH_TRANSPORT"
    status = 502

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code: int | None = status_code
        self.body: str | None = body

    def to_payload(self) -> dict[str, Any]:
        return {**super().to_payload(), "status_code": self.status_code}
