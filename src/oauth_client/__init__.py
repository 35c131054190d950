"""Client-side toolkit for OAuth 1.0(a) and OAuth 2.0 authorization-code flows.

This package hosts **HTTP-agnostic** building blocks plus two flow drivers.

Sub-modules
-----------
oauth1
    RFC 5849 HMAC-SHA1 signing and the three-legged OAuth1 driver.
oauth2
    Authorization-code OAuth2 driver.
request / url_builder
    Per-call request configuration and redirect URL builder.
http_client
    ``httpx`` based transport.
response
    JSON / urlencoded response normalizer.
state / random_token
    CSRF ``state`` and nonce helpers.
models
    Immutable dataclasses for configs and tokens.
errors
    Exception types raised by the drivers.
clock / log_utils
    Test-friendly time source and structured logging helpers.

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, default_clock  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    InvalidRequestTokenError,
    MissingTokenError,
    OAuthClientError,
    ResponseFormatError,
    StateMismatchError,
    TransportError,
)
from .http_client import HttpClient  # noqa: F401
from .log_utils import get_flow_logger, mask_sensitive  # noqa: F401
from .models import (  # noqa: F401
    ClientConfig,
    Oauth1AccessToken,
    Oauth1ClientConfig,
    Oauth2AccessToken,
    RequestToken,
    SignatureInput,
)
from .oauth1 import Oauth1Client, SignatureResult, generate_signature  # noqa: F401
from .oauth2 import Oauth2Client  # noqa: F401
from .random_token import generate_random  # noqa: F401
from .request import ApiRequest  # noqa: F401
from .response import normalize_response  # noqa: F401
from .state import generate_state, verify_state  # noqa: F401
from .url_builder import UrlBuilder  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "default_clock",
    # errors
    "OAuthClientError",
    "ConfigurationError",
    "InvalidRequestTokenError",
    "MissingTokenError",
    "ResponseFormatError",
    "StateMismatchError",
    "TransportError",
    # transport & request configuration
    "HttpClient",
    "ApiRequest",
    "UrlBuilder",
    "normalize_response",
    # models
    "ClientConfig",
    "Oauth1ClientConfig",
    "RequestToken",
    "Oauth1AccessToken",
    "Oauth2AccessToken",
    "SignatureInput",
    # drivers
    "Oauth1Client",
    "Oauth2Client",
    "SignatureResult",
    "generate_signature",
    # state & randomness
    "generate_random",
    "generate_state",
    "verify_state",
    # logging helpers
    "get_flow_logger",
    "mask_sensitive",
]
