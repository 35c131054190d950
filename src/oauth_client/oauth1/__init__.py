"""OAuth 1.0(a) signing and flow driver."""

from __future__ import annotations

from .client import Oauth1Client, signing_params  # noqa: F401
from .signature import SignatureResult, generate_signature  # noqa: F401

__all__ = ["Oauth1Client", "SignatureResult", "generate_signature", "signing_params"]
