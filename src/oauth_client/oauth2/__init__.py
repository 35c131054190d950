"""OAuth 2.0 authorization-code flow driver."""

from __future__ import annotations

from .client import Oauth2Client  # noqa: F401

__all__ = ["Oauth2Client"]
