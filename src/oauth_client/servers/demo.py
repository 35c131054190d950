"""Example Starlette app running both flows end to end.

Handlers are intentionally thin:

1. Parse and validate HTTP-layer parameters.
2. Delegate to :class:`~oauth_client.oauth1.client.Oauth1Client` /
   :class:`~oauth_client.oauth2.client.Oauth2Client`.
3. Return an appropriate Starlette ``Response`` type.

Routes (``base_path`` defaults to ``/auth``)::

    GET {base}/oauth1/redirect   GET {base}/oauth1/callback
    GET {base}/oauth2/redirect   GET {base}/oauth2/callback

The OAuth2 ``state`` and the OAuth1 request token pair are kept in signed
cookies between the redirect and the callback.

SECURITY NOTE
-------------
No raw secrets (state, token secrets, access tokens, client secrets) are
ever logged.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Final

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.routing import Route

from oauth_client.errors import OAuthClientError
from oauth_client.models import ClientConfig, Oauth1ClientConfig, RequestToken
from oauth_client.oauth1.client import Oauth1Client
from oauth_client.oauth2.client import Oauth2Client
from oauth_client.servers.cookies import InvalidSignedValueError, sign_value, unsign_value

_LOG = logging.getLogger("oauth-client.servers.demo")

COOKIE_SECRET_ENV: Final[str] = "OAUTH_DEMO_COOKIE_SECRET"
OAUTH1_TOKEN_COOKIE: Final[str] = "oauth1_token"
OAUTH1_SECRET_COOKIE: Final[str] = "oauth1_token_secret"
OAUTH2_STATE_COOKIE: Final[str] = "oauth2_state"
_COOKIE_MAX_AGE: Final[int] = 600


def _resolve_cookie_secret(cookie_secret: str | None) -> str:
    secret = cookie_secret or os.getenv(COOKIE_SECRET_ENV)
    if not secret:
        secret = uuid.uuid4().hex
        _LOG.warning(
            "Environment variable %s not set – generated transient secret. "
            "Pending logins will break after process restart.",
            COOKIE_SECRET_ENV,
        )
    return secret


async def _oauth_error(request: Request, exc: OAuthClientError) -> Response:
    _LOG.warning("OAuth flow failed on %s: %s", request.url.path, exc.code)
    return JSONResponse(exc.to_payload(), status_code=exc.status)


def _not_configured(flow: str) -> JSONResponse:
    return JSONResponse({"error": f"{flow} client not configured"}, status_code=404)


def create_demo_app(
    oauth1_client: Oauth1Client | None = None,
    oauth2_client: Oauth2Client | None = None,
    *,
    base_path: str = "/auth",
    cookie_secret: str | None = None,
) -> Starlette:
    """Return a Starlette app exposing redirect/callback routes for the given clients."""
    secret = _resolve_cookie_secret(cookie_secret)

    def _set_cookie(response: Response, name: str, value: str) -> None:
        response.set_cookie(
            name,
            sign_value(value, secret),
            max_age=_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )

    def _read_cookie(request: Request, name: str) -> str | None:
        raw = request.cookies.get(name)
        if raw is None:
            return None
        try:
            return unsign_value(raw, secret)
        except InvalidSignedValueError:
            _LOG.info("Ignoring cookie %s with invalid signature", name)
            return None

    # ----- OAuth1 ---------------------------------------------------------- #
    async def _oauth1_redirect(request: Request) -> Response:
        if oauth1_client is None:
            return _not_configured("oauth1")

        request_token = await oauth1_client.get_request_token()
        url = oauth1_client.get_redirect_url(
            lambda builder: builder.param("oauth_token", request_token.token)
        )
        response = RedirectResponse(url, status_code=303)
        _set_cookie(response, OAUTH1_TOKEN_COOKIE, request_token.token)
        _set_cookie(response, OAUTH1_SECRET_COOKIE, request_token.secret)
        return response

    async def _oauth1_callback(request: Request) -> Response:
        if oauth1_client is None:
            return _not_configured("oauth1")

        oauth_token = request.query_params.get("oauth_token")
        oauth_verifier = request.query_params.get("oauth_verifier")
        if not oauth_token:
            return JSONResponse({"error": 'Missing "oauth_token"'}, status_code=400)
        if not oauth_verifier:
            return JSONResponse({"error": 'Missing "oauth_verifier"'}, status_code=400)

        stored_token = _read_cookie(request, OAUTH1_TOKEN_COOKIE)
        stored_secret = _read_cookie(request, OAUTH1_SECRET_COOKIE)
        oauth1_client.verify_state(stored_token, oauth_token)

        access_token = await oauth1_client.get_access_token(
            RequestToken(token=stored_token or "", secret=stored_secret or ""),
            lambda req: req.oauth1_param("oauth_verifier", oauth_verifier),
        )
        response = JSONResponse(access_token.to_dict())
        response.delete_cookie(OAUTH1_TOKEN_COOKIE)
        response.delete_cookie(OAUTH1_SECRET_COOKIE)
        return response

    # ----- OAuth2 ---------------------------------------------------------- #
    async def _oauth2_redirect(request: Request) -> Response:
        if oauth2_client is None:
            return _not_configured("oauth2")

        state = oauth2_client.get_state()
        url = oauth2_client.get_redirect_url(lambda builder: builder.param("state", state))
        response = RedirectResponse(url, status_code=303)
        _set_cookie(response, OAUTH2_STATE_COOKIE, state)
        return response

    async def _oauth2_callback(request: Request) -> Response:
        if oauth2_client is None:
            return _not_configured("oauth2")

        # provider-side errors first (e.g. access_denied)
        oauth_error = request.query_params.get("error")
        if oauth_error:
            return JSONResponse(
                {
                    "error": oauth_error,
                    "error_description": request.query_params.get("error_description", ""),
                },
                status_code=400,
            )

        oauth2_client.verify_state(
            _read_cookie(request, OAUTH2_STATE_COOKIE),
            request.query_params.get("state"),
        )

        code = request.query_params.get("code")
        if not code:
            return JSONResponse({"error": 'Missing "code"'}, status_code=400)

        access_token = await oauth2_client.get_access_token(
            lambda req: req.field("code", code)
        )
        _LOG.info("OAuth2 callback completed")
        response = JSONResponse(access_token.to_dict())
        response.delete_cookie(OAUTH2_STATE_COOKIE)
        return response

    routes = [
        Route(f"{base_path}/oauth1/redirect", _oauth1_redirect, methods=["GET"]),
        Route(f"{base_path}/oauth1/callback", _oauth1_callback, methods=["GET"]),
        Route(f"{base_path}/oauth2/redirect", _oauth2_redirect, methods=["GET"]),
        Route(f"{base_path}/oauth2/callback", _oauth2_callback, methods=["GET"]),
    ]
    return Starlette(routes=routes, exception_handlers={OAuthClientError: _oauth_error})


def create_demo_app_from_env(*, base_path: str = "/auth") -> Starlette:
    """Build the demo app from ``OAUTH1_*`` / ``OAUTH2_*`` environment variables.

    A flow whose ``*_CLIENT_ID`` is unset answers 404.
    """
    oauth1_config = Oauth1ClientConfig.from_env(prefix="OAUTH1_")
    oauth2_config = ClientConfig.from_env(prefix="OAUTH2_")
    return create_demo_app(
        Oauth1Client(oauth1_config) if oauth1_config else None,
        Oauth2Client(oauth2_config) if oauth2_config else None,
        base_path=base_path,
    )
