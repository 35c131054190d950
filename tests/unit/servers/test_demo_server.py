"""
Unit tests for the demo Starlette app wiring both flows.

The authorization server is an ``httpx.MockTransport`` handler and the app is
driven through ``httpx.ASGITransport``.  Coverage:
* OAuth1 redirect / callback round-trip with signed cookies
* OAuth2 redirect / callback round-trip with signed state cookie
* HTTP-layer validation and error mapping
* Unconfigured flows and env-driven app construction
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, unquote, urlsplit

import httpx
import pytest

from oauth_client.models import ClientConfig, Oauth1ClientConfig
from oauth_client.oauth1.client import Oauth1Client
from oauth_client.oauth2.client import Oauth2Client
from oauth_client.servers.cookies import sign_value
from oauth_client.servers.demo import (
    COOKIE_SECRET_ENV,
    OAUTH2_STATE_COOKIE,
    create_demo_app,
    create_demo_app_from_env,
)

# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #
COOKIE_SECRET = "test-cookie-secret"
BASE_URL = "http://testserver"

OAUTH1_CONFIG = Oauth1ClientConfig(
    client_id="ck",
    client_secret="cs",
    callback_url=f"{BASE_URL}/auth/oauth1/callback",
    request_token_url="https://api.example/oauth/request_token",
    authorize_url="https://api.example/oauth/authorize",
    access_token_url="https://api.example/oauth/access_token",
)
OAUTH2_CONFIG = ClientConfig(
    client_id="abc",
    client_secret="shh",
    callback_url=f"{BASE_URL}/auth/oauth2/callback",
    authorize_url="https://auth.example/authorize",
    access_token_url="https://auth.example/token",
)


def query_of(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query)


def deleted_cookie(response: httpx.Response, name: str) -> bool:
    return any(
        header.startswith(f"{name}=") and "Max-Age=0" in header
        for header in response.headers.get_list("set-cookie")
    )


# --------------------------------------------------------------------------- #
# Fixtures                                                                    #
# --------------------------------------------------------------------------- #
@pytest.fixture()
def auth_server_requests() -> list[httpx.Request]:
    return []


@pytest.fixture()
def auth_server(auth_server_requests: list[httpx.Request]):
    """Fake authorization server answering both flows."""

    def handler(request: httpx.Request) -> httpx.Response:
        auth_server_requests.append(request)
        path = request.url.path
        if path == "/oauth/request_token":
            return httpx.Response(200, text="oauth_token=rt&oauth_token_secret=rs")
        if path == "/oauth/access_token":
            return httpx.Response(
                200, text="oauth_token=at&oauth_token_secret=as&user_id=7"
            )
        if path == "/token":
            return httpx.Response(
                200, json={"access_token": "t2", "token_type": "bearer", "scope": "read"}
            )
        return httpx.Response(404)

    return handler


@pytest.fixture()
def asgi_app(mock_http, auth_server):
    http = mock_http(auth_server)
    return create_demo_app(
        Oauth1Client(OAUTH1_CONFIG, http_client=http),
        Oauth2Client(OAUTH2_CONFIG, http_client=http),
        cookie_secret=COOKIE_SECRET,
    )


@pytest.fixture()
async def client(asgi_app):
    """Async HTTP client bound to the Starlette app."""
    transport = httpx.ASGITransport(app=asgi_app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac


# --------------------------------------------------------------------------- #
# OAuth1                                                                      #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_oauth1_round_trip(client: httpx.AsyncClient, auth_server_requests) -> None:
    resp = await client.get("/auth/oauth1/redirect")

    assert resp.status_code == 303
    location = resp.headers["location"]
    assert location.startswith("https://api.example/oauth/authorize?")
    assert query_of(location) == {"oauth_token": ["rt"]}

    resp = await client.get(
        "/auth/oauth1/callback", params={"oauth_token": "rt", "oauth_verifier": "v1"}
    )

    assert resp.status_code == 200
    assert resp.json() == {"token": "at", "secret": "as", "user_id": "7"}
    assert deleted_cookie(resp, "oauth1_token")
    assert deleted_cookie(resp, "oauth1_token_secret")

    access_request = auth_server_requests[-1]
    authorization = unquote(access_request.headers["Authorization"])
    assert 'oauth_token="rt"' in authorization
    assert 'oauth_verifier="v1"' in authorization


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("params", "error"),
    [
        ({"oauth_verifier": "v1"}, 'Missing "oauth_token"'),
        ({"oauth_token": "rt"}, 'Missing "oauth_verifier"'),
    ],
)
async def test_oauth1_callback_requires_query_params(
    client: httpx.AsyncClient, params, error: str
) -> None:
    resp = await client.get("/auth/oauth1/callback", params=params)

    assert resp.status_code == 400
    assert resp.json() == {"error": error}


@pytest.mark.anyio
async def test_oauth1_callback_rejects_other_token(
    client: httpx.AsyncClient, auth_server_requests
) -> None:
    await client.get("/auth/oauth1/redirect")
    resp = await client.get(
        "/auth/oauth1/callback", params={"oauth_token": "other", "oauth_verifier": "v1"}
    )

    assert resp.status_code == 400
    assert resp.json()["error"] == "E_OAUTH_STATE_MISMATCH"
    # only the request-token call reached the authorization server
    assert len(auth_server_requests) == 1


# --------------------------------------------------------------------------- #
# OAuth2                                                                      #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_oauth2_round_trip(client: httpx.AsyncClient, auth_server_requests) -> None:
    resp = await client.get("/auth/oauth2/redirect")

    assert resp.status_code == 303
    query = query_of(resp.headers["location"])
    assert query["redirect_uri"] == [OAUTH2_CONFIG.callback_url]
    assert query["client_id"] == ["abc"]
    (state,) = query["state"]

    resp = await client.get("/auth/oauth2/callback", params={"code": "c0de", "state": state})

    assert resp.status_code == 200
    assert resp.json() == {"token": "t2", "type": "bearer", "scope": "read"}
    assert deleted_cookie(resp, OAUTH2_STATE_COOKIE)

    (token_request,) = auth_server_requests
    assert parse_qs(token_request.content.decode())["code"] == ["c0de"]


@pytest.mark.anyio
async def test_oauth2_callback_rejects_state_without_cookie(client: httpx.AsyncClient) -> None:
    resp = await client.get("/auth/oauth2/callback", params={"code": "c", "state": "s"})

    assert resp.status_code == 400
    assert resp.json() == {
        "error": "E_OAUTH_STATE_MISMATCH",
        "message": "Unable to verify re-redirect state",
    }


@pytest.mark.anyio
async def test_oauth2_callback_rejects_forged_cookie(
    client: httpx.AsyncClient, auth_server_requests
) -> None:
    client.cookies.set(OAUTH2_STATE_COOKIE, sign_value("s", "attacker-secret"))
    resp = await client.get("/auth/oauth2/callback", params={"code": "c", "state": "s"})

    assert resp.status_code == 400
    assert auth_server_requests == []


@pytest.mark.anyio
async def test_oauth2_callback_missing_code(client: httpx.AsyncClient) -> None:
    resp = await client.get("/auth/oauth2/redirect")
    (state,) = query_of(resp.headers["location"])["state"]

    resp = await client.get("/auth/oauth2/callback", params={"state": state})

    assert resp.status_code == 400
    assert resp.json() == {"error": 'Missing "code"'}


@pytest.mark.anyio
async def test_oauth2_callback_provider_error(client: httpx.AsyncClient) -> None:
    resp = await client.get(
        "/auth/oauth2/callback",
        params={"error": "access_denied", "error_description": "User said no"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "access_denied", "error_description": "User said no"}


@pytest.mark.anyio
async def test_upstream_failure_maps_to_bad_gateway(mock_http) -> None:
    app = create_demo_app(
        oauth2_client=Oauth2Client(
            OAUTH2_CONFIG,
            http_client=mock_http(lambda r: httpx.Response(500, text="boom")),
        ),
        cookie_secret=COOKIE_SECRET,
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        resp = await ac.get("/auth/oauth2/redirect")
        (state,) = query_of(resp.headers["location"])["state"]
        resp = await ac.get("/auth/oauth2/callback", params={"code": "c", "state": state})

    assert resp.status_code == 502
    assert resp.json()["error"] == "E_OAUTH_TRANSPORT"
    assert resp.json()["status_code"] == 500


# --------------------------------------------------------------------------- #
# App construction                                                            #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_unconfigured_flows_return_404() -> None:
    app = create_demo_app(cookie_secret=COOKIE_SECRET, base_path="/login")
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        for path in ("/login/oauth1/redirect", "/login/oauth2/callback"):
            resp = await ac.get(path)
            assert resp.status_code == 404
        assert resp.json() == {"error": "oauth2 client not configured"}


@pytest.mark.anyio
async def test_app_from_env(monkeypatch, caplog) -> None:
    monkeypatch.delenv("OAUTH1_CLIENT_ID", raising=False)
    monkeypatch.delenv(COOKIE_SECRET_ENV, raising=False)
    monkeypatch.setenv("OAUTH2_CLIENT_ID", "env-client")
    monkeypatch.setenv("OAUTH2_CALLBACK_URL", "https://cb")
    monkeypatch.setenv("OAUTH2_AUTHORIZE_URL", "https://auth.example/authorize")

    with caplog.at_level(logging.WARNING, logger="oauth-client.servers.demo"):
        app = create_demo_app_from_env()
    assert COOKIE_SECRET_ENV in caplog.text

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        resp = await ac.get("/auth/oauth1/redirect")
        assert resp.status_code == 404

        resp = await ac.get("/auth/oauth2/redirect")
        assert resp.status_code == 303
        assert query_of(resp.headers["location"])["client_id"] == ["env-client"]
