"""Generic OAuth 2.0 authorization-code client."""

from __future__ import annotations

from typing import Any

from oauth_client.clock import Clock, default_clock, unix_timestamp
from oauth_client.errors import ConfigurationError, MissingTokenError
from oauth_client.http_client import HttpClient
from oauth_client.log_utils import get_flow_logger, mask_sensitive
from oauth_client.models import ClientConfig, Oauth2AccessToken
from oauth_client.request import ApiRequest, RequestCallback, run_hooks
from oauth_client.response import normalize_response
from oauth_client.state import generate_state
from oauth_client.state import verify_state as _verify_state
from oauth_client.url_builder import RedirectCallback, UrlBuilder


class Oauth2Client:
    """OAuth 2.0 authorization-code flow driver.

    Example
    -------
    >>> client = Oauth2Client(config)
    >>> state = client.get_state()
    >>> url = client.get_redirect_url(lambda u: u.param("state", state))
    >>> # ... user comes back with ?code=...&state=...
    >>> client.verify_state(state, received_state)
    >>> token = await client.get_access_token(lambda r: r.field("code", code))
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: HttpClient | None = None,
        clock: Clock = default_clock,
        configure_redirect: RedirectCallback | None = None,
        configure_access_token: RequestCallback | None = None,
    ) -> None:
        self.config = config
        self._http = http_client or HttpClient()
        self._clock = clock
        self._configure_redirect = configure_redirect
        self._configure_access_token = configure_access_token
        self._log = get_flow_logger(flow="oauth2", client_id=config.client_id)

    def get_state(self) -> str:
        """Return a new random state value; the caller stores it for :meth:`verify_state`."""
        return generate_state()

    def verify_state(self, expected: str | None, received: str | None) -> None:
        _verify_state(expected, received)

    def get_redirect_url(self, callback: RedirectCallback | None = None) -> str:
        """Return the authorize URL with ``redirect_uri`` and ``client_id`` pre-defined.

        Both defaults can be removed or replaced from *callback* with
        ``clear_param``.
        """
        authorize_url = self.config.authorize_url
        if not authorize_url:
            raise ConfigurationError("authorize_url", purpose="make redirect url")

        builder = UrlBuilder(authorize_url)
        builder.param("redirect_uri", self.config.callback_url)
        builder.param("client_id", self.config.client_id)
        run_hooks(builder, self._configure_redirect, callback)

        url = builder.make_url()
        self._log.debug("Built oauth2 redirect url for %s", authorize_url)
        return url

    async def get_access_token(self, callback: RequestCallback | None = None) -> Oauth2AccessToken:
        """Exchange the authorization code for an access token.

        Pre-defines the ``grant_type``, ``redirect_uri``, ``client_id`` and
        ``client_secret`` fields and expects a JSON response; the caller adds
        ``code`` (and may call ``parse_as("text")`` for urlencoded servers).
        """
        url = self.config.access_token_url
        if not url:
            raise ConfigurationError("access_token_url", purpose="get access token")

        request = ApiRequest(url)
        request.field("grant_type", "authorization_code")
        request.field("redirect_uri", self.config.callback_url)
        request.field("client_id", self.config.client_id)
        request.field("client_secret", self.config.client_secret)
        request.parse_as("json")
        run_hooks(request, self._configure_access_token, callback)

        body = await self._http.post(request)
        response = normalize_response(body, request.response_type)
        self._log.debug("oauth2 access token response keys=%s", sorted(response))

        token = self._build_token(response)
        self._log.info(
            "Exchanged authorization code for access token %s (expires in %ss)",
            mask_sensitive(token.token),
            token.expires_in if token.expires_in is not None else "-",
        )
        return token

    def _build_token(self, response: dict[str, Any]) -> Oauth2AccessToken:
        extras = dict(response)
        access_token = extras.pop("access_token", None)
        token_type = extras.pop("token_type", None)
        expires_in = _coerce_seconds(extras.pop("expires_in", None))
        refresh_token = extras.pop("refresh_token", None)

        if not access_token:
            raise MissingTokenError(MissingTokenError.oauth2_message, response=extras)

        # snapshot taken when the response is parsed
        expires_at = None
        if isinstance(expires_in, int) and not isinstance(expires_in, bool) and expires_in:
            expires_at = unix_timestamp(self._clock) + expires_in
        return Oauth2AccessToken(
            token=str(access_token),
            type=token_type,
            refresh_token=refresh_token,
            expires_in=expires_in,
            expires_at=expires_at,
            extras=extras,
        )


def _coerce_seconds(value: Any) -> Any:
    """Turn numeric strings from urlencoded bodies into ``int``; leave anything else as is."""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
