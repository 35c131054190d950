"""Generic OAuth 1.0(a) client.

Drives the three-legged flow against any OAuth1 server:

1. :meth:`Oauth1Client.get_request_token` – signed, token-less call returning
   temporary credentials.
2. :meth:`Oauth1Client.get_redirect_url` – URL the user is sent to; the caller
   adds ``oauth_token``.
3. :meth:`Oauth1Client.get_access_token` – signed with the temporary
   credentials, usually carrying ``oauth_verifier``.

The client keeps no state between calls.  Storing the request token pair
between the redirect and the callback is the caller's job.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from oauth_client.clock import Clock, default_clock, unix_timestamp
from oauth_client.errors import (
    ConfigurationError,
    InvalidRequestTokenError,
    MissingTokenError,
)
from oauth_client.http_client import HttpClient, HttpMethod
from oauth_client.log_utils import get_flow_logger, mask_sensitive
from oauth_client.models import (
    Oauth1AccessToken,
    Oauth1ClientConfig,
    RequestToken,
    SignatureInput,
)
from oauth_client.oauth1.signature import generate_signature
from oauth_client.random_token import generate_random
from oauth_client.request import ApiRequest, RequestCallback, run_hooks
from oauth_client.response import normalize_response
from oauth_client.state import verify_state as _verify_state
from oauth_client.url_builder import RedirectCallback, UrlBuilder

NONCE_LENGTH = 32


class Oauth1Client:
    """OAuth 1.0(a) flow driver.

    Parameters
    ----------
    config:
        Consumer credentials and server endpoints.
    http_client:
        Transport; defaults to :class:`~oauth_client.http_client.HttpClient`.
    clock:
        Time source for ``oauth_timestamp``.
    nonce_factory:
        Returns a fresh nonce of the requested length for every signed call.
    configure_request_token, configure_redirect, configure_access_token:
        Optional driver-level hooks run before the caller's callback of the
        matching stage.
    """

    def __init__(
        self,
        config: Oauth1ClientConfig,
        *,
        http_client: HttpClient | None = None,
        clock: Clock = default_clock,
        nonce_factory: Callable[[int], str] = generate_random,
        configure_request_token: RequestCallback | None = None,
        configure_redirect: RedirectCallback | None = None,
        configure_access_token: RequestCallback | None = None,
    ) -> None:
        self.config = config
        self._http = http_client or HttpClient()
        self._clock = clock
        self._nonce_factory = nonce_factory
        self._configure_request_token = configure_request_token
        self._configure_redirect = configure_redirect
        self._configure_access_token = configure_access_token
        self._log = get_flow_logger(flow="oauth1", client_id=config.client_id)

    def verify_state(self, expected: str | None, received: str | None) -> None:
        """Compare the request token stored before the redirect with the one received back."""
        _verify_state(expected, received)

    # ------------------------------------------------------------------ #
    # Flow steps                                                         #
    # ------------------------------------------------------------------ #
    async def get_request_token(self, callback: RequestCallback | None = None) -> RequestToken:
        """Fetch temporary credentials (``oauth_token`` / ``oauth_token_secret``)."""
        url = self.config.request_token_url
        if not url:
            raise ConfigurationError("request_token_url", purpose="get request token")

        def _configure(request: ApiRequest) -> None:
            request.oauth1_param("oauth_callback", self.config.callback_url)
            run_hooks(request, self._configure_request_token, callback)

        response = await self._make_signed_request(url, None, _configure)
        token, secret, extras = _extract_token_pair(response)
        self._log.info("Obtained request token %s", mask_sensitive(token))
        return RequestToken(token=token, secret=secret, extras=extras)

    def get_redirect_url(self, callback: RedirectCallback | None = None) -> str:
        """Return the authorize URL.  No params are pre-defined.

        One must add the ``oauth_token`` param through *callback*::

            client.get_redirect_url(lambda url: url.param("oauth_token", token.token))
        """
        authorize_url = self.config.authorize_url
        if not authorize_url:
            raise ConfigurationError("authorize_url", purpose="make redirect url")

        builder = UrlBuilder(authorize_url)
        run_hooks(builder, self._configure_redirect, callback)

        url = builder.make_url()
        self._log.debug("Built oauth1 redirect url for %s", authorize_url)
        return url

    async def get_access_token(
        self,
        request_token: RequestToken,
        callback: RequestCallback | None = None,
    ) -> Oauth1AccessToken:
        """Exchange the request token pair (and usually ``oauth_verifier``) for an access token.

        Both halves of *request_token* are required even though the protocol
        would allow signing without the secret.
        """
        if not request_token.token:
            raise InvalidRequestTokenError("token")
        if not request_token.secret:
            raise InvalidRequestTokenError("secret")

        url = self.config.access_token_url
        if not url:
            raise ConfigurationError("access_token_url", purpose="generate access token")

        def _configure(request: ApiRequest) -> None:
            run_hooks(request, self._configure_access_token, callback)

        response = await self._make_signed_request(url, request_token, _configure)
        token, secret, extras = _extract_token_pair(response)
        self._log.info("Exchanged request token for access token %s", mask_sensitive(token))
        return Oauth1AccessToken(token=token, secret=secret, extras=extras)

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #
    async def _make_signed_request(
        self,
        url: str,
        request_token: RequestToken | None,
        configure: RequestCallback,
    ) -> dict[str, Any]:
        request = ApiRequest(url)
        configure(request)

        method: HttpMethod = self.config.token_request_method
        result = generate_signature(
            SignatureInput(
                method=method,
                url=url,
                consumer_key=self.config.client_id,
                consumer_secret=self.config.client_secret,
                nonce=self._nonce_factory(NONCE_LENGTH),
                unix_timestamp=unix_timestamp(self._clock),
                params=signing_params(request),
                oauth_token=request_token.token if request_token else None,
                oauth_token_secret=request_token.secret if request_token else None,
            )
        )
        request.header("Authorization", result.authorization)

        body = await self._http.send(method, request)
        response = normalize_response(body, request.response_type)
        self._log.debug("oauth1 response from %s keys=%s", url, sorted(response))
        return response


def signing_params(request: ApiRequest) -> dict[str, Any]:
    """Params covered by the signature: query, oauth1-only and urlencoded body fields."""
    params: dict[str, Any] = {**request.params, **request.oauth1_params}
    if request.request_type == "urlencoded":
        params.update(request.fields)
    return params


def _extract_token_pair(response: Mapping[str, Any]) -> tuple[str, str, dict[str, Any]]:
    extras = dict(response)
    token = extras.pop("oauth_token", None)
    secret = extras.pop("oauth_token_secret", None)
    if not token or not secret:
        raise MissingTokenError(MissingTokenError.oauth1_message, response=extras)
    return str(token), str(secret), extras
