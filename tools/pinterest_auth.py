"""Pinterest OAuth: authorization URL, callback parsing and code exchange.

The browser leg of the flow is owned by the platform. The backend finishes the
code exchange itself and redirects to the app's custom scheme with either
``success=true&access_token=...`` or ``error=...``; this module turns that
callback into tokens.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse

import requests
from pydantic import ValidationError

from models.pinterest import PinterestAuthData, PinterestTokenResponse
from tools.errors import PinterestAuthError
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

AUTHORIZE_URL = "https://www.pinterest.com/oauth/"
TOKEN_URL = "https://api.pinterest.com/v5/oauth/token"

AUTHORIZATION_FAILED = "authorization_failed"
TOKEN_EXCHANGE_FAILED = "token_exchange_failed"


class PinterestAuthService:
    def __init__(
        self,
        app_id: str,
        redirect_uri: str,
        scopes: str,
        callback_scheme: str,
        app_secret: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.app_id = app_id
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self.callback_scheme = callback_scheme
        self.app_secret = app_secret
        self.timeout_seconds = timeout_seconds

    def authorization_url(self, state: Optional[str] = None) -> Tuple[str, str]:
        """Return the authorize URL and the ``state`` value embedded in it."""

        state = state or str(uuid.uuid4())
        query = urlencode(
            {
                "client_id": self.app_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": self.scopes,
                "state": state,
            }
        )
        return f"{AUTHORIZE_URL}?{query}", state

    def _callback_params(self, callback_url: str) -> Dict[str, str]:
        parsed = urlparse(callback_url or "")
        if not parsed.scheme or (
            self.callback_scheme and parsed.scheme != self.callback_scheme
        ):
            raise PinterestAuthError(AUTHORIZATION_FAILED, "Invalid callback URL")

        params = {key: values[0] for key, values in parse_qs(parsed.query).items() if values}
        LOGGER.info("Pinterest callback received", extra={"params": sorted(params)})
        return params

    def complete_callback(self, callback_url: str) -> PinterestAuthData:
        """Tokens for a callback, exchanging a bare authorization ``code`` when one is sent.

        Blocking: the exchange talks to Pinterest directly.
        """

        params = self._callback_params(callback_url)
        if "code" in params and params.get("success") != "true" and "error" not in params:
            return self.exchange_code_for_token(params["code"])
        return self._tokens_from_params(params)

    def parse_callback(self, callback_url: str) -> PinterestAuthData:
        """Extract tokens from the custom-scheme callback.

        Raises:
            PinterestAuthError: The callback reports an error, is malformed, or
                uses an unexpected scheme.
        """

        return self._tokens_from_params(self._callback_params(callback_url))

    @staticmethod
    def _tokens_from_params(params: Dict[str, str]) -> PinterestAuthData:
        if params.get("success") == "true":
            expires_raw = params.get("expires_in")
            try:
                expires_in = int(expires_raw) if expires_raw else None
            except ValueError:
                expires_in = None
            return PinterestAuthData(
                access_token=params.get("access_token", ""),
                refresh_token=params.get("refresh_token"),
                expires_in=expires_in,
                scope=params.get("scope"),
            )

        if "error" in params:
            raise PinterestAuthError(AUTHORIZATION_FAILED, params["error"])

        raise PinterestAuthError(AUTHORIZATION_FAILED, "Unknown callback response")

    @instrument_call("pinterest_token_exchange")
    def exchange_code_for_token(self, code: str) -> PinterestAuthData:
        """Exchange an authorization code directly with Pinterest.

        Only used when the app, rather than the backend, holds the app secret.
        """

        if not self.app_secret:
            raise PinterestAuthError(TOKEN_EXCHANGE_FAILED, "Pinterest app secret is not configured")

        try:
            response = requests.post(
                TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                },
                auth=(self.app_id, self.app_secret),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            LOGGER.error("Pinterest token exchange unreachable", extra={"error": str(exc)})
            raise PinterestAuthError(TOKEN_EXCHANGE_FAILED, str(exc)) from exc

        if response.status_code != 200:
            LOGGER.warning(
                "Pinterest token exchange rejected", extra={"status_code": response.status_code}
            )
            raise PinterestAuthError(TOKEN_EXCHANGE_FAILED, "Failed to exchange code for token")

        try:
            token = PinterestTokenResponse.model_validate_json(response.text)
        except ValidationError as exc:
            raise PinterestAuthError(TOKEN_EXCHANGE_FAILED, "Invalid token response") from exc

        return PinterestAuthData(
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            expires_in=token.expires_in,
            scope=token.scope,
        )


__all__ = ["PinterestAuthService", "AUTHORIZATION_FAILED", "TOKEN_EXCHANGE_FAILED"]
