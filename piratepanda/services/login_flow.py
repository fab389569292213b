"""
Google login handshake that ends in an access token.

The flow keeps no server-side state. The anti-forgery nonce travels to Google
as ``state`` and back to us in a sealed cookie; the callback only succeeds
when the two match.
"""

from __future__ import annotations

import hmac
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

import anyio

from piratepanda.clients.google_auth import GoogleOAuthClient, OAuthTokenExchangeError
from piratepanda.core.config import AppSettings
from piratepanda.core.errors import ProviderHandshakeError
from piratepanda.services.access_tokens import AccessTokenCodec
from piratepanda.services.state_cookie import StateCookieCipher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginRedirect:
    """Where to send the browser, plus the cookie that must ride along."""

    authorization_url: str
    state_cookie: str


@dataclass(frozen=True)
class IssuedLogin:
    access_token: str
    identity: str


class GoogleLoginFlow:
    """Drive the three-legged handshake and mint a token on success."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        oauth_client: GoogleOAuthClient,
        state_cipher: StateCookieCipher,
        token_codec: AccessTokenCodec,
    ) -> None:
        self._settings = settings
        self._oauth_client = oauth_client
        self._state_cipher = state_cipher
        self._token_codec = token_codec

    @property
    def callback_url(self) -> str:
        return self._settings.login_callback_url

    @staticmethod
    def is_callback(params: Mapping[str, str]) -> bool:
        """True when the request is Google redirecting back to us."""
        return "code" in params or "error" in params

    def start(self) -> LoginRedirect:
        """Generate a nonce and the consent URL that carries it."""
        nonce = uuid.uuid4().hex
        state_cookie = self._state_cipher.seal(
            {
                "nonce": nonce,
                "issued_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        authorization_url = self._oauth_client.build_authorization_url(
            state=nonce, redirect_uri=self.callback_url
        )
        return LoginRedirect(authorization_url=authorization_url, state_cookie=state_cookie)

    async def complete(
        self, params: Mapping[str, str], state_cookie: Optional[str]
    ) -> IssuedLogin:
        """
        Finish the handshake started by :meth:`start`.

        Raises ``ProviderHandshakeError`` when Google reports an error, the
        state does not check out, or the exchange with Google fails.
        """
        error = params.get("error")
        if error:
            description = params.get("error_description")
            raise ProviderHandshakeError(
                f"Google denied access: {description or error}"
            )

        if not state_cookie:
            raise ProviderHandshakeError("Missing OAuth state cookie.")
        try:
            state = self._state_cipher.unseal(
                state_cookie,
                max_age_seconds=self._settings.oauth.state_ttl_seconds,
            )
        except ValueError as exc:
            raise ProviderHandshakeError(str(exc)) from exc

        expected_nonce = str(state.get("nonce", ""))
        returned_nonce = params.get("state", "")
        if not expected_nonce or not hmac.compare_digest(
            expected_nonce.encode("utf-8"), returned_nonce.encode("utf-8")
        ):
            raise ProviderHandshakeError("Incorrect OAuth state parameter.")

        code = params.get("code")
        if not code:
            raise ProviderHandshakeError("Missing authorization code.")

        timeout = self._settings.oauth.provider_timeout_seconds
        try:
            with anyio.fail_after(timeout):
                google_token = await self._oauth_client.exchange_authorization_code(
                    code, redirect_uri=self.callback_url
                )
                profile = await self._oauth_client.fetch_profile(google_token)
        except TimeoutError as exc:
            raise OAuthTokenExchangeError(
                f"Timed out after {timeout:g}s waiting for Google."
            ) from exc

        access_token = self._token_codec.issue(
            profile.id, self._settings.security.access_token_ttl_seconds
        )
        logger.info(
            "Issued access token for Google account %s (%s)",
            profile.id,
            profile.display_name or "no display name",
        )
        return IssuedLogin(access_token=access_token, identity=profile.id)


__all__ = ["GoogleLoginFlow", "IssuedLogin", "LoginRedirect"]
