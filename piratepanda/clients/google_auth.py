"""
Google OAuth utilities.

These helpers build the consent URL, exchange authorization codes and read
the signed-in user's profile. Every call to Google is bounded by the
configured provider timeout.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from fastapi import status
from pydantic import BaseModel, Field

from piratepanda.core.config import GoogleSettings, OAuthSettings
from piratepanda.core.errors import ProviderHandshakeError


class ProviderProfile(BaseModel):
    """Identity asserted by Google for the signed-in user."""

    id: str = Field(..., description="Stable Google account id (the ``sub`` claim).")
    display_name: Optional[str] = None


class OAuthTokenExchangeError(ProviderHandshakeError):
    """Raised when Google cannot be reached or returns an error."""


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange authorization codes."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._transport = transport

    def build_authorization_url(self, state: str, redirect_uri: str) -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self._google.scopes,
            "state": state,
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._oauth.provider_timeout_seconds,
            transport=self._transport,
        )

    async def exchange_authorization_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for a Google access token."""
        payload = {
            "code": code,
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }

        try:
            async with self._client() as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.TimeoutException as exc:
            raise OAuthTokenExchangeError(
                f"Timed out after {self._oauth.provider_timeout_seconds:g}s "
                "waiting for the token endpoint."
            ) from exc
        except httpx.HTTPError as exc:
            raise OAuthTokenExchangeError(f"Token endpoint unreachable: {exc}") from exc

        if response.status_code != status.HTTP_200_OK:
            raise OAuthTokenExchangeError(_error_message(response))

        access_token = _payload(response).get("access_token")
        if not access_token:
            raise OAuthTokenExchangeError("Incomplete token payload returned from Google.")
        return access_token

    async def fetch_profile(self, access_token: str) -> ProviderProfile:
        """Read the user's profile with a freshly exchanged access token."""
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            async with self._client() as client:
                response = await client.get(self.USERINFO_URL, headers=headers)
        except httpx.TimeoutException as exc:
            raise OAuthTokenExchangeError(
                f"Timed out after {self._oauth.provider_timeout_seconds:g}s "
                "waiting for the userinfo endpoint."
            ) from exc
        except httpx.HTTPError as exc:
            raise OAuthTokenExchangeError(f"Userinfo endpoint unreachable: {exc}") from exc

        if response.status_code != status.HTTP_200_OK:
            raise OAuthTokenExchangeError(_error_message(response))

        data = _payload(response)
        subject = data.get("sub")
        if not subject:
            raise OAuthTokenExchangeError("Google profile is missing the account id.")
        return ProviderProfile(
            id=str(subject),
            display_name=data.get("name"),
        )


def _payload(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise OAuthTokenExchangeError("Google returned a response that is not JSON.") from exc
    if not isinstance(body, dict):
        raise OAuthTokenExchangeError("Google returned an unexpected response.")
    return body


def _error_message(response: httpx.Response) -> str:
    """Prefer Google's ``error_description`` over the raw response body."""
    try:
        body = response.json()
    except ValueError:
        return f"Google responded with HTTP {response.status_code}."
    if not isinstance(body, dict):
        return f"Google responded with HTTP {response.status_code}."
    error = body.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    description = body.get("error_description") or error
    if description:
        return str(description)
    return f"Google responded with HTTP {response.status_code}."


__all__ = [
    "GoogleOAuthClient",
    "OAuthTokenExchangeError",
    "ProviderProfile",
]
