"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Everything is derived from the settings object attached to the application,
so a test can build an app around fixture settings and get matching services.
"""

from typing import Annotated

from fastapi import Depends

from piratepanda.clients import GoogleOAuthClient
from piratepanda.core.config import AppSettings
from piratepanda.services import (
    DEFAULT_PROFILES,
    AccessTokenCodec,
    GoogleLoginFlow,
    StateCookieCipher,
    StaticUserDirectory,
    UserDirectory,
)

from .config import get_app_settings

Settings = Annotated[AppSettings, Depends(get_app_settings)]

_DIRECTORY = StaticUserDirectory(DEFAULT_PROFILES)


def get_token_codec(settings: Settings) -> AccessTokenCodec:
    """Provide the access token codec keyed with the signing secret."""
    return AccessTokenCodec(
        secret=settings.security.jwt_secret,
        algorithm=settings.security.jwt_algorithm,
    )


def get_user_directory() -> UserDirectory:
    """Provide the read-only user directory."""
    return _DIRECTORY


def get_state_cookie_cipher(settings: Settings) -> StateCookieCipher:
    """Provide the cipher protecting the OAuth handshake cookie."""
    return StateCookieCipher(secret=settings.oauth.cookie_secret)


def get_google_oauth_client(settings: Settings) -> GoogleOAuthClient:
    """Create the Google OAuth client."""
    return GoogleOAuthClient(settings.google, settings.oauth)


def get_login_flow(
    settings: Settings,
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
    state_cipher: Annotated[StateCookieCipher, Depends(get_state_cookie_cipher)],
    token_codec: Annotated[AccessTokenCodec, Depends(get_token_codec)],
) -> GoogleLoginFlow:
    """Build the login flow from its collaborators."""
    return GoogleLoginFlow(
        settings=settings,
        oauth_client=oauth_client,
        state_cipher=state_cipher,
        token_codec=token_codec,
    )


__all__ = [
    "get_google_oauth_client",
    "get_login_flow",
    "get_state_cookie_cipher",
    "get_token_codec",
    "get_user_directory",
]
