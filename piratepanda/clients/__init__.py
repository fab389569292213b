"""Expose constructed client wrappers."""

from .google_auth import GoogleOAuthClient, OAuthTokenExchangeError, ProviderProfile

__all__ = [
    "GoogleOAuthClient",
    "OAuthTokenExchangeError",
    "ProviderProfile",
]
