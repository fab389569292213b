"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_google_oauth_client,
    get_login_flow,
    get_state_cookie_cipher,
    get_token_codec,
    get_user_directory,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_google_oauth_client",
    "get_login_flow",
    "get_state_cookie_cipher",
    "get_token_codec",
    "get_user_directory",
]
