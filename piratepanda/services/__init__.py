"""Service layer exports."""

from .access_tokens import AccessTokenCodec, Identity, VerifiedToken
from .login_flow import GoogleLoginFlow, IssuedLogin, LoginRedirect
from .state_cookie import StateCookieCipher
from .user_directory import (
    DEFAULT_PROFILES,
    StaticUserDirectory,
    UserDirectory,
    UserProfile,
)

__all__ = [
    "AccessTokenCodec",
    "DEFAULT_PROFILES",
    "GoogleLoginFlow",
    "Identity",
    "IssuedLogin",
    "LoginRedirect",
    "StateCookieCipher",
    "StaticUserDirectory",
    "UserDirectory",
    "UserProfile",
    "VerifiedToken",
]
