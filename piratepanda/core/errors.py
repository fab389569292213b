"""
Exception hierarchy shared by the login flow, token codec and startup code.
"""

from __future__ import annotations


class StartupConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


class ProviderHandshakeError(Exception):
    """Raised when the OAuth handshake with the identity provider fails."""


class TokenVerificationError(Exception):
    """Base class for access tokens that must not be trusted."""


class BadSignature(TokenVerificationError):
    """The token was signed with another key or algorithm, or altered."""


class Expired(TokenVerificationError):
    """The token signature is valid but its ``exp`` claim has passed."""


class Malformed(TokenVerificationError):
    """The token could not be decoded or lacks required claims."""


__all__ = [
    "BadSignature",
    "Expired",
    "Malformed",
    "ProviderHandshakeError",
    "StartupConfigError",
    "TokenVerificationError",
]
