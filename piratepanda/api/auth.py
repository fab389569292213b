"""
Access token checks for protected routes.

Tokens are read from the ``Authorization`` header first and the ``token``
query parameter second; when both are sent the header wins. A ``Bearer``
scheme prefix on the header is optional.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request

from piratepanda.core.errors import TokenVerificationError
from piratepanda.dependencies import get_token_codec
from piratepanda.services import AccessTokenCodec, Identity, VerifiedToken

logger = logging.getLogger(__name__)

_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def extract_token(request: Request) -> Optional[str]:
    """Return the candidate token sent with ``request``, if any."""
    header = request.headers.get("authorization", "").strip()
    if header[:7].lower() == "bearer ":
        header = header[7:].strip()
    if header:
        return header
    return request.query_params.get("token") or None


def _verify(request: Request, codec: AccessTokenCodec, token: str) -> VerifiedToken:
    try:
        verified = codec.verify(token)
    except TokenVerificationError as exc:
        logger.info(
            "Rejected access token for %s %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        raise
    request.state.identity = verified.identity
    return verified


async def require_identity(
    request: Request,
    codec: Annotated[AccessTokenCodec, Depends(get_token_codec)],
) -> Identity:
    """Resolve the caller's identity or stop the request with a 401."""
    token = extract_token(request)
    if token is None:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Missing authentication",
            headers=_CHALLENGE,
        )
    try:
        verified = _verify(request, codec, token)
    except TokenVerificationError:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Invalid token",
            headers=_CHALLENGE,
        ) from None
    return verified.identity


async def optional_identity(
    request: Request,
    codec: Annotated[AccessTokenCodec, Depends(get_token_codec)],
) -> Optional[Identity]:
    """Try-mode variant of :func:`require_identity`; failures yield ``None``."""
    token = extract_token(request)
    if token is None:
        return None
    try:
        return _verify(request, codec, token).identity
    except TokenVerificationError:
        return None


CurrentIdentity = Annotated[Identity, Depends(require_identity)]
OptionalIdentity = Annotated[Optional[Identity], Depends(optional_identity)]

__all__ = [
    "CurrentIdentity",
    "OptionalIdentity",
    "extract_token",
    "optional_identity",
    "require_identity",
]
