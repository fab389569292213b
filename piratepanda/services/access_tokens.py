"""Issue and verify the signed access tokens handed out by /login."""

from __future__ import annotations

import binascii
import time
from dataclasses import dataclass
from typing import Union

import jwt
from jwt.utils import base64url_decode, base64url_encode

from piratepanda.core.errors import BadSignature, Expired, Malformed

Identity = Union[int, str]


@dataclass(frozen=True)
class VerifiedToken:
    """Claims of a token whose signature and expiry have been checked."""

    identity: Identity
    expires_at: int


class AccessTokenCodec:
    """Sign ``{id, exp}`` payloads with a shared secret and check them back."""

    def __init__(self, *, secret: str, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("Token signing secret must be provided.")
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, identity: Identity, ttl_seconds: int) -> str:
        """Return a token for ``identity`` that expires ``ttl_seconds`` from now."""
        expires_at = int(time.time()) + int(ttl_seconds)
        payload = {"id": identity, "exp": expires_at}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> VerifiedToken:
        """
        Check the signature and expiry of ``token``.

        Raises ``BadSignature``, ``Expired`` or ``Malformed``. Tokens using any
        algorithm other than the configured one, ``none`` included, count as
        badly signed.
        """
        if _signature_segment_altered(token):
            raise BadSignature("Token signature verification failed.")
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise Expired("Token has expired.") from exc
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise BadSignature("Token signature verification failed.") from exc
        except jwt.InvalidTokenError as exc:
            raise Malformed(f"Token could not be decoded: {exc}") from exc

        identity = claims["id"]
        if isinstance(identity, bool) or not isinstance(identity, (int, str)):
            raise Malformed("Token identity claim must be a string or integer.")
        return VerifiedToken(identity=identity, expires_at=int(claims["exp"]))


def _signature_segment_altered(token: str) -> bool:
    """
    True when header and payload decode but the signature segment is not a
    canonical base64url string, i.e. its characters were changed in transit.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return False
    header, payload, signature = parts
    try:
        base64url_decode(header)
        base64url_decode(payload)
    except (binascii.Error, ValueError):
        return False
    try:
        decoded = base64url_decode(signature)
    except (binascii.Error, ValueError):
        return True
    return base64url_encode(decoded).decode("ascii") != signature


__all__ = ["AccessTokenCodec", "Identity", "VerifiedToken"]
