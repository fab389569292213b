"""Seal the transient OAuth handshake state into a tamper-proof cookie value."""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken


class StateCookieCipher:
    """Encrypt, authenticate and timestamp small JSON payloads with Fernet."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("OAuth cookie secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        key = base64.urlsafe_b64encode(digest)
        self._fernet = Fernet(key)

    def seal(self, payload: Dict[str, Any]) -> str:
        """Return an opaque cookie value carrying ``payload``."""
        serialized = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        token = self._fernet.encrypt(serialized.encode("utf-8"))
        return token.decode("utf-8")

    def unseal(self, value: str, *, max_age_seconds: int) -> Dict[str, Any]:
        """
        Recover the payload sealed by :meth:`seal`.

        Raises ``ValueError`` when the value was altered, sealed with another
        secret, or is older than ``max_age_seconds``.
        """
        try:
            plaintext = self._fernet.decrypt(value.encode("utf-8"), ttl=max_age_seconds)
        except InvalidToken as exc:
            raise ValueError("OAuth state cookie is invalid or has expired.") from exc
        payload = json.loads(plaintext)
        if not isinstance(payload, dict):
            raise ValueError("OAuth state cookie does not hold an object.")
        return payload


__all__ = ["StateCookieCipher"]
