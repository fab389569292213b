"""
Read-only user directory.

The service has no user database; profiles come from a fixed table built at
import time. Lookups go through the ``UserDirectory`` protocol so a real
store can replace the table without touching the routes.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from piratepanda.services.access_tokens import Identity


class UserProfile(BaseModel):
    """A user known to the service."""

    model_config = ConfigDict(frozen=True)

    id: Identity
    name: str


class UserDirectory(Protocol):
    def lookup(self, identity: Identity) -> Optional[UserProfile]:
        ...


class StaticUserDirectory:
    """In-memory directory keyed by the string form of each identity."""

    def __init__(self, profiles: Iterable[UserProfile]) -> None:
        self._profiles: Mapping[str, UserProfile] = {
            str(profile.id): profile for profile in profiles
        }

    def lookup(self, identity: Identity) -> Optional[UserProfile]:
        """Return the profile for ``identity`` or ``None`` when unknown."""
        return self._profiles.get(str(identity))

    def __len__(self) -> int:
        return len(self._profiles)


DEFAULT_PROFILES = (
    UserProfile(id=1, name="Jen Jones"),
    UserProfile(id=2, name="Ada Lovelace"),
    UserProfile(id="114874691531207529332", name="Robin"),
)


__all__ = ["DEFAULT_PROFILES", "StaticUserDirectory", "UserDirectory", "UserProfile"]
