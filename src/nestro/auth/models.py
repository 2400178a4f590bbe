"""Data models for session outcomes, users and profiles.

A session exchange produces a SessionOutcome: either ``Authenticated``
carrying the user, or ``Failed`` carrying a short error type.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class User:
    """An authenticated identity.

    Attributes:
        id: Provider member ID.
        email: The member's email address, if known.
    """

    id: str
    email: str | None = None


@dataclass(frozen=True)
class Profile:
    """A name-only student profile.

    Attributes:
        id: Profile UUID as a string.
        username: Display name, also the lookup key for saved profiles.
        full_name: Full name; name-only profiles copy the username.
        department: Academic department.
        stage: Year of study ("First" .. "Sixth").
        language_preference: UI language code.
    """

    id: str
    username: str
    full_name: str
    department: str = ""
    stage: str = ""
    language_preference: str = "ku"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        return cls(**data)


@dataclass(frozen=True)
class Authenticated:
    """Session exchange succeeded.

    Attributes:
        user: The authenticated identity.
        session_token: Provider session token for later revocation.
    """

    user: User
    session_token: str | None = None


@dataclass(frozen=True)
class Failed:
    """Session exchange failed.

    Attributes:
        reason: Error type, e.g. ``"invalid_token"``.
    """

    reason: str


type SessionOutcome = Authenticated | Failed
