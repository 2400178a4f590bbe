"""Per-browser session state: the signed-in user and the active profile.

Pages build a ``SessionContext`` over NiceGUI's ``app.storage.user`` and
pass it to whatever needs the current user or profile. Tests pass a plain
dict. The context is populated by a successful magic-link exchange or by
creating/loading a profile, and cleared on sign-out.

Saved profiles stay in storage across sign-out so they can be re-loaded by
name from ``/create-profile``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from nestro.auth.models import Profile, User

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from nestro.auth.models import Authenticated
    from nestro.auth.protocol import SessionServiceProtocol

logger = logging.getLogger(__name__)

_USER_KEY = "auth_user"
_SESSION_TOKEN_KEY = "session_token"
_PROFILE_KEY = "profile"
_SAVED_PROFILES_KEY = "saved_profiles"

DEPARTMENTS = (
    "Computer Science",
    "Information Technology",
    "Business Administration",
    "Law",
    "Medicine",
    "Engineering",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "Nature",
    "Geology",
)
STAGES = ("First", "Second", "Third", "Fourth", "Fifth", "Sixth")


class ProfileValidationError(ValueError):
    """Profile form input was rejected.

    Attributes:
        message_key: Translation key for the user-facing message.
    """

    def __init__(self, message_key: str) -> None:
        super().__init__(message_key)
        self.message_key = message_key


class SessionContext:
    """Current user and profile, backed by a mutable mapping."""

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    def _discard(self, key: str) -> None:
        logger.warning("Discarding malformed session entry: %s", key)
        self._storage.pop(key, None)

    @property
    def user(self) -> User | None:
        data = self._storage.get(_USER_KEY)
        if not data:
            return None
        try:
            return User(id=data["id"], email=data.get("email"))
        except (KeyError, TypeError, AttributeError):
            self._discard(_USER_KEY)
            return None

    @property
    def session_token(self) -> str | None:
        return self._storage.get(_SESSION_TOKEN_KEY)

    @property
    def profile(self) -> Profile | None:
        data = self._storage.get(_PROFILE_KEY)
        if not data:
            return None
        try:
            return Profile.from_dict(data)
        except TypeError:
            self._discard(_PROFILE_KEY)
            return None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def establish(self, outcome: Authenticated) -> None:
        """Record the user from a successful session exchange."""
        logger.info(
            "Session established: member_id=%s, email=%s",
            outcome.user.id,
            outcome.user.email,
        )
        self._storage[_USER_KEY] = {"id": outcome.user.id, "email": outcome.user.email}
        if outcome.session_token:
            self._storage[_SESSION_TOKEN_KEY] = outcome.session_token

    def set_profile(self, profile: Profile | None) -> None:
        if profile is None:
            self._storage.pop(_PROFILE_KEY, None)
            return
        self._storage[_PROFILE_KEY] = profile.to_dict()

    # ------------------------------------------------------------------
    # Name-only profiles
    # ------------------------------------------------------------------
    def saved_profile_names(self) -> list[str]:
        saved = self._storage.get(_SAVED_PROFILES_KEY)
        if not isinstance(saved, dict):
            return []
        return list(saved)

    def _saved_profiles(self) -> dict[str, dict[str, Any]]:
        saved = self._storage.get(_SAVED_PROFILES_KEY)
        return dict(saved) if isinstance(saved, dict) else {}

    def _saved_profile(self, name: str) -> Profile | None:
        saved = self._saved_profiles()
        if name not in saved:
            return None
        try:
            return Profile.from_dict(saved[name])
        except TypeError:
            logger.warning("Discarding malformed saved profile: %s", name)
            del saved[name]
            self._storage[_SAVED_PROFILES_KEY] = saved
            return None

    def create_profile(
        self,
        name: str,
        department: str,
        stage: str,
        *,
        language: str = "ku",
    ) -> Profile:
        """Create (or reuse) a name-only profile and make it active.

        A saved profile with the same name is reused as-is.

        Raises:
            ProfileValidationError: If name, department or stage is missing.
        """
        name = name.strip()
        if not name:
            raise ProfileValidationError("auth.nameRequired")
        if not department:
            raise ProfileValidationError("auth.departmentRequired")
        if not stage:
            raise ProfileValidationError("auth.stageRequired")

        profile = self._saved_profile(name)
        if profile is not None:
            logger.info("Profile already exists, using it: %s", name)
        else:
            profile = Profile(
                id=str(uuid4()),
                username=name,
                full_name=name,
                department=department,
                stage=stage,
                language_preference=language,
            )
            saved = self._saved_profiles()
            saved[name] = profile.to_dict()
            self._storage[_SAVED_PROFILES_KEY] = saved
            logger.info("New profile created: id=%s, name=%s", profile.id, name)

        self.set_profile(profile)
        return profile

    def load_profile_by_name(self, name: str) -> Profile | None:
        """Activate a saved profile. Returns None if no profile has that name."""
        profile = self._saved_profile(name)
        if profile is None:
            logger.warning("Profile not found: %s", name)
            return None
        self.set_profile(profile)
        return profile

    async def sign_out(self, service: SessionServiceProtocol | None = None) -> None:
        """Clear the user and active profile, revoking the provider session.

        Local state is cleared even when revocation fails; the failure is
        logged and not raised.
        """
        token = self.session_token
        try:
            if token and service is not None:
                await service.sign_out(token)
        except Exception:
            logger.exception("Provider sign-out failed; clearing local session")
        finally:
            self._storage.pop(_USER_KEY, None)
            self._storage.pop(_SESSION_TOKEN_KEY, None)
            self._storage.pop(_PROFILE_KEY, None)
