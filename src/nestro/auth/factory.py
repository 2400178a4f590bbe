"""Choose the session service for this process.

``DEV__AUTH_MOCK=true`` selects the in-memory mock, shared by every page so
sessions minted on ``/auth/callback`` can be revoked on sign-out. Otherwise
a Stytch-backed service is built from the ``stytch`` settings section.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nestro.config import get_settings

if TYPE_CHECKING:
    from nestro.auth.protocol import SessionServiceProtocol


_mock_service: SessionServiceProtocol | None = None


def get_session_service() -> SessionServiceProtocol:
    """Return the session service selected by settings.

    Raises:
        ValueError: If Stytch is selected but has no project ID.
    """
    global _mock_service  # noqa: PLW0603
    settings = get_settings()

    if settings.dev.auth_mock:
        if _mock_service is None:
            from nestro.auth.mock import MockSessionService

            _mock_service = MockSessionService()
        return _mock_service

    from nestro.auth.client import StytchSessionService

    return StytchSessionService.from_config(settings.stytch)


def clear_config_cache() -> None:
    """Forget cached settings and the shared mock (and its sessions)."""
    global _mock_service  # noqa: PLW0603
    get_settings.cache_clear()
    _mock_service = None
