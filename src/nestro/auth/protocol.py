"""Protocol defining the session service interface.

Both StytchSessionService and MockSessionService implement this protocol,
allowing them to be used interchangeably.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from nestro.auth.models import SessionOutcome


class SessionServiceProtocol(Protocol):
    """Protocol for the external session service."""

    async def get_session(self, token: str | None) -> SessionOutcome:
        """Exchange a pending magic-link token for a session.

        Args:
            token: The token from the callback URL, or None if absent.

        Returns:
            Authenticated with the user, or Failed with an error type.
        """
        ...

    async def sign_out(self, session_token: str) -> None:
        """Revoke a session.

        Args:
            session_token: The token returned by a successful exchange.
        """
        ...
