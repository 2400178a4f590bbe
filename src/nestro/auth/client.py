"""Stytch B2B wrapper implementing the session service.

Magic-link tokens arriving at ``/auth/callback`` are exchanged through the
Stytch SDK; provider errors become ``Failed`` outcomes carrying the Stytch
error type.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stytch import B2BClient
from stytch.core.response_base import StytchError

from nestro.auth.models import Authenticated, Failed, SessionOutcome, User
from nestro.auth.tokens import reject_token

if TYPE_CHECKING:
    from nestro.config import StytchConfig

logger = logging.getLogger(__name__)


class StytchSessionService:
    """Session service backed by Stytch B2B magic links and sessions."""

    def __init__(
        self,
        project_id: str,
        secret: str,
        *,
        environment: str = "test",
        session_duration_minutes: int = 60 * 24 * 7,
    ) -> None:
        """Initialize the Stytch client.

        Args:
            project_id: Stytch project ID.
            secret: Stytch secret key.
            environment: Either "test" or "live".
            session_duration_minutes: Lifetime of sessions minted on exchange.
        """
        self._client = B2BClient(
            project_id=project_id,
            secret=secret,
            environment=environment,
        )
        self._session_duration_minutes = session_duration_minutes

    @classmethod
    def from_config(cls, config: StytchConfig) -> StytchSessionService:
        """Build from the ``stytch`` settings section.

        Raises:
            ValueError: If no project ID is configured.
        """
        if not config.project_id:
            msg = (
                "STYTCH__PROJECT_ID is required unless DEV__AUTH_MOCK=true. "
                "Set STYTCH__PROJECT_ID and STYTCH__SECRET in .env."
            )
            raise ValueError(msg)
        return cls(
            project_id=config.project_id,
            secret=config.secret.get_secret_value(),
            environment=config.environment,
            session_duration_minutes=config.session_duration_minutes,
        )

    async def get_session(self, token: str | None) -> SessionOutcome:
        """Exchange a magic-link token for a member session.

        Args:
            token: The token from the magic link callback URL.

        Returns:
            Authenticated with the member, or Failed with the error type.
        """
        rejected = reject_token(token)
        if rejected is not None:
            return rejected
        assert token is not None

        try:
            response = await self._client.magic_links.authenticate_async(
                magic_links_token=token,
                session_duration_minutes=self._session_duration_minutes,
            )
        except StytchError as e:
            logger.warning(
                "Magic link exchange failed",
                extra={"error_type": e.details.error_type},
            )
            return Failed(reason=e.details.error_type)

        if not response.member_authenticated:
            logger.info("MFA required for member %s", response.member_id)
            return Failed(reason="mfa_required")

        return Authenticated(
            user=User(
                id=response.member_id,
                email=response.member.email_address,
            ),
            session_token=response.session_token,
        )

    async def sign_out(self, session_token: str) -> None:
        """Revoke a member session.

        Revocation errors are logged; the local session is cleared by the
        caller either way.
        """
        try:
            await self._client.sessions.revoke_async(session_token=session_token)
        except StytchError as e:
            logger.warning(
                "Session revoke failed",
                extra={"error_type": e.details.error_type},
            )
