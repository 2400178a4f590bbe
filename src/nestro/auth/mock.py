"""Mock session service for testing.

Provides a deterministic implementation of SessionServiceProtocol that
needs no Stytch credentials. Any email can authenticate through the
``mock-token-{email}`` token format.
"""

from __future__ import annotations

import hashlib

from nestro.auth.models import Authenticated, Failed, SessionOutcome, User
from nestro.auth.tokens import reject_token

MOCK_VALID_TOKEN = "mock-valid-token"
MOCK_DEFAULT_EMAIL = "test@example.com"
MOCK_TOKEN_PREFIX = "mock-token-"


def _email_to_member_id(email: str) -> str:
    """Generate a deterministic member ID from an email."""
    return f"mock-member-{hashlib.md5(email.encode()).hexdigest()[:8]}"


def _email_to_session_token(email: str) -> str:
    """Generate a deterministic session token from an email."""
    return f"mock-session-{hashlib.md5(email.encode()).hexdigest()[:12]}"


class MockSessionService:
    """Mock implementation of SessionServiceProtocol.

    Token Formats:
        - "mock-valid-token" - authenticates as test@example.com
        - "mock-token-{email}" - authenticates as that email

    Anything else fails with ``invalid_token``.
    """

    def __init__(self) -> None:
        # session_token -> email
        self._active_sessions: dict[str, str] = {}

    async def get_session(self, token: str | None) -> SessionOutcome:
        rejected = reject_token(token)
        if rejected is not None:
            return rejected
        assert token is not None

        email: str | None = None
        if token.startswith(MOCK_TOKEN_PREFIX):
            email = token[len(MOCK_TOKEN_PREFIX) :]
        elif token == MOCK_VALID_TOKEN:
            email = MOCK_DEFAULT_EMAIL

        if not email:
            return Failed(reason="invalid_token")

        session_token = _email_to_session_token(email)
        self._active_sessions[session_token] = email
        return Authenticated(
            user=User(id=_email_to_member_id(email), email=email),
            session_token=session_token,
        )

    async def sign_out(self, session_token: str) -> None:
        self._active_sessions.pop(session_token, None)

    def is_active(self, session_token: str) -> bool:
        """Whether ``session_token`` was issued and not yet revoked."""
        return session_token in self._active_sessions
