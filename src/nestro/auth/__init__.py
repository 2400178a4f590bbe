"""Authentication module for Nestro.

Provides the magic-link session exchange (Stytch B2B, or a mock for
testing), the per-browser session context, and the admin dashboard gate.

Usage:
    from nestro.auth import SessionContext, get_session_service

    session = SessionContext(app.storage.user)
    outcome = await get_session_service().get_session(token)
"""

from __future__ import annotations

from nestro.auth.admin import AdminSessionStore
from nestro.auth.callback import CallbackState, MagicLinkCallback
from nestro.auth.context import ProfileValidationError, SessionContext
from nestro.auth.factory import clear_config_cache, get_session_service
from nestro.auth.models import Authenticated, Failed, Profile, SessionOutcome, User
from nestro.auth.protocol import SessionServiceProtocol

__all__ = [
    "AdminSessionStore",
    "Authenticated",
    "CallbackState",
    "Failed",
    "MagicLinkCallback",
    "Profile",
    "ProfileValidationError",
    "SessionContext",
    "SessionOutcome",
    "SessionServiceProtocol",
    "User",
    "clear_config_cache",
    "get_session_service",
]
