"""Pre-flight checks for callback tokens."""

from __future__ import annotations

import logging

from nestro.auth.models import Failed

logger = logging.getLogger(__name__)

# Tokens longer than this are rejected before reaching the provider
MAX_TOKEN_LENGTH = 1000


def reject_token(token: str | None) -> Failed | None:
    """Return a Failed outcome if ``token`` must not be exchanged.

    Args:
        token: The token from the callback URL.

    Returns:
        Failed with ``missing_token`` or ``invalid_token``, or None when the
        token is safe to send to the provider.
    """
    if not token:
        return Failed(reason="missing_token")
    if len(token) > MAX_TOKEN_LENGTH:
        logger.warning("Token exceeds max length: %d chars", len(token))
        return Failed(reason="invalid_token")
    return None
