"""Expiring admin session flag.

The admin dashboard is gated by a JSON record in per-browser storage::

    {"isAuthenticated": true, "username": "...", "timestamp": 1700000000000}

with a millisecond timestamp. This is a convenience gate for the dashboard
pages and not an authentication boundary: anything that can write the
storage can open the dashboard.
"""

from __future__ import annotations

import hmac
import json
import logging
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import MutableMapping

logger = logging.getLogger(__name__)

ADMIN_STORAGE_KEY = "nestroAdmin"
DEFAULT_EXPIRY_MS = 24 * 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class AdminSessionStore:
    """Read and write the admin session record.

    Args:
        storage: String-valued mapping holding the JSON record.
        expiry_ms: Session lifetime in milliseconds.
    """

    def __init__(
        self,
        storage: MutableMapping[str, Any],
        expiry_ms: int = DEFAULT_EXPIRY_MS,
    ) -> None:
        self._storage = storage
        self._expiry_ms = expiry_ms

    def _read(self) -> dict[str, Any] | None:
        raw = self._storage.get(ADMIN_STORAGE_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed admin session record")
            self._storage.pop(ADMIN_STORAGE_KEY, None)
            return None
        if not isinstance(data, dict):
            logger.warning("Discarding malformed admin session record")
            self._storage.pop(ADMIN_STORAGE_KEY, None)
            return None
        return data

    def login(
        self,
        username: str,
        password: str,
        *,
        expected_username: str,
        expected_password: str,
        now_ms: int | None = None,
    ) -> bool:
        """Record an admin session if the credentials match.

        An empty expected username or password never matches.
        """
        if not expected_username or not expected_password:
            logger.warning("Admin login attempted but no admin credentials configured")
            return False
        user_ok = hmac.compare_digest(username.encode(), expected_username.encode())
        pass_ok = hmac.compare_digest(password.encode(), expected_password.encode())
        if not (user_ok and pass_ok):
            logger.info("Admin login rejected for username=%s", username)
            return False

        self._storage[ADMIN_STORAGE_KEY] = json.dumps(
            {
                "isAuthenticated": True,
                "username": username,
                "timestamp": now_ms if now_ms is not None else _now_ms(),
            }
        )
        logger.info("Admin login: username=%s", username)
        return True

    def is_authenticated(self, now_ms: int | None = None) -> bool:
        data = self._read()
        if data is None:
            return False
        timestamp = data.get("timestamp")
        if not data.get("isAuthenticated") or not isinstance(timestamp, int | float):
            return False
        now = now_ms if now_ms is not None else _now_ms()
        return now - timestamp < self._expiry_ms

    def username(self) -> str:
        data = self._read()
        if data is None:
            return ""
        return str(data.get("username") or "")

    def logout(self) -> None:
        self._storage.pop(ADMIN_STORAGE_KEY, None)
