"""Request-scoped navigation values.

Both types are immutable; every request builds a fresh set.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from starlette.requests import Request

type QueryItems = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class NavigationRequest:
    """Path and query parameters of an incoming request.

    Attributes:
        path: URL path, e.g. ``/auth/signin``.
        query: Query parameters in request order. Repeated names are kept.
    """

    path: str
    query: QueryItems = ()

    @classmethod
    def from_request(cls, request: Request) -> NavigationRequest:
        """Build from a Starlette request."""
        return cls(
            path=request.url.path,
            query=tuple(request.query_params.multi_items()),
        )

    def param(self, name: str) -> str | None:
        """Return the first value for ``name``, or None if absent."""
        for key, value in self.query:
            if key == name:
                return value
        return None


@dataclass(frozen=True)
class RedirectTarget:
    """Destination path plus query parameters."""

    path: str
    query: QueryItems = ()

    def with_param(self, name: str, value: str) -> RedirectTarget:
        """Return a copy with ``name`` set to ``value``.

        Existing values for ``name`` are dropped; other parameters keep
        their order and the new pair goes last.
        """
        kept = tuple((k, v) for k, v in self.query if k != name)
        return replace(self, query=(*kept, (name, value)))

    @property
    def url(self) -> str:
        """Path with encoded query string, suitable for a Location header."""
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query)}"
