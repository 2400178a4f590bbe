"""Static redirect table for the legacy auth routes.

A coarser layer than the edge guard: exact path match, no loop-breaker,
and the target carries a ``from`` provenance tag instead. Installed only
when ``ROUTING__STATIC_REDIRECTS=true``; the edge guard is authoritative.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from nestro.routing.guard import PROFILE_CREATION_PATH, loop_breaker_set
from nestro.routing.models import NavigationRequest, RedirectTarget

if TYPE_CHECKING:
    from collections.abc import Mapping

    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

PROVENANCE_PARAM = "from"

type Provenance = Literal["signin", "signup"]


def provenance_target(source: Provenance) -> RedirectTarget:
    """Profile-creation target tagged with where the user came from."""
    return RedirectTarget(PROFILE_CREATION_PATH, ((PROVENANCE_PARAM, source),))


STATIC_REDIRECTS: Mapping[str, RedirectTarget] = {
    "/auth/signin": provenance_target("signin"),
    "/auth/signup": provenance_target("signup"),
}


def arrived_via_auth_redirect(request: NavigationRequest) -> bool:
    """True when a profile-creation visit came from a legacy auth route.

    Either layer may have sent it: the edge guard (``no_redirect=true``) or
    the static table / page fallback (``from=signin`` or ``from=signup``).
    """
    if loop_breaker_set(request):
        return True
    return request.param(PROVENANCE_PARAM) in ("signin", "signup")


def forwards_to_profile(request: NavigationRequest, *, has_profile: bool) -> bool:
    """True when a ``/create-profile`` visit should move on to ``/profile``.

    Visitors sent here by an auth redirect always see the form, so the two
    redirects never chase each other.
    """
    return has_profile and not arrived_via_auth_redirect(request)


class StaticRedirectMiddleware(BaseHTTPMiddleware):
    """Temporary (307) redirects for exact matches in a redirect table."""

    def __init__(
        self,
        app: ASGIApp,
        table: Mapping[str, RedirectTarget] = STATIC_REDIRECTS,
    ) -> None:
        super().__init__(app)
        self._table = table

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        target = self._table.get(request.url.path)
        if target is None:
            return await call_next(request)
        logger.debug("Static redirect %s -> %s", request.url.path, target.url)
        return RedirectResponse(target.url, status_code=307)
