"""Edge guard for the legacy sign-in and sign-up routes.

The sign-in and sign-up pages were replaced by name-only profile creation.
Requests to them are redirected to ``/create-profile`` before any page code
runs. The redirect carries ``no_redirect=true``; a request that already has
it passes through, so applying the guard twice never redirects twice.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from nestro.routing.models import NavigationRequest, RedirectTarget

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

AUTH_PREFIX = "/auth/"
GUARDED_PREFIXES = ("/auth/signin", "/auth/signup")
LOOP_BREAKER_PARAM = "no_redirect"
PROFILE_CREATION_PATH = "/create-profile"


def loop_breaker_set(request: NavigationRequest) -> bool:
    """True when the request carries ``no_redirect=true``."""
    return request.param(LOOP_BREAKER_PARAM) == "true"


def evaluate(request: NavigationRequest) -> RedirectTarget | None:
    """Decide whether a request under ``/auth/`` must be redirected.

    Args:
        request: The incoming path and query.

    Returns:
        The redirect target, or None to let the request through.
    """
    if not request.path.startswith(GUARDED_PREFIXES):
        return None
    if loop_breaker_set(request):
        return None

    target = RedirectTarget(PROFILE_CREATION_PATH, request.query).with_param(
        LOOP_BREAKER_PARAM, "true"
    )
    logger.info("Edge guard redirecting %s to %s", request.path, target.url)
    return target


class EdgeGuardMiddleware(BaseHTTPMiddleware):
    """Apply ``evaluate`` to requests under the auth prefix only.

    Other paths go straight to ``call_next`` without building a
    NavigationRequest.
    """

    def __init__(self, app: ASGIApp, prefix: str = AUTH_PREFIX) -> None:
        super().__init__(app)
        self._prefix = prefix

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(self._prefix):
            return await call_next(request)

        target = evaluate(NavigationRequest.from_request(request))
        if target is None:
            return await call_next(request)
        return RedirectResponse(target.url, status_code=307)
