"""Redirect enforcement for the legacy auth routes.

Usage:
    from nestro.routing import install_redirect_layers

    install_redirect_layers(app, get_settings())

The edge guard is always installed. The static redirect table is added in
front of it when ``ROUTING__STATIC_REDIRECTS=true``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nestro.routing.guard import (
    AUTH_PREFIX,
    LOOP_BREAKER_PARAM,
    PROFILE_CREATION_PATH,
    EdgeGuardMiddleware,
    evaluate,
    loop_breaker_set,
)
from nestro.routing.models import NavigationRequest, RedirectTarget
from nestro.routing.static import (
    PROVENANCE_PARAM,
    STATIC_REDIRECTS,
    StaticRedirectMiddleware,
    arrived_via_auth_redirect,
    forwards_to_profile,
    provenance_target,
)

if TYPE_CHECKING:
    from starlette.applications import Starlette

    from nestro.config import Settings

logger = logging.getLogger(__name__)


def install_redirect_layers(app: Starlette, settings: Settings) -> None:
    """Register the redirect middleware on ``app``.

    Starlette runs the most recently added middleware first, so the static
    table (when enabled) sees requests before the edge guard.
    """
    app.add_middleware(EdgeGuardMiddleware, prefix=AUTH_PREFIX)
    if settings.routing.static_redirects:
        logger.info("Static redirect table enabled for %s", sorted(STATIC_REDIRECTS))
        app.add_middleware(StaticRedirectMiddleware)


__all__ = [
    "AUTH_PREFIX",
    "LOOP_BREAKER_PARAM",
    "PROFILE_CREATION_PATH",
    "PROVENANCE_PARAM",
    "STATIC_REDIRECTS",
    "EdgeGuardMiddleware",
    "NavigationRequest",
    "RedirectTarget",
    "StaticRedirectMiddleware",
    "arrived_via_auth_redirect",
    "evaluate",
    "forwards_to_profile",
    "install_redirect_layers",
    "loop_breaker_set",
    "provenance_target",
]
