"""Authentication pages for Nestro.

The legacy sign-in and sign-up routes are normally redirected by the edge
guard before they render. These pages are the fallback when it did not
fire (cached response, middleware disabled): each sends the browser on to
``/create-profile`` and always shows a manual link.

``/auth/callback`` completes a magic-link login.
"""

from __future__ import annotations

import html
import json
import logging
from typing import TYPE_CHECKING

from nicegui import ui

from nestro.auth import MagicLinkCallback, get_session_service
from nestro.pages.layout import (
    current_session,
    get_query_param,
    sign_out_and_go_home,
    translator,
)
from nestro.routing import PROFILE_CREATION_PATH, provenance_target

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _manual_link(label: str) -> None:
    ui.link(label, PROFILE_CREATION_PATH).classes(
        "text-blue-600 underline"
    ).props('data-testid="manual-redirect-link"')


def _schedule(delay: float, callback: Callable[[], None]) -> ui.timer:
    return ui.timer(delay, callback, once=True)


@ui.page("/auth/signin")
def signin_page() -> None:
    """Send the browser to profile creation by script and by meta refresh."""
    tr = translator()
    refresh_url = provenance_target("signin").url

    # Script redirect first; the meta refresh covers script failures.
    ui.add_head_html(
        f"<script>window.location.href = {json.dumps(PROFILE_CREATION_PATH)};</script>"
    )
    ui.add_head_html(
        f'<meta http-equiv="refresh" content="0;url={html.escape(refresh_url)}">'
    )

    with ui.column().classes("w-full h-screen items-center justify-center p-5"):
        ui.label(tr.t("auth.redirecting")).classes("text-2xl mb-4")
        _manual_link(tr.t("auth.manualRedirect"))
        ui.spinner(size="lg").classes("mt-5")


@ui.page("/auth/signup")
async def signup_page() -> None:
    """Navigate to profile creation once the client is connected."""
    tr = translator()

    with ui.column().classes("w-full h-screen items-center justify-center"):
        with ui.card().classes("max-w-md w-full p-8 items-center"):
            ui.label(tr.t("auth.createAccount")).classes("text-3xl font-extrabold")
            ui.label(tr.t("auth.redirecting")).classes("text-sm text-gray-600 mt-2")
            ui.spinner(size="lg").classes("mt-4")
            _manual_link(tr.t("auth.manualRedirect"))

    await ui.context.client.connected()
    try:
        ui.navigate.to(PROFILE_CREATION_PATH)
    except RuntimeError:
        # The manual link stays on screen; navigation is not retried.
        logger.exception("Sign-up fallback navigation failed")


@ui.page("/auth/callback")
async def magic_link_callback() -> None:
    """Exchange the magic-link token and move on to profile or sign-in."""
    logger.info("Magic link callback received")
    tr = translator()
    client = ui.context.client

    with ui.column().classes("w-full h-screen items-center justify-center"):
        with ui.card().classes("max-w-md w-full p-8 items-center"):
            ui.label(tr.t("auth.authenticating")).classes("text-2xl font-bold mb-4")
            ui.spinner(size="lg").classes("mb-4")
            message = ui.label("").props('data-testid="callback-message"')

    flow = MagicLinkCallback(
        service=get_session_service(),
        session=current_session(),
        translate=tr.t,
        navigate=ui.navigate.to,
        schedule=_schedule,
        on_message=message.set_text,
    )
    # The pending ui.timer belongs to this client and is deleted with it, so a
    # dropped connection that reconnects still gets its navigation.
    await client.connected()
    await flow.run(get_query_param("token"))


@ui.page("/logout")
async def logout_page() -> None:
    """Sign out and go home."""
    await sign_out_and_go_home(current_session())
