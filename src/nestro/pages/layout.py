"""Shared layout components for Nestro.

Provides the header with the auth navigation and the per-request session
and translator helpers used by every page.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from nicegui import app, ui

from nestro.auth import SessionContext, get_session_service
from nestro.config import get_settings
from nestro.i18n import Translator, get_translator

if TYPE_CHECKING:
    from collections.abc import Iterator


def current_session() -> SessionContext:
    """Session context bound to this browser's user storage."""
    return SessionContext(app.storage.user)


def translator() -> Translator:
    """Translator for the configured UI language."""
    return get_translator(get_settings().app.default_language)


def get_query_param(name: str) -> str | None:
    """Get a query parameter from the current request."""
    return ui.context.client.request.query_params.get(name)


async def sign_out_and_go_home(session: SessionContext) -> None:
    """Clear the session (revoking any provider session) and go home."""
    service = get_session_service() if session.session_token else None
    await session.sign_out(service)
    ui.navigate.to("/")


def auth_nav(session: SessionContext, tr: Translator) -> None:
    """Profile/sign-out links when signed in, sign-in/sign-up otherwise."""
    profile = session.profile
    with ui.row().classes("items-center gap-4"):
        if session.user is not None or profile is not None:
            label = profile.username if profile and profile.username else None
            ui.link(label or tr.t("nav.profile"), "/profile").classes(
                "text-white text-body2"
            ).props('data-testid="nav-profile"')

            async def _sign_out() -> None:
                await sign_out_and_go_home(session)

            ui.button(tr.t("nav.signOut"), on_click=_sign_out).props(
                'flat color=white data-testid="nav-sign-out"'
            )
        else:
            ui.link(tr.t("nav.signIn"), "/auth/signin").classes(
                "text-white text-body2"
            ).props('data-testid="nav-sign-in"')
            ui.link(tr.t("nav.signUp"), "/auth/signup").classes(
                "text-white text-body2"
            ).props('data-testid="nav-sign-up"')


@contextmanager
def page_layout(title: str = "Nestro") -> Iterator[None]:
    """Context manager for consistent page layout with header and auth nav.

    Usage:
        @ui.page("/my-page")
        async def my_page():
            with page_layout("My Page"):
                ui.label("Page content here")
    """
    tr = translator()
    session = current_session()

    with ui.header().classes("bg-primary items-center q-py-xs"):
        ui.link(tr.t("home.title"), "/").classes("text-h6 text-white no-underline")
        ui.label(title).classes("text-white text-body1 q-ml-sm")
        ui.element("div").classes("flex-grow")
        auth_nav(session, tr)

    with ui.column().classes("w-full items-center q-pa-md"):
        yield
