"""Profile creation and profile pages.

``/create-profile`` is where the legacy auth routes land. A visitor who
already has a profile is sent on to ``/profile``, except when the visit came
from an auth redirect; that exception keeps the two redirects from chasing
each other.
"""

from __future__ import annotations

import logging

from nicegui import ui

from nestro.auth import ProfileValidationError
from nestro.auth.context import DEPARTMENTS, STAGES
from nestro.config import get_settings
from nestro.pages.layout import (
    current_session,
    page_layout,
    sign_out_and_go_home,
    translator,
)
from nestro.routing import NavigationRequest, forwards_to_profile

logger = logging.getLogger(__name__)


@ui.page("/create-profile")
def create_profile_page() -> None:
    """Name-only profile form plus the list of saved profiles."""
    tr = translator()
    session = current_session()
    request = NavigationRequest.from_request(ui.context.client.request)

    if forwards_to_profile(request, has_profile=session.profile is not None):
        logger.info("Profile already exists, redirecting to profile page")
        ui.navigate.to("/profile")
        return

    with page_layout(tr.t("auth.createProfile")):
        ui.label(tr.t("auth.createProfile")).classes("text-3xl font-bold mt-6")
        ui.label(tr.t("auth.enterName")).classes("text-sm text-gray-600")

        with ui.card().classes("w-96 p-4 mt-4"):
            error_label = ui.label("").classes("text-red-700").props(
                'role=alert data-testid="profile-error"'
            )
            error_label.set_visibility(False)

            name_input = (
                ui.input(label=tr.t("auth.name"), placeholder=tr.t("auth.name"))
                .props('data-testid="profile-name-input"')
                .classes("w-full")
            )
            department_select = (
                ui.select(list(DEPARTMENTS), label=tr.t("auth.department"))
                .props('data-testid="profile-department-select"')
                .classes("w-full")
            )
            stage_select = (
                ui.select(list(STAGES), label=tr.t("auth.stage"))
                .props('data-testid="profile-stage-select"')
                .classes("w-full")
            )

            def show_error(message: str) -> None:
                error_label.set_text(message)
                error_label.set_visibility(True)

            def submit() -> None:
                error_label.set_visibility(False)
                try:
                    session.create_profile(
                        name_input.value or "",
                        department_select.value or "",
                        stage_select.value or "",
                        language=get_settings().app.default_language,
                    )
                except ProfileValidationError as e:
                    show_error(tr.t(e.message_key))
                    return
                ui.navigate.to("/profile")

            ui.button(tr.t("auth.createButton"), on_click=submit).props(
                'data-testid="create-profile-btn"'
            ).classes("w-full mt-2")

        saved_names = session.saved_profile_names()
        if saved_names:
            ui.label(tr.t("auth.loadProfile")).classes("text-lg font-medium mt-8")
            with ui.column().classes("w-96 gap-2"):
                for profile_name in saved_names:

                    def load(name: str = profile_name) -> None:
                        if session.load_profile_by_name(name) is None:
                            show_error(tr.t("auth.profileNotFound"))
                            return
                        ui.navigate.to("/profile")

                    ui.button(profile_name, on_click=load).props("outline").classes(
                        "w-full"
                    )


@ui.page("/profile")
def profile_page() -> None:
    """Show the active profile."""
    tr = translator()
    session = current_session()
    profile = session.profile

    with page_layout(tr.t("profile.title")):
        if profile is None:
            ui.label(tr.t("profile.noProfile")).classes("text-lg mt-6")
            ui.link(tr.t("nav.createProfile"), "/create-profile").props(
                'data-testid="profile-create-link"'
            )
            return

        with ui.card().classes("w-96 p-4 mt-6"):
            ui.label(profile.username).classes("text-2xl font-bold").props(
                'data-testid="profile-username"'
            )
            with ui.row().classes("gap-2"):
                ui.label(f"{tr.t('auth.department')}:").classes("font-semibold")
                ui.label(profile.department)
            with ui.row().classes("gap-2"):
                ui.label(f"{tr.t('auth.stage')}:").classes("font-semibold")
                ui.label(profile.stage)

        async def _sign_out() -> None:
            await sign_out_and_go_home(session)

        ui.button(tr.t("nav.signOut"), on_click=_sign_out).props(
            'data-testid="profile-sign-out-btn"'
        ).classes("mt-4")
