"""Admin dashboard pages.

Gated by AdminSessionStore, which is a convenience gate and not an
authentication boundary.
"""

from __future__ import annotations

from nicegui import app, ui

from nestro.auth import AdminSessionStore
from nestro.config import get_settings
from nestro.pages.layout import page_layout, translator


def _admin_store() -> AdminSessionStore:
    hours = get_settings().admin.session_hours
    return AdminSessionStore(app.storage.user, expiry_ms=hours * 60 * 60 * 1000)


@ui.page("/admin/login")
def admin_login_page() -> None:
    """Admin login form. Already-authenticated admins go to the dashboard."""
    tr = translator()
    store = _admin_store()
    if store.is_authenticated():
        ui.navigate.to("/admin/dashboard")
        return

    with page_layout(tr.t("admin.loginTitle")):
        with ui.card().classes("w-96 p-8 mt-10"):
            ui.label(tr.t("admin.loginTitle")).classes("text-2xl font-bold mb-6")
            username = ui.input(label=tr.t("admin.username")).props(
                'data-testid="admin-username"'
            ).classes("w-full")
            password = ui.input(
                label=tr.t("admin.password"), password=True
            ).props('data-testid="admin-password"').classes("w-full")

            def submit() -> None:
                admin = get_settings().admin
                ok = store.login(
                    username.value or "",
                    password.value or "",
                    expected_username=admin.username,
                    expected_password=admin.password.get_secret_value(),
                )
                if not ok:
                    ui.notify(tr.t("admin.invalidCredentials"), type="negative")
                    return
                ui.navigate.to("/admin/dashboard")

            ui.button(tr.t("admin.login"), on_click=submit).props(
                'data-testid="admin-login-btn"'
            ).classes("w-full mt-4")


@ui.page("/admin/dashboard")
def admin_dashboard_page() -> None:
    """Landing page for admins."""
    tr = translator()
    store = _admin_store()
    if not store.is_authenticated():
        ui.navigate.to("/admin/login")
        return

    with page_layout(tr.t("admin.dashboard")):
        ui.label(tr.t("admin.dashboard")).classes("text-2xl font-bold mt-6")
        ui.label(f"{tr.t('admin.welcome')}, {store.username()}").props(
            'data-testid="admin-welcome"'
        )
        ui.button(
            tr.t("admin.logout"), on_click=lambda: ui.navigate.to("/admin/logout")
        ).classes("mt-4")


@ui.page("/admin/logout")
def admin_logout_page() -> None:
    """Drop the admin session and return to the admin login."""
    _admin_store().logout()
    ui.navigate.to("/admin/login")
