"""Index page for Nestro."""

from nicegui import ui

from nestro.pages.layout import current_session, page_layout, translator


@ui.page("/")
def index_page() -> None:
    """Landing page. Open to everyone."""
    tr = translator()
    profile = current_session().profile

    with page_layout(tr.t("nav.home")):
        ui.label(tr.t("home.title")).classes("text-3xl font-bold mt-6")
        ui.label(tr.t("home.subtitle")).classes("text-lg text-gray-600 mb-4")
        if profile is None:
            ui.link(tr.t("nav.createProfile"), "/create-profile")
        else:
            ui.link(profile.username, "/profile")
