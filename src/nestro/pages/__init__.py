"""NiceGUI pages for Nestro.

Import this module to register all page routes with NiceGUI.
"""

from nestro.pages import admin, api, auth, index, profiles

__all__ = ["admin", "api", "auth", "index", "profiles"]

# Touch modules to prevent linter from removing "unused" imports.
# These imports register @ui.page decorators as a side effect.
_PAGES = (admin, api, auth, index, profiles)
