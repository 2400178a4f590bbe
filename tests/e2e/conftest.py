"""E2E test configuration.

Auto-applies the 'e2e' marker to all tests in this directory.
Run with: pytest -m e2e

Provides a fresh browser context per test so cookies and per-browser
storage never leak between tests. The server fixture lives in the root
conftest and runs with mock auth.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

    from playwright.sync_api import Browser, Page


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Add e2e marker to all tests in this directory."""
    for item in items:
        if "/e2e/" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)


@pytest.fixture
def fresh_page(browser: Browser) -> Generator[Page]:
    """Provide a completely isolated page for each test.

    Creates a fresh browser context and page per test, ensuring:
    - No shared cookies or per-browser storage
    - No lingering WebSocket connections from previous tests
    """
    context = browser.new_context()
    page = context.new_page()
    page.goto("about:blank")

    yield page

    page.close()
    context.close()
