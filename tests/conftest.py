"""Shared pytest fixtures for Nestro tests."""

from __future__ import annotations

import os
import socket
import subprocess
import sys
import time
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
from dotenv import load_dotenv

from nestro.auth import clear_config_cache

if TYPE_CHECKING:
    from collections.abc import Generator

load_dotenv()

TEST_STORAGE_SECRET = "test-secret-for-e2e"


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Generator[None]:
    """Drop cached settings and the mock session service around each test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def mock_stytch_client() -> Generator[MagicMock]:
    """Create a mocked Stytch B2BClient for unit tests.

    Patches the B2BClient constructor to return a mock, allowing
    tests to set up expected responses without making real API calls.
    """
    with patch("nestro.auth.client.B2BClient") as mock_cls:
        mock_client = MagicMock()
        mock_cls.return_value = mock_client
        yield mock_client


def _find_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


# Script to run NiceGUI server
# Note: We clear PYTEST env vars to prevent NiceGUI from entering test mode
_SERVER_SCRIPT = f"""
import os
import sys

for key in list(os.environ.keys()):
    if 'PYTEST' in key or 'NICEGUI' in key:
        del os.environ[key]

os.environ['DEV__AUTH_MOCK'] = 'true'
os.environ['APP__STORAGE_SECRET'] = '{TEST_STORAGE_SECRET}'
os.environ['APP__DEFAULT_LANGUAGE'] = 'en'
os.environ.setdefault('ADMIN__USERNAME', 'admin')
os.environ.setdefault('ADMIN__PASSWORD', 'admin-pass')

port = int(sys.argv[1])

from nicegui import app, ui

from nestro.config import get_settings
from nestro.routing import install_redirect_layers

install_redirect_layers(app, get_settings())
import nestro.pages  # noqa: F401 - registers routes

ui.run(port=port, reload=False, show=False, storage_secret='{TEST_STORAGE_SECRET}')
"""


@pytest.fixture(scope="session")
def app_server() -> Generator[str]:
    """Provide the base URL of the NiceGUI app server for E2E tests.

    If ``E2E_BASE_URL`` is set, yields that URL directly. Otherwise starts
    a NiceGUI server with mock auth in a subprocess on a random port.
    """
    external_url = os.environ.get("E2E_BASE_URL")
    if external_url:
        yield external_url
        return

    port = _find_free_port()
    url = f"http://localhost:{port}"

    clean_env = {
        k: v for k, v in os.environ.items() if "PYTEST" not in k and "NICEGUI" not in k
    }

    process = subprocess.Popen(
        [sys.executable, "-c", _SERVER_SCRIPT, str(port)],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=clean_env,
    )

    max_wait = 15  # seconds
    start_time = time.time()
    while time.time() - start_time < max_wait:
        if process.poll() is not None:
            stdout, stderr = process.communicate()
            pytest.fail(
                f"Server process died. Exit code: {process.returncode}\n"
                f"stdout: {stdout.decode()}\n"
                f"stderr: {stderr.decode()}"
            )
        try:
            with socket.create_connection(("localhost", port), timeout=1):
                break
        except OSError:
            time.sleep(0.1)
    else:
        process.terminate()
        pytest.fail(f"Server failed to start within {max_wait} seconds")

    yield url

    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
