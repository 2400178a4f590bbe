"""Tests for the redirect middleware through a real ASGI stack.

A minimal Starlette app stands in for NiceGUI. The client does not follow
redirects so Location headers can be asserted directly.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from nestro.config import RoutingConfig, Settings
from nestro.routing import (
    EdgeGuardMiddleware,
    StaticRedirectMiddleware,
    install_redirect_layers,
)
from nestro.routing import guard as guard_module


async def _echo(request):  # noqa: ANN001, ANN202
    return PlainTextResponse(f"page:{request.url.path}?{request.url.query}")


def _make_app() -> Starlette:
    return Starlette(
        routes=[
            Route("/auth/signin", _echo),
            Route("/auth/signup", _echo),
            Route("/auth/callback", _echo),
            Route("/create-profile", _echo),
            Route("/profile", _echo),
        ]
    )


def _settings(*, static_redirects: bool = False) -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        routing=RoutingConfig(static_redirects=static_redirects),
    )


@pytest.fixture
def guarded_client() -> TestClient:
    app = _make_app()
    app.add_middleware(EdgeGuardMiddleware)
    return TestClient(app, follow_redirects=False)


class TestEdgeGuardMiddleware:
    def test_signin_redirects_to_create_profile(self, guarded_client: TestClient):
        resp = guarded_client.get("/auth/signin")

        assert resp.status_code == 307
        assert resp.headers["location"] == "/create-profile?no_redirect=true"

    def test_signup_redirects_to_create_profile(self, guarded_client: TestClient):
        resp = guarded_client.get("/auth/signup")

        assert resp.status_code == 307
        assert resp.headers["location"] == "/create-profile?no_redirect=true"

    def test_loop_breaker_passes_through(self, guarded_client: TestClient):
        resp = guarded_client.get("/auth/signin?no_redirect=true")

        assert resp.status_code == 200
        assert resp.text.startswith("page:/auth/signin")

    def test_create_profile_after_redirect_renders(self, guarded_client: TestClient):
        """The post-redirect request is served, not redirected again."""
        resp = guarded_client.get("/create-profile?no_redirect=true")

        assert resp.status_code == 200
        assert resp.text == "page:/create-profile?no_redirect=true"

    def test_following_redirects_terminates(self):
        app = _make_app()
        app.add_middleware(EdgeGuardMiddleware)
        client = TestClient(app, follow_redirects=True)

        resp = client.get("/auth/signup")

        assert resp.status_code == 200
        assert resp.text == "page:/create-profile?no_redirect=true"
        assert len(resp.history) == 1

    def test_callback_passes_through(self, guarded_client: TestClient):
        resp = guarded_client.get("/auth/callback?token=abc")

        assert resp.status_code == 200
        assert resp.text == "page:/auth/callback?token=abc"

    @pytest.mark.parametrize("path", ["/profile", "/create-profile"])
    def test_decision_not_invoked_outside_auth_prefix(
        self, guarded_client: TestClient, path: str
    ):
        with patch.object(guard_module, "evaluate", wraps=guard_module.evaluate) as spy:
            resp = guarded_client.get(path)

        assert resp.status_code == 200
        spy.assert_not_called()

    def test_decision_invoked_under_auth_prefix(self, guarded_client: TestClient):
        with patch.object(guard_module, "evaluate", wraps=guard_module.evaluate) as spy:
            guarded_client.get("/auth/callback")

        spy.assert_called_once()


class TestStaticRedirectMiddleware:
    @pytest.mark.parametrize(
        ("path", "location"),
        [
            ("/auth/signin", "/create-profile?from=signin"),
            ("/auth/signup", "/create-profile?from=signup"),
        ],
    )
    def test_table_redirects(self, path: str, location: str):
        app = _make_app()
        app.add_middleware(StaticRedirectMiddleware)
        client = TestClient(app, follow_redirects=False)

        resp = client.get(path)

        assert resp.status_code == 307
        assert resp.headers["location"] == location

    def test_exact_match_only(self):
        app = _make_app()
        app.add_middleware(StaticRedirectMiddleware)
        client = TestClient(app, follow_redirects=False)

        resp = client.get("/auth/callback")

        assert resp.status_code == 200


class TestInstallRedirectLayers:
    def test_default_installs_edge_guard_only(self):
        app = _make_app()
        install_redirect_layers(app, _settings())
        client = TestClient(app, follow_redirects=False)

        resp = client.get("/auth/signin")

        assert resp.headers["location"] == "/create-profile?no_redirect=true"

    def test_static_table_runs_before_edge_guard(self):
        app = _make_app()
        install_redirect_layers(app, _settings(static_redirects=True))
        client = TestClient(app, follow_redirects=False)

        resp = client.get("/auth/signin")

        assert resp.headers["location"] == "/create-profile?from=signin"
