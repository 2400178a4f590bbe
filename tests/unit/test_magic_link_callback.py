"""Tests for the magic-link callback flow.

The scheduler is faked so tests control when the deferred navigation fires
and can assert that teardown cancels it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from nestro.auth import (
    Authenticated,
    CallbackState,
    Failed,
    MagicLinkCallback,
    SessionContext,
    User,
)
from nestro.auth.mock import MockSessionService

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class _Handle:
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


@dataclass
class _FakeScheduler:
    handles: list[_Handle] = field(default_factory=list)

    def __call__(self, delay: float, callback: Callable[[], None]) -> _Handle:
        handle = _Handle(delay, callback)
        self.handles.append(handle)
        return handle


@dataclass
class _Harness:
    flow: MagicLinkCallback
    storage: dict
    scheduler: _FakeScheduler
    navigated: list[str]
    messages: list[str]


def _build(service) -> _Harness:  # noqa: ANN001
    storage: dict = {}
    scheduler = _FakeScheduler()
    navigated: list[str] = []
    messages: list[str] = []
    flow = MagicLinkCallback(
        service=service,
        session=SessionContext(storage),
        translate=lambda key: f"<{key}>",
        navigate=navigated.append,
        schedule=scheduler,
        on_message=messages.append,
    )
    return _Harness(flow, storage, scheduler, navigated, messages)


class TestSuccess:
    async def test_valid_token_navigates_to_profile_after_one_second(self) -> None:
        h = _build(MockSessionService())

        state = await h.flow.run("mock-token-student@example.com")

        assert state is CallbackState.SUCCESS
        assert h.flow.target == "/profile"
        assert [hd.delay for hd in h.scheduler.handles] == [1.0]
        assert h.navigated == []

        h.scheduler.handles[0].fire()
        assert h.navigated == ["/profile"]

    async def test_session_established(self) -> None:
        h = _build(MockSessionService())

        await h.flow.run("mock-token-student@example.com")

        session = SessionContext(h.storage)
        assert session.is_authenticated
        assert session.user is not None
        assert session.user.email == "student@example.com"
        assert session.session_token is not None

    async def test_messages_progress_processing_then_success(self) -> None:
        h = _build(MockSessionService())

        await h.flow.run("mock-valid-token")

        assert h.messages == ["<auth.processingLink>", "<auth.loginSuccess>"]
        assert h.flow.message == "<auth.loginSuccess>"


class TestFailure:
    async def test_failed_outcome_navigates_to_signin_after_two_seconds(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        service = AsyncMock()
        service.get_session.return_value = Failed(reason="invalid token")
        h = _build(service)

        state = await h.flow.run("bogus")

        assert state is CallbackState.FAILURE
        assert h.flow.message == "<auth.linkError>"
        assert h.flow.target == "/auth/signin"
        assert [hd.delay for hd in h.scheduler.handles] == [2.0]
        assert "Magic link error: invalid token" in caplog.text

        h.scheduler.handles[0].fire()
        assert h.navigated == ["/auth/signin"]

    async def test_missing_token_fails(self) -> None:
        h = _build(MockSessionService())

        state = await h.flow.run(None)

        assert state is CallbackState.FAILURE
        assert h.flow.target == "/auth/signin"

    async def test_failure_leaves_session_untouched(self) -> None:
        h = _build(MockSessionService())

        await h.flow.run("not-a-mock-token")

        assert not SessionContext(h.storage).is_authenticated

    async def test_raising_service_is_treated_as_failure(self) -> None:
        service = AsyncMock()
        service.get_session.side_effect = ConnectionError("provider down")
        h = _build(service)

        state = await h.flow.run("anything")

        assert state is CallbackState.FAILURE
        assert h.flow.target == "/auth/signin"
        assert h.messages[-1] == "<auth.linkError>"


class TestTeardown:
    async def test_teardown_cancels_pending_navigation(self) -> None:
        h = _build(MockSessionService())
        await h.flow.run("mock-valid-token")

        h.flow.teardown()
        h.scheduler.handles[0].fire()

        assert h.scheduler.handles[0].cancelled
        assert h.navigated == []

    async def test_teardown_before_exchange_completes_skips_scheduling(self) -> None:
        """A view that disconnects mid-exchange is never navigated."""
        service = AsyncMock()
        h = _build(service)

        async def _disconnect_during_exchange(token: str | None) -> Authenticated:
            h.flow.teardown()
            return Authenticated(user=User(id="m-1", email="a@example.com"))

        service.get_session.side_effect = _disconnect_during_exchange

        state = await h.flow.run("t")

        assert state is CallbackState.SUCCESS
        assert h.scheduler.handles == []
        assert h.navigated == []

    async def test_teardown_is_idempotent(self) -> None:
        h = _build(MockSessionService())
        await h.flow.run("mock-valid-token")

        h.flow.teardown()
        h.flow.teardown()

        assert h.scheduler.handles[0].cancelled

    async def test_teardown_after_navigation_fired_is_harmless(self) -> None:
        h = _build(MockSessionService())
        await h.flow.run("mock-valid-token")
        h.scheduler.handles[0].fire()

        h.flow.teardown()

        assert h.navigated == ["/profile"]
        assert not h.scheduler.handles[0].cancelled


class TestRunOnce:
    async def test_second_run_raises(self) -> None:
        h = _build(MockSessionService())
        await h.flow.run("mock-valid-token")

        with pytest.raises(RuntimeError, match="only be called once"):
            await h.flow.run("mock-valid-token")

        assert len(h.scheduler.handles) == 1
