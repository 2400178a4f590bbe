"""Magic-link callback flow.

On mount the callback page exchanges the pending token for a session and
then navigates away after a short delay::

    PROCESSING --Authenticated--> SUCCESS  (navigate to /profile after 1s)
    PROCESSING --Failed/raise---> FAILURE  (navigate to /auth/signin after 2s)

The flow runs once per mount. The delayed navigation is held as a
cancellable handle; ``teardown()`` cancels it explicitly. On the page the
handle is a ``ui.timer``, which NiceGUI deletes together with its client,
so a disposed page is never navigated while a brief reconnect keeps it.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from nestro.auth.models import Authenticated, Failed

if TYPE_CHECKING:
    from collections.abc import Callable

    from nestro.auth.context import SessionContext
    from nestro.auth.models import SessionOutcome
    from nestro.auth.protocol import SessionServiceProtocol

logger = logging.getLogger(__name__)

SUCCESS_TARGET = "/profile"
FAILURE_TARGET = "/auth/signin"
SUCCESS_DELAY_SECONDS = 1.0
FAILURE_DELAY_SECONDS = 2.0


class CallbackState(StrEnum):
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILURE = "failure"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


type Scheduler = Callable[[float, Callable[[], None]], Cancellable]


class MagicLinkCallback:
    """Drive one magic-link exchange and the navigation that follows.

    Args:
        service: Session service performing the exchange.
        session: Context that receives the user on success.
        translate: ``t(key)`` for user-facing messages.
        navigate: Navigates the current view to a path.
        schedule: Runs a callback after a delay in seconds, returning a
            handle with ``cancel()``. Pages pass a ``ui.timer`` wrapper.
        on_message: Called whenever the displayed message changes.
    """

    def __init__(
        self,
        *,
        service: SessionServiceProtocol,
        session: SessionContext,
        translate: Callable[[str], str],
        navigate: Callable[[str], None],
        schedule: Scheduler,
        on_message: Callable[[str], None] | None = None,
    ) -> None:
        self._service = service
        self._session = session
        self._t = translate
        self._navigate = navigate
        self._schedule = schedule
        self._on_message = on_message
        self._pending: Cancellable | None = None
        self._started = False
        self._torn_down = False
        self.state = CallbackState.PROCESSING
        self.message = ""
        self.target: str | None = None

    def _show(self, key: str) -> None:
        self.message = self._t(key)
        if self._on_message is not None:
            self._on_message(self.message)

    async def _exchange(self, token: str | None) -> SessionOutcome:
        try:
            return await self._service.get_session(token)
        except Exception as exc:
            logger.exception("Magic link exchange raised")
            return Failed(reason=str(exc) or type(exc).__name__)

    async def run(self, token: str | None) -> CallbackState:
        """Perform the exchange and schedule the follow-up navigation.

        Raises:
            RuntimeError: If called more than once for the same mount.
        """
        if self._started:
            msg = "MagicLinkCallback.run() may only be called once per mount"
            raise RuntimeError(msg)
        self._started = True

        self._show("auth.processingLink")
        outcome = await self._exchange(token)

        if isinstance(outcome, Authenticated):
            self.state = CallbackState.SUCCESS
            self._session.establish(outcome)
            self._show("auth.loginSuccess")
            self._defer(SUCCESS_TARGET, SUCCESS_DELAY_SECONDS)
        else:
            logger.error("Magic link error: %s", outcome.reason)
            self.state = CallbackState.FAILURE
            self._show("auth.linkError")
            self._defer(FAILURE_TARGET, FAILURE_DELAY_SECONDS)
        return self.state

    def _defer(self, target: str, delay: float) -> None:
        self.target = target
        if self._torn_down:
            logger.debug("Callback view gone before %s was scheduled", target)
            return

        def fire() -> None:
            self._pending = None
            self._navigate(target)

        self._pending = self._schedule(delay, fire)

    def teardown(self) -> None:
        """Cancel any pending navigation. Safe to call more than once."""
        self._torn_down = True
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
