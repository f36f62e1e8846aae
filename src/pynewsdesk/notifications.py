"""Modal notification controller.

The controller keeps at most one notification on screen and hands out a
future per notification that resolves once the user dismisses it.  It is
a dumb renderer: whether a second message may be shown while one is
active is decided by callers, using the :class:`SingleFlightGuard` the
controller exposes.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

_logger = logging.getLogger(__name__)

DEFAULT_EXIT_DELAY: float = 0.3


class NotificationKind(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"


class DismissReason(StrEnum):
    ACKNOWLEDGED = "acknowledged"
    OUTSIDE_CLICK = "outside_click"
    CANCEL_KEY = "cancel_key"
    REPLACED = "replaced"
    HIDDEN = "hidden"


_TITLES: dict[NotificationKind, str] = {
    NotificationKind.ERROR: "Access Denied",
    NotificationKind.WARNING: "Warning",
    NotificationKind.SUCCESS: "Success",
}


class NotificationState(BaseModel):
    """What the renderer should currently draw.

    ``closing`` is true while the exit animation of a dismissed
    notification runs; the state resets to invisible afterwards.
    """

    model_config = ConfigDict(frozen=True)

    visible: bool = False
    kind: NotificationKind = NotificationKind.ERROR
    message: str = ""
    suppressed: bool = False
    closing: bool = False

    @property
    def title(self) -> str:
        return _TITLES[self.kind]


class NotificationRenderer(Protocol):
    """Draws a :class:`NotificationState`; called on every state change."""

    def render(self, state: NotificationState) -> None:
        ...


class LoggingRenderer:
    """Renderer for headless use: writes shown notifications to the log."""

    def render(self, state: NotificationState) -> None:
        if state.visible and not state.closing:
            _logger.info("[%s] %s: %s", state.kind, state.title, state.message)


class SingleFlightGuard:
    """Process-wide latch that lets one trigger through at a time.

    The holder acquires it before starting an asynchronous effect and
    releases it in the continuation that runs after the effect ends.
    """

    def __init__(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def try_acquire(self) -> bool:
        """Set the latch; ``False`` means another holder is active."""
        if self._active:
            return False
        self._active = True
        return True

    def release(self) -> None:
        self._active = False


class NotificationController:
    """Shows one modal notification at a time.

    Usage::

        done = controller.show("Saved", NotificationKind.SUCCESS)
        reason = await done
    """

    def __init__(
        self,
        renderer: NotificationRenderer | None = None,
        *,
        exit_delay: float = DEFAULT_EXIT_DELAY,
        guard: SingleFlightGuard | None = None,
    ) -> None:
        self._renderer: NotificationRenderer = renderer if renderer is not None else LoggingRenderer()
        self._exit_delay = exit_delay
        self.guard = guard if guard is not None else SingleFlightGuard()
        self._visible = False
        self._closing = False
        self._kind = NotificationKind.ERROR
        self._message = ""
        self._pending: asyncio.Future[DismissReason] | None = None
        self._teardown: asyncio.TimerHandle | None = None

    @property
    def state(self) -> NotificationState:
        return NotificationState(
            visible=self._visible,
            kind=self._kind,
            message=self._message,
            suppressed=self.guard.active,
            closing=self._closing,
        )

    @property
    def pending_dismissal(self) -> asyncio.Future[DismissReason] | None:
        """Future of the notification currently on screen, if one awaits dismissal."""
        return self._pending

    def show(self, message: str, kind: NotificationKind = NotificationKind.ERROR) -> asyncio.Future[DismissReason]:
        """Replace whatever is on screen with *message*.

        Returns a future resolved with the :class:`DismissReason` once this
        notification is dismissed, hidden, or replaced by a later ``show``.
        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._close(DismissReason.REPLACED)
        self._cancel_teardown()

        future: asyncio.Future[DismissReason] = loop.create_future()
        self._pending = future
        self._visible = True
        self._closing = False
        self._kind = kind
        self._message = message
        self._render()
        return future

    def error(self, message: str) -> asyncio.Future[DismissReason]:
        return self.show(message, NotificationKind.ERROR)

    def warning(self, message: str) -> asyncio.Future[DismissReason]:
        return self.show(message, NotificationKind.WARNING)

    def success(self, message: str) -> asyncio.Future[DismissReason]:
        return self.show(message, NotificationKind.SUCCESS)

    def hide(self) -> None:
        """Start tearing down the current notification, if any."""
        self._close(DismissReason.HIDDEN)

    # ------------------------------------------------------------------
    # User dismissal
    # ------------------------------------------------------------------

    def acknowledge(self) -> bool:
        """The OK button was pressed."""
        return self._dismiss(DismissReason.ACKNOWLEDGED)

    def click_outside(self) -> bool:
        """The overlay around the modal was clicked."""
        return self._dismiss(DismissReason.OUTSIDE_CLICK)

    def press_cancel(self) -> bool:
        """The cancel (Escape) key was pressed."""
        return self._dismiss(DismissReason.CANCEL_KEY)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _dismiss(self, reason: DismissReason) -> bool:
        if self._pending is None or self._closing:
            return False
        self._close(reason)
        return True

    def _close(self, reason: DismissReason) -> None:
        pending = self._pending
        if pending is None:
            return
        self._pending = None
        if not pending.done():
            pending.set_result(reason)
        self._closing = True
        self._render()
        self._teardown = asyncio.get_running_loop().call_later(self._exit_delay, self._finish_teardown)

    def _cancel_teardown(self) -> None:
        if self._teardown is not None:
            self._teardown.cancel()
            self._teardown = None

    def _finish_teardown(self) -> None:
        self._teardown = None
        self._visible = False
        self._closing = False
        self._message = ""
        self._render()

    def _render(self) -> None:
        self._renderer.render(self.state)
