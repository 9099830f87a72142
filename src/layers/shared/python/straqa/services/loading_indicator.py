"""Deferred loading indicator.

The spinner only appears when an operation outlasts a fixed delay. The
pending timer is a scoped resource: leaving the ``async with`` block on any
path cancels it and hides the spinner.
"""

import asyncio
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Something that can run a callback after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """Schedules callbacks on the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class DeferredLoadingIndicator:
    """Shows a spinner if the wrapped operation is still running after ``delay``."""

    def __init__(
        self,
        delay: float = 1.0,
        scheduler: Scheduler | None = None,
        on_change: Callable[[bool], None] | None = None,
    ):
        self.delay = delay
        self.visible = False
        self._scheduler = scheduler or LoopScheduler()
        self._on_change = on_change
        self._timer: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Whether the timer is armed and has not fired yet."""
        return self._timer is not None

    def start(self) -> None:
        """Arm the timer. Restarting replaces a pending timer."""
        self.cancel()
        self._timer = self._scheduler.call_later(self.delay, self._show)

    def cancel(self) -> None:
        """Clear the pending timer and hide the spinner."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._set_visible(False)

    def _show(self) -> None:
        self._timer = None
        self._set_visible(True)

    def _set_visible(self, visible: bool) -> None:
        if visible == self.visible:
            return
        self.visible = visible
        if self._on_change:
            self._on_change(visible)

    async def __aenter__(self) -> "DeferredLoadingIndicator":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()
