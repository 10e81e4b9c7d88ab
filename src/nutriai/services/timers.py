"""Cancellable timers on the running event loop."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[None] | None]


@dataclass
class CancellableTimer:
    """Runs a callback once after a delay unless cancelled first.

    Scheduling again replaces any pending run. Coroutine callbacks are
    started as tasks; ``wait`` awaits the most recent one.
    """

    delay: float
    callback: TimerCallback
    _handle: asyncio.TimerHandle | None = field(default=None, init=False, repr=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        result = self.callback()
        if inspect.isawaitable(result):
            self._task = asyncio.ensure_future(result)
            self._task.add_done_callback(_log_failure)

    async def wait(self) -> None:
        """Wait for the last started callback task, if any."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)


def _log_failure(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _logger.error("Timer callback failed", exc_info=exc)


@dataclass
class Debouncer:
    """Collapses bursts of triggers into one call after a quiet period."""

    delay: float
    callback: TimerCallback
    _timer: CancellableTimer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._timer = CancellableTimer(self.delay, self.callback)

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def trigger(self) -> None:
        """Restart the quiet period."""
        self._timer.schedule()

    def cancel(self) -> None:
        self._timer.cancel()

    async def wait(self) -> None:
        await self._timer.wait()
