"""Timers owned by a view.

Every view gets a :class:`TimerScope`. Timers and request tasks created
through it are cancelled together when the view is torn down, so no callback
fires against a closed view. Re-arming a timer replaces the previous one.
"""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, TypeVar

from deploy_console.core.exceptions import ViewClosedError
from deploy_console.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class OneShotTimer:
    """Runs a callback once after a delay."""

    def __init__(self):
        self._handle: asyncio.TimerHandle | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        """Schedule ``callback``, replacing any pending one."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, callback)

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Countdown:
    """Whole-second countdown that stops by itself at zero."""

    def __init__(
        self,
        interval: float = 1.0,
        on_tick: Callable[[int], None] | None = None,
    ):
        self.interval = interval
        self.on_tick = on_tick
        self.remaining = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, seconds: int) -> None:
        """(Re)start counting down from ``seconds``."""
        self.cancel()
        self.remaining = max(0, seconds)
        if self.remaining > 0:
            self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self) -> int:
        """Take one second off, never going below zero."""
        if self.remaining > 0:
            self.remaining -= 1
            if self.on_tick:
                self.on_tick(self.remaining)
        return self.remaining

    async def _run(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self.interval)
            self.tick()

    def cancel(self) -> None:
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            self._task = None


class PeriodicTimer:
    """Awaits a callback every ``interval`` seconds until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], Awaitable[None]]):
        self.interval = interval
        self.callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.callback()
            except ViewClosedError:
                return
            except Exception:
                logger.exception("timer.periodic.callback_failed")

    def cancel(self) -> None:
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            self._task = None


class TimerScope:
    """Owns the timers and in-flight request tasks of one view."""

    def __init__(self, name: str):
        self.name = name
        self.closed = False
        self._timers: list[OneShotTimer | Countdown | PeriodicTimer] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def one_shot(self) -> OneShotTimer:
        timer = OneShotTimer()
        self._timers.append(timer)
        return timer

    def countdown(
        self, interval: float = 1.0, on_tick: Callable[[int], None] | None = None
    ) -> Countdown:
        timer = Countdown(interval, on_tick)
        self._timers.append(timer)
        return timer

    def periodic(
        self, interval: float, callback: Callable[[], Awaitable[None]]
    ) -> PeriodicTimer:
        timer = PeriodicTimer(interval, callback)
        self._timers.append(timer)
        return timer

    async def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Await ``coro`` as a task that teardown can cancel.

        Raises:
            ViewClosedError: The scope was closed before or while running.
        """
        if self.closed:
            coro.close()
            raise ViewClosedError(self.name)

        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if self.closed and (current is None or not current.cancelling()):
                raise ViewClosedError(self.name) from None
            raise

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def close(self) -> None:
        """Cancel every timer and in-flight task."""
        self.closed = True
        for timer in self._timers:
            timer.cancel()
        for task in list(self._tasks):
            task.cancel()
