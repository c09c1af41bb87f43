"""Timer abstraction used to schedule status checks."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

from loguru import logger

__all__ = ["AsyncioScheduler", "CancelHandle", "ScheduledCallback", "Scheduler"]


ScheduledCallback = Callable[[], Awaitable[None]]


class CancelHandle(Protocol):
    """Handle returned for a scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from firing if it has not fired yet."""
        ...


class Scheduler(Protocol):
    """Runs a coroutine function after a delay."""

    def schedule_after(self, delay_ms: int, fn: ScheduledCallback) -> CancelHandle:
        """Schedule ``fn`` to run once after ``delay_ms`` milliseconds."""
        ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self) -> None:
        """Initialize the scheduler without pending tasks."""
        self._tasks: set[asyncio.Task[None]] = set()

    def schedule_after(
        self, delay_ms: int, fn: ScheduledCallback
    ) -> asyncio.TimerHandle:
        """Schedule ``fn`` on the running loop after ``delay_ms`` milliseconds.

        Cancelling the returned handle only prevents a callback that has not
        fired yet; a callback already running is left alone.
        """
        loop = asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0) / 1000, self._spawn, fn)

    def _spawn(self, fn: ScheduledCallback) -> None:
        task = asyncio.ensure_future(fn())
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: "asyncio.Task[None]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Scheduled callback failed")
