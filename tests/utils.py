"""Test doubles for the task poller."""

import asyncio
from collections.abc import Mapping
from typing import Any

from taskpoll.poller import ScheduledCallback

__all__ = [
    "FakeLauncher",
    "FakeScheduler",
    "FakeStatusStore",
    "GatedLauncher",
    "GatedStatusStore",
    "started",
]


def started(task_id: str, estimated_time: str = "5-15 minutes") -> dict[str, str]:
    """Launcher reply for a successfully started task."""
    return {"status": "started", "taskId": task_id, "estimatedTime": estimated_time}


class _Timer:
    """Pending callback of the fake scheduler."""

    def __init__(self, due_ms: int, seq: int, fn: ScheduledCallback) -> None:
        self.due_ms = due_ms
        self.seq = seq
        self.fn = fn
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic scheduler with a virtual clock in milliseconds."""

    def __init__(self) -> None:
        self.now_ms = 0
        self.delays: list[int] = []
        self._timers: list[_Timer] = []
        self._seq = 0

    def schedule_after(self, delay_ms: int, fn: ScheduledCallback) -> _Timer:
        timer = _Timer(self.now_ms + delay_ms, self._seq, fn)
        self._seq += 1
        self._timers.append(timer)
        self.delays.append(delay_ms)
        return timer

    @property
    def pending(self) -> list[_Timer]:
        return sorted(
            (t for t in self._timers if not t.cancelled),
            key=lambda t: (t.due_ms, t.seq),
        )

    async def fire_next(self) -> bool:
        """Advance the clock to the next timer and run it.

        Returns:
            False if no timer was pending.
        """
        pending = self.pending
        if not pending:
            return False
        timer = pending[0]
        self._timers.remove(timer)
        self.now_ms = max(self.now_ms, timer.due_ms)
        await timer.fn()
        return True

    async def advance(self, ms: int) -> None:
        """Run every timer due within the next ``ms`` milliseconds."""
        target = self.now_ms + ms
        while self.pending and self.pending[0].due_ms <= target:
            await self.fire_next()
        self.now_ms = target

    async def run_until_idle(self, max_firings: int = 1000) -> int:
        """Fire timers until none is pending and return how many fired."""
        fired = 0
        while fired < max_firings and await self.fire_next():
            fired += 1
        return fired


class FakeLauncher:
    """Launcher replying from a script; the last reply repeats."""

    def __init__(self, *replies: Mapping[str, Any] | Exception) -> None:
        self.calls: list[dict[str, Any]] = []
        self._replies = list(replies)

    async def launch(self, job_parameters: Mapping[str, Any]) -> Mapping[str, Any]:
        self.calls.append(dict(job_parameters))
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeStatusStore:
    """Status store replying from a script; the last reply repeats."""

    def __init__(self, *replies: Any) -> None:
        self.calls: list[str] = []
        self._replies = list(replies)

    async def fetch_status(self, task_id: str) -> Any:
        self.calls.append(task_id)
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


class GatedLauncher:
    """Launcher whose reply is held back until ``release`` is called."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.entered = asyncio.Event()
        self._gate: asyncio.Future[Mapping[str, Any]] | None = None

    async def launch(self, job_parameters: Mapping[str, Any]) -> Mapping[str, Any]:
        self.calls.append(dict(job_parameters))
        self._gate = asyncio.get_running_loop().create_future()
        self.entered.set()
        return await self._gate

    def release(self, reply: Mapping[str, Any]) -> None:
        assert self._gate is not None  # noqa: S101
        self._gate.set_result(reply)


class GatedStatusStore:
    """Status store whose reply is held back until ``release`` is called."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.entered = asyncio.Event()
        self._gate: asyncio.Future[Any] | None = None

    async def fetch_status(self, task_id: str) -> Any:
        self.calls.append(task_id)
        self._gate = asyncio.get_running_loop().create_future()
        self.entered.set()
        return await self._gate

    def release(self, reply: Any) -> None:
        assert self._gate is not None  # noqa: S101
        self._gate.set_result(reply)
