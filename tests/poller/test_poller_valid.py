# ruff: noqa: S101

"""Tests for successful task polling."""

import pytest

from taskpoll.common import TaskStatus
from taskpoll.poller import AsyncTaskPoller, PollPolicy, TaskSnapshot
from tests.utils import FakeLauncher, FakeScheduler, FakeStatusStore, started

_JOB = {"domain": "example.com", "location": "Sweden", "language": "Swedish"}
_PROCESSING = {"status": "processing"}


def _dedupe(statuses: list[TaskStatus]) -> list[TaskStatus]:
    result: list[TaskStatus] = []
    for status in statuses:
        if not result or result[-1] != status:
            result.append(status)
    return result


@pytest.mark.asyncio
@pytest.mark.poller
class TestPollerValid:
    """Tests for tasks that run to completion."""

    @classmethod
    async def test_end_to_end_completion(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """Three processing replies followed by a completed one."""
        launcher = FakeLauncher(started("abc", "5 minutes"))
        store = FakeStatusStore(
            _PROCESSING,
            _PROCESSING,
            _PROCESSING,
            {"status": "completed", "data": {"pages": 42}},
        )
        poller = AsyncTaskPoller(launcher, store, scheduler=scheduler, policy=policy)
        history = [poller.status]
        poller.subscribe(lambda snapshot: history.append(snapshot.status))

        await poller.start(_JOB)

        assert poller.status == TaskStatus.PROCESSING
        assert poller.task_id == "abc"
        assert poller.estimated_duration_label == "5 minutes"
        assert launcher.calls == [_JOB]

        for _ in range(3):
            assert await scheduler.fire_next()
            assert poller.status == TaskStatus.PROCESSING

        assert await scheduler.fire_next()

        assert poller.status == TaskStatus.COMPLETED
        assert poller.result == {"pages": 42}
        assert poller.error_message is None
        assert store.calls == ["abc"] * 4
        assert _dedupe(history) == [
            TaskStatus.IDLE,
            TaskStatus.STARTING,
            TaskStatus.PROCESSING,
            TaskStatus.COMPLETED,
        ]
        assert scheduler.delays == [5000, 10000, 12000, 14000]
        assert not scheduler.pending

    @classmethod
    async def test_first_check_after_initial_delay(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """No status check happens before the initial delay elapsed."""
        store = FakeStatusStore(_PROCESSING)
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")), store, scheduler=scheduler, policy=policy
        )

        await poller.start(_JOB)
        await scheduler.advance(4999)

        assert store.calls == []

        await scheduler.advance(1)

        assert store.calls == ["abc"]
        assert poller.attempt == 1

    @classmethod
    async def test_attempts_increase_by_one(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """Every check raises the attempt counter by exactly one."""
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore(_PROCESSING),
            scheduler=scheduler,
            policy=policy,
        )
        await poller.start(_JOB)
        assert poller.attempt == 0

        attempts = []
        for _ in range(20):
            await scheduler.fire_next()
            attempts.append(poller.attempt)

        assert attempts == list(range(1, 21))
        assert poller.progress == pytest.approx(20 / 60)

    @classmethod
    async def test_scheduled_delays_follow_backoff(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """The poller schedules checks with the linear capped backoff."""
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore(_PROCESSING),
            scheduler=scheduler,
            policy=policy,
        )
        await poller.start(_JOB)

        for _ in range(16):
            await scheduler.fire_next()

        assert scheduler.delays[0] == 5000
        assert scheduler.delays[1:] == [policy.next_delay_ms(n) for n in range(16)]
        assert scheduler.delays[-1] == 30000

    @classmethod
    async def test_checks_are_sequential(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """At most one check is scheduled at any time."""
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore(_PROCESSING),
            scheduler=scheduler,
            policy=policy,
        )
        await poller.start(_JOB)

        for _ in range(10):
            assert len(scheduler.pending) == 1
            await scheduler.fire_next()

    @classmethod
    async def test_completed_task_is_stable(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """Late timer firings after completion neither call nor change anything."""
        store = FakeStatusStore({"status": "completed", "data": [1, 2]})
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")), store, scheduler=scheduler, policy=policy
        )
        await poller.start(_JOB)
        await scheduler.run_until_idle()
        before = poller.snapshot()

        await poller.check_status("abc", 0)
        await poller.check_status("abc", 1)

        assert store.calls == ["abc"]
        assert poller.snapshot() == before
        assert poller.attempt == 0
        assert poller.is_terminal

    @classmethod
    async def test_restart_after_completion(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """A finished poller can start a brand new task."""
        launcher = FakeLauncher(started("abc"), started("def"))
        store = FakeStatusStore({"status": "completed", "data": "done"})
        poller = AsyncTaskPoller(launcher, store, scheduler=scheduler, policy=policy)

        await poller.start(_JOB)
        await scheduler.run_until_idle()
        await poller.start(_JOB)

        assert poller.status == TaskStatus.PROCESSING
        assert poller.task_id == "def"
        assert poller.result is None

        await scheduler.run_until_idle()

        assert store.calls == ["abc", "def"]
        assert poller.status == TaskStatus.COMPLETED

    @classmethod
    async def test_wait_returns_final_snapshot(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """``wait`` resolves once the task reached a terminal state."""
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore(_PROCESSING, {"status": "completed", "data": 7}),
            scheduler=scheduler,
            policy=policy,
        )
        await poller.start(_JOB)
        await scheduler.run_until_idle()

        snapshot = await poller.wait()

        assert isinstance(snapshot, TaskSnapshot)
        assert snapshot.status == TaskStatus.COMPLETED
        assert snapshot.result == 7

    @classmethod
    async def test_unsubscribed_listener_not_called(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """Removing a listener stops its notifications."""
        seen: list[TaskSnapshot] = []
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore(_PROCESSING),
            scheduler=scheduler,
            policy=policy,
        )
        unsubscribe = poller.subscribe(seen.append)

        await poller.start(_JOB)
        count = len(seen)
        unsubscribe()
        await scheduler.fire_next()

        assert count > 0
        assert len(seen) == count

    @classmethod
    async def test_failing_listener_does_not_break_polling(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """A listener raising an exception is logged and ignored."""

        def broken(_: TaskSnapshot) -> None:
            raise RuntimeError("render failed")

        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore({"status": "completed", "data": 1}),
            scheduler=scheduler,
            policy=policy,
        )
        poller.subscribe(broken)

        await poller.start(_JOB)
        await scheduler.run_until_idle()

        assert poller.status == TaskStatus.COMPLETED

    @classmethod
    async def test_snapshot_progress(
        cls, scheduler: FakeScheduler, policy: PollPolicy
    ) -> None:
        """The snapshot exposes attempt, budget and progress."""
        poller = AsyncTaskPoller(
            FakeLauncher(started("abc")),
            FakeStatusStore(_PROCESSING),
            scheduler=scheduler,
            policy=policy,
        )
        await poller.start(_JOB)
        for _ in range(30):
            await scheduler.fire_next()

        snapshot = poller.snapshot()

        assert snapshot.attempt == 30
        assert snapshot.max_attempts == 60
        assert snapshot.progress == pytest.approx(0.5)
