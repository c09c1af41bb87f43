"""Client-side state machine that launches a server task and polls its status."""

import asyncio
from collections import deque
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from taskpoll.common.app_error import AppError
from taskpoll.common.task_status import ACTIVE_STATUSES, TERMINAL_STATUSES, TaskStatus
from taskpoll.config.errors import ErrorCode, ErrorNames

from .exceptions import (
    LaunchFailureError,
    PollFailureError,
    ProtocolViolationError,
    ServerReportedError,
    TaskTimeoutError,
)
from .policy import PollPolicy
from .ports import TaskLauncher, TaskStatusStore
from .scheduler import AsyncioScheduler, CancelHandle, Scheduler
from .schemas import LaunchResponse, RemoteStatus, StatusResponse, TaskSnapshot

__all__ = ["AsyncTaskPoller", "SnapshotListener"]


_RECENT_TASK_IDS = 16

SnapshotListener = Callable[[TaskSnapshot], None]


class AsyncTaskPoller:
    """Tracks one long-running server task from launch to a terminal state.

    ``start`` launches the task and schedules the first status check. Every
    check that reports ``processing`` schedules exactly one follow-up check,
    so checks never overlap. ``cancel`` abandons the task locally: pending
    timers are cancelled and replies still in flight are discarded when they
    arrive.

    Each call to ``start`` or ``cancel`` opens a new generation. Callbacks and
    replies belonging to an older generation never touch the state. Cancelling
    the coroutine of ``start`` during the launch behaves like ``cancel``;
    cancelling a running check fails the task with ``POLL_FAILED``.

    The ids of the most recent tasks are remembered and a launcher reusing
    one of them is a protocol violation.
    """

    def __init__(
        self,
        launcher: TaskLauncher,
        status_store: TaskStatusStore,
        *,
        scheduler: Scheduler | None = None,
        policy: PollPolicy | None = None,
    ) -> None:
        """Initialize an idle poller.

        Args:
            launcher: Starts the server task.
            status_store: Reports the status of a started task.
            scheduler: Timer used between checks, defaults to the asyncio loop.
            policy: Delays and attempt budget, defaults to the configured policy.
        """
        self._launcher = launcher
        self._status_store = status_store
        self._scheduler = scheduler or AsyncioScheduler()
        self.policy = policy or PollPolicy.from_settings()

        self._status = TaskStatus.IDLE
        self._task_id: str | None = None
        self._attempt = 0
        self._estimated_duration_label = ""
        self._result: Any = None
        self._error_message: str | None = None
        self._error_code: ErrorCode | None = None

        self._generation = 0
        self._timer: CancelHandle | None = None
        self._in_flight: str | None = None
        self._recent_task_ids: deque[str] = deque(maxlen=_RECENT_TASK_IDS)
        self._listeners: list[SnapshotListener] = []
        self._settled = asyncio.Event()
        self._settled.set()

    # ------------------------------------------------------------------
    # Caller-facing state
    # ------------------------------------------------------------------

    @property
    def status(self) -> TaskStatus:
        return self._status

    @property
    def task_id(self) -> str | None:
        return self._task_id

    @property
    def attempt(self) -> int:
        return self._attempt

    @property
    def max_attempts(self) -> int:
        return self.policy.max_attempts

    @property
    def progress(self) -> float:
        """Share of the attempt budget used, between 0 and 1."""
        return min(self._attempt / self.max_attempts, 1.0)

    @property
    def estimated_duration_label(self) -> str:
        return self._estimated_duration_label

    @property
    def result(self) -> Any:
        return self._result

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def error_code(self) -> ErrorCode | None:
        return self._error_code

    @property
    def is_busy(self) -> bool:
        """Whether a task is being launched or polled."""
        return self._status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self._status in TERMINAL_STATUSES

    def snapshot(self) -> TaskSnapshot:
        """Return an immutable copy of the current state."""
        return TaskSnapshot(
            status=self._status,
            task_id=self._task_id,
            attempt=self._attempt,
            max_attempts=self.max_attempts,
            estimated_duration_label=self._estimated_duration_label,
            result=self._result,
            error_message=self._error_message,
            error_code=self._error_code,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener called with a snapshot after every state change.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait(self) -> TaskSnapshot:
        """Wait until the current task is completed, failed or cancelled."""
        await self._settled.wait()
        return self.snapshot()

    # ------------------------------------------------------------------
    # Mutating entry points
    # ------------------------------------------------------------------

    async def start(self, job_parameters: Mapping[str, Any]) -> None:
        """Launch a new task and schedule the first status check.

        Ignored while another task is starting or processing. Failures end in
        the ``error`` state and are never raised to the caller.
        """
        if self.is_busy:
            logger.debug(
                "Start ignored, task already running",
                taskId=self._task_id,
                status=self._status.value,
            )
            return

        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._reset()
        self._settled.clear()
        self._set_status(TaskStatus.STARTING)
        logger.info("Starting task", generation=generation)

        try:
            raw = await self._launcher.launch(job_parameters)
        except asyncio.CancelledError:
            if self._is_launch_current(generation):
                logger.info("Task launch cancelled", generation=generation)
                self.cancel()
            raise
        except Exception as e:
            if not self._is_launch_current(generation):
                logger.debug("Discarding launch failure of abandoned task")
                return
            logger.opt(exception=e).warning("Task launch failed")
            self._fail(LaunchFailureError(str(e) or None))
            return

        if not self._is_launch_current(generation):
            logger.debug("Discarding launch reply of abandoned task")
            return

        try:
            response = LaunchResponse.model_validate(raw)
        except ValidationError:
            self._fail(ProtocolViolationError())
            return

        if response.error:
            self._fail(LaunchFailureError(response.error))
            return

        if response.status != RemoteStatus.STARTED or not response.task_id:
            self._fail(ProtocolViolationError())
            return

        task_id = response.task_id
        if task_id in self._recent_task_ids:
            self._fail(
                ProtocolViolationError(ErrorNames.TASK_ID_REUSED.format(value=task_id))
            )
            return

        self._recent_task_ids.append(task_id)
        self._task_id = task_id
        self._estimated_duration_label = response.estimated_time or ""
        self._set_status(TaskStatus.PROCESSING)
        logger.info(
            "Task started",
            taskId=task_id,
            estimatedTime=self._estimated_duration_label,
        )
        self._schedule_check(task_id, 0, self.policy.initial_delay_ms, generation)

    async def check_status(self, task_id: str, attempt: int) -> None:
        """Run the status check with 0-based index ``attempt`` for ``task_id``.

        Normally fired by the scheduler. A call for a task that is no longer
        tracked, or out of sequence, is a no-op.
        """
        await self._run_check(task_id, attempt, self._generation)

    def cancel(self) -> None:
        """Abandon the current task locally and return to ``idle``."""
        previous = self._task_id
        self._cancel_timer()
        self._generation += 1
        self._in_flight = None
        self._reset()
        self._status = TaskStatus.IDLE
        self._settled.set()
        self._notify()
        logger.info("Task cancelled", taskId=previous)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_check(self, task_id: str, attempt: int, generation: int) -> None:
        if not self._is_check_current(generation, task_id):
            logger.debug("Skipping status check of abandoned task", taskId=task_id)
            return
        if self._in_flight is not None or attempt != self._attempt:
            logger.debug(
                "Skipping out of sequence status check",
                taskId=task_id,
                attempt=attempt,
            )
            return

        self._cancel_timer()

        if attempt >= self.policy.max_attempts:
            self._fail(TaskTimeoutError(self.policy.max_wait_label))
            return

        self._attempt = attempt + 1
        self._in_flight = task_id
        self._notify()
        logger.debug(
            "Polling attempt {}/{}",
            self._attempt,
            self.policy.max_attempts,
            taskId=task_id,
        )

        try:
            raw = await self._status_store.fetch_status(task_id)
        except asyncio.CancelledError:
            if self._finish_check(generation, task_id):
                self._fail(PollFailureError(ErrorNames.CHECK_CANCELLED))
            raise
        except Exception as e:
            if not self._finish_check(generation, task_id):
                return
            logger.opt(exception=e).warning("Status check failed", taskId=task_id)
            self._fail(PollFailureError(str(e) or None))
            return

        if not self._finish_check(generation, task_id):
            return

        try:
            response = StatusResponse.model_validate(raw)
        except ValidationError:
            self._fail(ProtocolViolationError.for_status(raw))
            return

        if response.error:
            self._fail(ServerReportedError(response.error))
        elif response.status == RemoteStatus.PROCESSING:
            self._set_status(TaskStatus.PROCESSING)
            self._schedule_check(
                task_id, attempt + 1, self.policy.next_delay_ms(attempt), generation
            )
        elif response.status == RemoteStatus.COMPLETED:
            self._complete(response.data)
        elif response.status == RemoteStatus.ERROR:
            self._fail(ServerReportedError())
        else:
            self._fail(ProtocolViolationError.for_status(response.status))

    def _finish_check(self, generation: int, task_id: str) -> bool:
        """Release the in-flight marker and tell whether the reply still applies."""
        if self._in_flight == task_id:
            self._in_flight = None
        if not self._is_check_current(generation, task_id):
            logger.debug("Discarding status reply of abandoned task", taskId=task_id)
            return False
        return True

    def _schedule_check(
        self, task_id: str, attempt: int, delay_ms: int, generation: int
    ) -> None:
        async def fire() -> None:
            await self._run_check(task_id, attempt, generation)

        self._timer = self._scheduler.schedule_after(delay_ms, fire)
        logger.debug(
            "Next status check in {} seconds",
            delay_ms / 1000,
            taskId=task_id,
            attempt=attempt + 1,
            delayMs=delay_ms,
        )

    def _complete(self, result: Any) -> None:
        self._cancel_timer()
        self._result = result
        self._attempt = 0
        self._settled.set()
        self._set_status(TaskStatus.COMPLETED)
        logger.info("Task completed", taskId=self._task_id)

    def _fail(self, error: AppError) -> None:
        self._cancel_timer()
        self._result = None
        self._error_message = str(error.message)
        self._error_code = error.error_code
        self._attempt = 0
        self._settled.set()
        self._set_status(TaskStatus.ERROR)
        logger.warning(
            "Task failed: {}",
            self._error_message,
            taskId=self._task_id,
            errorCode=error.error_code.value,
        )

    def _reset(self) -> None:
        self._task_id = None
        self._attempt = 0
        self._estimated_duration_label = ""
        self._result = None
        self._error_message = None
        self._error_code = None

    def _is_launch_current(self, generation: int) -> bool:
        return generation == self._generation and self._status == TaskStatus.STARTING

    def _is_check_current(self, generation: int, task_id: str) -> bool:
        return (
            generation == self._generation
            and self._status == TaskStatus.PROCESSING
            and task_id == self._task_id
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_status(self, status: TaskStatus) -> None:
        self._status = status
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task listener failed")
