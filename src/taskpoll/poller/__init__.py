"""Poller module for tracking long-running server tasks.

A task is launched through a ``TaskLauncher`` and then checked through a
``TaskStatusStore`` until it completes, fails or runs out of its attempt
budget. The delay between checks grows linearly and is capped.

Key Components:
- AsyncTaskPoller: The single-task state machine exposed to the UI layer
- PollPolicy: Initial delay, backoff and attempt budget
- Scheduler: Injectable timer, backed by the asyncio loop in production
- Exceptions: One error type per failure class of a task
"""

from .exceptions import (
    LaunchFailureError,
    PollFailureError,
    ProtocolViolationError,
    ServerReportedError,
    TaskTimeoutError,
)
from .policy import PollPolicy
from .poller import AsyncTaskPoller, SnapshotListener
from .ports import TaskLauncher, TaskStatusStore
from .scheduler import AsyncioScheduler, CancelHandle, ScheduledCallback, Scheduler
from .schemas import LaunchResponse, RemoteStatus, StatusResponse, TaskSnapshot

__all__ = [
    "AsyncTaskPoller",
    "AsyncioScheduler",
    "CancelHandle",
    "LaunchFailureError",
    "LaunchResponse",
    "PollFailureError",
    "PollPolicy",
    "ProtocolViolationError",
    "RemoteStatus",
    "ScheduledCallback",
    "Scheduler",
    "ServerReportedError",
    "SnapshotListener",
    "StatusResponse",
    "TaskLauncher",
    "TaskSnapshot",
    "TaskStatusStore",
    "TaskTimeoutError",
]
