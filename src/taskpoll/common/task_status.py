"""TaskStatus model for a polled task."""

from enum import StrEnum

__all__ = ["ACTIVE_STATUSES", "TERMINAL_STATUSES", "TaskStatus"]


class TaskStatus(StrEnum):
    """Client-side status of a polled task."""

    IDLE = "idle"
    STARTING = "starting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


ACTIVE_STATUSES = frozenset({TaskStatus.STARTING, TaskStatus.PROCESSING})
TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.ERROR})
