"""Schemas of the task service replies and of the poller state."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from taskpoll.common.task_status import TaskStatus
from taskpoll.config.errors import ErrorCode

__all__ = ["LaunchResponse", "RemoteStatus", "StatusResponse", "TaskSnapshot"]


class RemoteStatus(StrEnum):
    """Status values used by the task service."""

    STARTED = "started"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class LaunchResponse(BaseModel):
    """Reply of the task launcher."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: str | None = None
    task_id: str | None = Field(default=None, alias="taskId")
    estimated_time: str | None = Field(default=None, alias="estimatedTime")
    error: str | None = None


class StatusResponse(BaseModel):
    """Reply of the task status store."""

    model_config = ConfigDict(extra="allow")

    status: Any = None
    data: Any = None
    error: str | None = None


class TaskSnapshot(BaseModel):
    """Immutable view of the task tracked by a poller."""

    model_config = ConfigDict(frozen=True)

    status: TaskStatus = TaskStatus.IDLE
    task_id: str | None = None
    attempt: int = 0
    max_attempts: int
    estimated_duration_label: str = ""
    result: Any = None
    error_message: str | None = None
    error_code: ErrorCode | None = None

    @property
    def progress(self) -> float:
        """Share of the attempt budget used, between 0 and 1."""
        return min(self.attempt / self.max_attempts, 1.0)
