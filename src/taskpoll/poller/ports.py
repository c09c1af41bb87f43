"""Ports to the external task service."""

from collections.abc import Mapping
from typing import Any, Protocol

__all__ = ["TaskLauncher", "TaskStatusStore"]


class TaskLauncher(Protocol):
    """Starts a long-running job on the server.

    Replies with ``{"status": "started", "taskId": ..., "estimatedTime": ...}``
    or with an error payload ``{"error": ...}``.
    """

    async def launch(self, job_parameters: Mapping[str, Any]) -> Mapping[str, Any]:
        """Start a job and return the raw reply."""
        ...


class TaskStatusStore(Protocol):
    """Reports the status of a job started through a ``TaskLauncher``.

    Replies with ``{"status": "processing"}``, ``{"status": "completed",
    "data": ...}`` or ``{"status": "error", "error": ...}``.
    """

    async def fetch_status(self, task_id: str) -> Mapping[str, Any]:
        """Return the raw status reply for ``task_id``."""
        ...
