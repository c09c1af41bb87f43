"""Common module for shared error handling and task states.

Key Components:
- App errors: Application-specific error type with structured error codes
- Task status: The client-side task states shared by the poller and its callers
"""

from .app_error import AppError
from .task_status import ACTIVE_STATUSES, TERMINAL_STATUSES, TaskStatus

__all__ = ["ACTIVE_STATUSES", "TERMINAL_STATUSES", "AppError", "TaskStatus"]
