"""Exceptions for task polling."""

from fastapi import status

from taskpoll.common.app_error import AppError
from taskpoll.config.errors import ErrorCode, ErrorNames

__all__ = [
    "LaunchFailureError",
    "PollFailureError",
    "ProtocolViolationError",
    "ServerReportedError",
    "TaskTimeoutError",
]


class LaunchFailureError(AppError):
    """Exception raised when the task launcher failed or was unreachable."""

    error_code = ErrorCode.LAUNCH_FAILED
    message = ErrorNames.LAUNCH_FAILED_ERROR
    status_code = status.HTTP_502_BAD_GATEWAY


class PollFailureError(AppError):
    """Exception raised when a status check itself failed."""

    error_code = ErrorCode.POLL_FAILED
    message = ErrorNames.POLL_FAILED_ERROR
    status_code = status.HTTP_502_BAD_GATEWAY


class ServerReportedError(AppError):
    """Exception raised when the status store reported a failed task."""

    error_code = ErrorCode.SERVER_REPORTED
    message = ErrorNames.UNKNOWN_SERVER_ERROR
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class TaskTimeoutError(AppError):
    """Exception raised when the attempt budget is exhausted."""

    error_code = ErrorCode.TIMEOUT
    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, max_wait_label: str) -> None:
        """Initialize with the human readable time budget."""
        super().__init__(ErrorNames.TIMED_OUT.format(value=max_wait_label))


class ProtocolViolationError(AppError):
    """Exception raised when a reply does not match the task protocol."""

    error_code = ErrorCode.PROTOCOL_VIOLATION
    message = ErrorNames.UNEXPECTED_LAUNCH_RESPONSE
    status_code = status.HTTP_502_BAD_GATEWAY

    @classmethod
    def for_status(cls, raw_status: object) -> "ProtocolViolationError":
        """Build the error for a status value outside the known set."""
        return cls(ErrorNames.UNEXPECTED_STATUS.format(value=raw_status))
