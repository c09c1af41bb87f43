"""Text constants for consistent error handling."""

from enum import StrEnum

__all__ = ["ErrorCode", "ErrorNames"]


class ErrorCode(StrEnum):
    """Error codes for standardized error handling."""

    # General errors
    SERVER_ERROR = "SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INVALID_JOB = "INVALID_JOB"

    # Task polling errors
    LAUNCH_FAILED = "LAUNCH_FAILED"
    POLL_FAILED = "POLL_FAILED"
    SERVER_REPORTED = "SERVER_REPORTED"
    TIMEOUT = "TIMEOUT"
    PROTOCOL_VIOLATION = "PROTOCOL_VIOLATION"


class ErrorNames(StrEnum):
    """Error messages for standardized error handling."""

    INTERNAL_SERVER_ERROR = "Internal server error"

    # Launch errors
    LAUNCH_FAILED_ERROR = "Failed to start the task"
    UNEXPECTED_LAUNCH_RESPONSE = "Unexpected response format"
    TASK_ID_REUSED = "Task ID {value} was already used by a previous task"

    # Status errors
    POLL_FAILED_ERROR = "Failed to check task status"
    UNKNOWN_SERVER_ERROR = "Unknown error occurred"
    CHECK_CANCELLED = "Status check was cancelled"
    UNEXPECTED_STATUS = "Unexpected response status: {value}"
    TIMED_OUT = "Task timed out after {value}"
