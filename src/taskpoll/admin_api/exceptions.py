"""Exceptions for the admin API adapters."""

from fastapi import status

from taskpoll.common.app_error import AppError
from taskpoll.config.errors import ErrorCode

__all__ = ["AdminApiError", "InvalidJobError"]


class AdminApiError(AppError):
    """Exception raised when the admin API cannot be reached or answers garbage."""

    error_code = ErrorCode.SERVICE_UNAVAILABLE
    message = "Admin API request failed"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class InvalidJobError(AppError):
    """Exception raised when the job parameters are invalid."""

    error_code = ErrorCode.INVALID_JOB
    message = "Invalid job parameters"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
