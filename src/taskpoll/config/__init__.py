"""Configuration module for the taskpoll library.

This module provides centralized configuration management for the library,
including logging setup, error codes and the polling and admin API settings.

Key Components:
- settings: Configuration loaded from environment variables and the TOML file
- Logging: Loguru-based logging configuration with development/production modes
- Error handling: Centralized error codes and error messages

Defaults live in resources/app.toml; every value can be overridden through
environment variables or a .env file.
"""

from taskpoll.config.config import settings
from taskpoll.config.errors import ErrorCode, ErrorNames
from taskpoll.config.logger import config_logger

__all__ = [
    "ErrorCode",
    "ErrorNames",
    "config_logger",
    "settings",
]
