"""Define configuration for the project."""

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["settings"]


_app_config_path = Path(__file__).parent / "resources" / "app.toml"

with Path.open(_app_config_path, "rb") as f:
    _config = tomllib.load(f)
    _app_config = _config.get("app", {})
    _poller_config = _app_config.get("poller", {})
    _admin_api_config = _app_config.get("admin_api", {})
    _log_config = _app_config.get("logging", {})


class Settings(BaseSettings):
    """Application configuration settings."""

    # Environment configuration
    app_env: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Current application environment determining behavior.",
        validation_alias="ENV",
    )

    version: str = Field(
        default="0.1.0",
        description="Version of the library.",
    )

    # Poller configuration
    poll_initial_delay_ms: int = Field(
        default=_poller_config.get("initial_delay_ms", 5000),
        ge=0,
        description="Delay before the first status check after a task started.",
        validation_alias="POLL_INITIAL_DELAY_MS",
    )

    poll_base_delay_ms: int = Field(
        default=_poller_config.get("base_delay_ms", 10000),
        ge=0,
        description="Delay after the first status check.",
        validation_alias="POLL_BASE_DELAY_MS",
    )

    poll_step_ms: int = Field(
        default=_poller_config.get("step_ms", 2000),
        ge=0,
        description="Linear delay growth per performed status check.",
        validation_alias="POLL_STEP_MS",
    )

    poll_max_delay_ms: int = Field(
        default=_poller_config.get("max_delay_ms", 30000),
        ge=0,
        description="Upper bound for the delay between two status checks.",
        validation_alias="POLL_MAX_DELAY_MS",
    )

    poll_max_attempts: int = Field(
        default=_poller_config.get("max_attempts", 60),
        ge=1,
        description="Number of status checks before a task is timed out.",
        validation_alias="POLL_MAX_ATTEMPTS",
    )

    # Admin API configuration
    admin_api_url: str = Field(
        default=_admin_api_config.get("base_url", "http://localhost:3000/api"),
        description="Base URL of the admin API that launches and reports tasks.",
        validation_alias="ADMIN_API_URL",
    )

    admin_api_token: str | None = Field(
        default=None,
        description="Bearer token sent to the admin API.",
        validation_alias="ADMIN_API_TOKEN",
        exclude=True,
    )

    admin_api_timeout: float = Field(
        default=_admin_api_config.get("timeout", 30),
        gt=0,
        description="Timeout for a single admin API request in seconds.",
        validation_alias="ADMIN_API_TIMEOUT",
    )

    # Log configuration
    log_dir: str = Field(
        default=_log_config.get("log_dir", "log"),
        description="Directory for storing log files.",
    )

    log_file: str = Field(
        default=_log_config.get("log_file", "app.log"),
        description="Name of the log file.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (e.g., DEBUG, INFO, WARNING, ERROR).",
    )

    rotation: str = Field(
        default=_log_config.get("rotation", "1 MB"),
        description="Log rotation strategy (time or size-based).",
    )

    @computed_field
    @property
    def log_path(self) -> Path:
        """Path where application logs are stored."""
        return Path(self.log_dir) / self.log_file

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Adjust log level based on environment."""
        if self.app_env == "production" and self.log_level == "DEBUG":
            self.log_level = "INFO"
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


# Create a single instance of Settings to use throughout the application
settings = Settings()
