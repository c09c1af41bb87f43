"""Timing policy for polling a long-running task."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from taskpoll.config.config import settings

__all__ = ["PollPolicy"]


_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1_000


class PollPolicy(BaseModel):
    """Delays and attempt budget of the status checks.

    The delay after a check grows linearly with the number of checks already
    performed and is capped at ``max_delay_ms``. The budget counts status
    checks, not wall-clock time; ``max_wait_ms`` is the wall-clock time the
    budget allows in the worst case.
    """

    model_config = ConfigDict(frozen=True)

    initial_delay_ms: int = Field(
        default=5000, ge=0, description="Delay before the first status check."
    )
    base_delay_ms: int = Field(
        default=10000, ge=0, description="Delay after the first status check."
    )
    step_ms: int = Field(
        default=2000, ge=0, description="Delay growth per performed status check."
    )
    max_delay_ms: int = Field(
        default=30000, ge=0, description="Upper bound of a single delay."
    )
    max_attempts: int = Field(
        default=60, ge=1, description="Status checks allowed before timing out."
    )

    @classmethod
    def technical_audit(cls) -> "PollPolicy":
        """Policy of the technical SEO audit crawl."""
        return cls()

    @classmethod
    def video_generation(cls) -> "PollPolicy":
        """Policy of the AI video generation: a fixed 10 second interval."""
        return cls(
            initial_delay_ms=10000,
            base_delay_ms=10000,
            step_ms=0,
            max_delay_ms=10000,
            max_attempts=60,
        )

    @classmethod
    def from_settings(cls) -> "PollPolicy":
        """Policy configured through the application settings."""
        return cls(
            initial_delay_ms=settings.poll_initial_delay_ms,
            base_delay_ms=settings.poll_base_delay_ms,
            step_ms=settings.poll_step_ms,
            max_delay_ms=settings.poll_max_delay_ms,
            max_attempts=settings.poll_max_attempts,
        )

    def next_delay_ms(self, attempt: int) -> int:
        """Delay scheduled after the check with 0-based index ``attempt``."""
        return min(self.base_delay_ms + attempt * self.step_ms, self.max_delay_ms)

    def delays(self) -> list[int]:
        """Delays scheduled after each check the budget allows."""
        return [self.next_delay_ms(attempt) for attempt in range(self.max_attempts)]

    @computed_field
    @property
    def max_wait_ms(self) -> int:
        """Worst-case time from launch until the forced timeout."""
        return self.initial_delay_ms + sum(self.delays())

    @computed_field
    @property
    def max_wait_label(self) -> str:
        """Human readable form of ``max_wait_ms``."""
        if self.max_wait_ms >= _MS_PER_MINUTE:
            minutes = round(self.max_wait_ms / _MS_PER_MINUTE)
            return f"{minutes} minute{'s' if minutes != 1 else ''}"
        seconds = round(self.max_wait_ms / _MS_PER_SECOND)
        return f"{seconds} second{'s' if seconds != 1 else ''}"
