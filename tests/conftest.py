"""Common test fixtures for the library."""

import os

os.environ.setdefault("ENV", "testing")

import pytest

from taskpoll.config import config_logger
from taskpoll.poller import PollPolicy
from tests.utils import FakeScheduler


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> None:
    """Configure loguru once for the whole test session."""
    config_logger()


@pytest.fixture
def scheduler() -> FakeScheduler:
    """Deterministic scheduler with a virtual clock."""
    return FakeScheduler()


@pytest.fixture
def policy() -> PollPolicy:
    """Policy of the technical audit flow."""
    return PollPolicy.technical_audit()
