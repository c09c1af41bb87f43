"""Declaration of the root package taskpoll."""

from taskpoll.admin_api import (
    AdminApiClient,
    TechnicalAuditLauncher,
    TechnicalAuditStatusStore,
)
from taskpoll.common import TaskStatus
from taskpoll.poller import AsyncTaskPoller, PollPolicy, Scheduler, TaskSnapshot

__all__ = [
    "AdminApiClient",
    "AsyncTaskPoller",
    "PollPolicy",
    "TaskSnapshot",
    "TaskStatus",
    "TechnicalAuditLauncher",
    "TechnicalAuditStatusStore",
    "technical_audit_poller",
]


def technical_audit_poller(
    client: AdminApiClient,
    *,
    policy: PollPolicy | None = None,
    scheduler: Scheduler | None = None,
) -> AsyncTaskPoller:
    """Build a poller wired to the technical audit endpoints of the admin API.

    The poller does not own ``client``; the caller closes it, for example by
    using it as an async context manager.
    """
    return AsyncTaskPoller(
        TechnicalAuditLauncher(client),
        TechnicalAuditStatusStore(client),
        scheduler=scheduler,
        policy=policy or PollPolicy.technical_audit(),
    )
