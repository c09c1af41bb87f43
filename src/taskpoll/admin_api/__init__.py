"""Admin API module with the adapters used by the poller.

The admin API starts the technical SEO audit crawl and reports its status.
``TechnicalAuditLauncher`` and ``TechnicalAuditStatusStore`` implement the
poller ports on top of a shared ``AdminApiClient``.
"""

from .client import AdminApiClient, TechnicalAuditLauncher, TechnicalAuditStatusStore
from .exceptions import AdminApiError, InvalidJobError
from .schemas import AuditJob

__all__ = [
    "AdminApiClient",
    "AdminApiError",
    "AuditJob",
    "InvalidJobError",
    "TechnicalAuditLauncher",
    "TechnicalAuditStatusStore",
]
