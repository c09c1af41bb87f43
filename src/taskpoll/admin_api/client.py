"""HTTP client for the admin API and the technical audit task adapters."""

from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx
from fastapi import status
from loguru import logger
from pydantic import ValidationError

from taskpoll.config.config import settings

from .exceptions import AdminApiError, InvalidJobError
from .schemas import AuditJob

__all__ = ["AdminApiClient", "TechnicalAuditLauncher", "TechnicalAuditStatusStore"]


_AUDIT_ENDPOINT = "admin/seo/technical-audit"
_AUDIT_STATUS_ENDPOINT = "admin/seo/technical-audit/status"


class AdminApiClient:
    """Posts JSON payloads to the admin API and returns the decoded replies."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the API, defaults to the configured one.
            token: Bearer token, defaults to the configured one.
            timeout: Request timeout in seconds, ignored if ``client`` is given.
            client: Existing httpx client to reuse; it is not closed by us.
        """
        self.base_url = (base_url or settings.admin_api_url).rstrip("/")
        token = token or settings.admin_api_token
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.admin_api_timeout
        )

    async def call(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """POST ``payload`` to ``endpoint``.

        The admin API reports failures as a JSON body with an ``error`` field,
        so such bodies are returned even for non-2xx status codes.

        Raises:
            AdminApiError: If the request fails or the reply is not a JSON object
                the caller could interpret.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        try:
            response = await self._client.post(
                url, json=dict(payload), headers=self._headers
            )
        except httpx.HTTPError as e:
            logger.warning("Admin API request failed", url=url, error=str(e))
            raise AdminApiError(f"Admin API request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            msg = f"Admin API returned a non-JSON reply ({response.status_code})"
            raise AdminApiError(msg) from e

        if not isinstance(body, dict):
            raise AdminApiError("Admin API returned an unexpected reply")

        if not _is_success(response.status_code) and "error" not in body:
            raise AdminApiError(f"Admin API returned status {response.status_code}")

        logger.debug("Admin API reply", url=url, statusCode=response.status_code)
        return body

    async def aclose(self) -> None:
        """Close the underlying httpx client if it was created here."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class TechnicalAuditLauncher:
    """Starts technical SEO audit crawls through the admin API."""

    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    async def launch(self, job_parameters: Mapping[str, Any]) -> dict[str, Any]:
        """Validate the audit job and start the crawl.

        Raises:
            InvalidJobError: If the domain is missing or blank.
            AdminApiError: If the admin API cannot be reached.
        """
        try:
            job = AuditJob.model_validate(job_parameters)
        except ValidationError as e:
            raise InvalidJobError(f"Invalid audit job: {e.errors()[0]['msg']}") from e

        logger.debug("Launching technical audit", domain=job.domain)
        return await self._client.call(
            _AUDIT_ENDPOINT, job.model_dump(exclude_none=True)
        )


class TechnicalAuditStatusStore:
    """Reads technical SEO audit crawl status through the admin API."""

    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    async def fetch_status(self, task_id: str) -> dict[str, Any]:
        return await self._client.call(_AUDIT_STATUS_ENDPOINT, {"taskId": task_id})


def _is_success(status_code: int) -> bool:
    return status.HTTP_200_OK <= status_code < status.HTTP_300_MULTIPLE_CHOICES
