"""Sentry issue tracker adapter over the Sentry REST API.

This module implements the IssueTracker protocol with an httpx.AsyncClient.
The client is owned by the caller; one adapter serves one tool invocation
and holds no state beyond its credentials.

Every payload is validated with the models in ``models.sentry`` before it
reaches the report pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pydantic
import structlog

from ..config.schema import DEFAULT_API_BASE_URL
from ..models.sentry import Event, Issue
from ..utils.logging import LogEventNames
from ..utils.security import ensure_upstream_url

if TYPE_CHECKING:
    import httpx

log = structlog.get_logger()

# Aggregates the issue list endpoint can omit; the report never uses them.
COLLAPSED_FIELDS = ("stats", "lifetime", "base", "filtered")


class SentryAPIError(Exception):
    """Base exception for Sentry adapter errors."""


class SearchRequestFailed(SentryAPIError):
    """Raised when the issue search endpoint answers with an error status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Failed to search for errors: {status_code} {reason}\n{body}")


class IssueSchemaViolation(SentryAPIError):
    """Raised when the search response does not match the Issue shape."""


class EventFetchFailed(SentryAPIError):
    """Raised when the latest event of an issue cannot be fetched or parsed."""

    def __init__(
        self,
        issue_id: str,
        detail: str,
        status_code: int | None = None,
    ) -> None:
        self.issue_id = issue_id
        self.status_code = status_code
        super().__init__(f"Failed to fetch latest event for issue {issue_id}: {detail}")


class SentryClient:
    """Sentry adapter implementing the IssueTracker protocol.

    Example:
        async with httpx.AsyncClient() as http:
            sentry = SentryClient(http, access_token=token)
            issues = await sentry.search_issues("my-org", 'status:unresolved', limit=3)
            event = await sentry.get_latest_event("my-org", issues[0].id)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        access_token: str,
        base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        """Initialize the Sentry adapter.

        Args:
            client: HTTP client used for every request.
            access_token: OAuth access token sent as a bearer credential.
            base_url: API root, e.g. "https://sentry.io/api/0".

        Raises:
            InvalidUrl: If base_url is not an absolute http(s) URL.
        """
        self._client = client
        self._access_token = access_token
        self._base_url = ensure_upstream_url(base_url).rstrip("/")

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }

    def _issues_url(self, organization_slug: str) -> str:
        return f"{self._base_url}/projects/{organization_slug}/issues/"

    async def search_issues(
        self,
        organization_slug: str,
        query: str,
        limit: int,
    ) -> list[Issue]:
        """Search issues in an organization.

        Args:
            organization_slug: Organization to search in.
            query: Sentry search syntax, e.g. 'status:unresolved'.
            limit: Maximum number of issues to return.

        Returns:
            Validated issues in upstream order.

        Raises:
            SearchRequestFailed: On a non-success status.
            IssueSchemaViolation: If the body is not a list of issues.
        """
        params: list[tuple[str, str | int]] = [("query", query)]
        params.extend(("collapse", field) for field in COLLAPSED_FIELDS)
        params.append(("limit", limit))

        response = await self._client.get(
            self._issues_url(organization_slug),
            params=params,
            headers=self._headers,
        )

        if not response.is_success:
            log.error(
                LogEventNames.ISSUE_SEARCH_FAILED,
                status_code=response.status_code,
                body=response.text,
            )
            raise SearchRequestFailed(response.status_code, response.reason_phrase, response.text)

        try:
            payload: Any = response.json()
        except ValueError as e:
            raise IssueSchemaViolation(f"Issue search returned invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise IssueSchemaViolation(
                f"Issue search returned {type(payload).__name__}, expected a list"
            )

        try:
            return [Issue.model_validate(item) for item in payload]
        except pydantic.ValidationError as e:
            log.error(LogEventNames.ISSUE_SCHEMA_VIOLATION, errors=e.error_count())
            raise IssueSchemaViolation(f"Unexpected issue shape: {e}") from e

    async def get_latest_event(
        self,
        organization_slug: str,
        issue_id: str,
    ) -> Event:
        """Fetch the latest event of one issue.

        Raises:
            EventFetchFailed: On a non-success status or an invalid body.
        """
        url = f"{self._issues_url(organization_slug)}{issue_id}/events/latest/"
        response = await self._client.get(url, headers=self._headers)

        if not response.is_success:
            log.error(
                LogEventNames.EVENT_FETCH_FAILED,
                issue_id=issue_id,
                status_code=response.status_code,
            )
            raise EventFetchFailed(
                issue_id,
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return Event.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            log.error(LogEventNames.EVENT_FETCH_FAILED, issue_id=issue_id, error=str(e))
            raise EventFetchFailed(issue_id, f"unexpected event shape: {e}") from e
