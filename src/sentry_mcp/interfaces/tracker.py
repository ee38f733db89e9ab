"""Abstract interface for issue tracker integrations."""

from typing import Protocol

from ..models.sentry import Event, Issue


class IssueTracker(Protocol):
    """Abstract interface for issue tracker integrations.

    This protocol defines the contract the error-search pipeline relies on.
    The Sentry adapter implements it over HTTP; tests substitute mocks.
    """

    async def search_issues(
        self,
        organization_slug: str,
        query: str,
        limit: int,
    ) -> list[Issue]:
        """
        Search for issues matching the query.

        Args:
            organization_slug: Organization to search in
            query: Search query string in the tracker's syntax
            limit: Maximum number of issues to return

        Returns:
            Matching issues, in the order the tracker returned them

        Raises:
            SearchRequestFailed: If the tracker answered with an error status
            IssueSchemaViolation: If any returned issue has an unexpected shape
        """
        ...

    async def get_latest_event(
        self,
        organization_slug: str,
        issue_id: str,
    ) -> Event:
        """
        Fetch the most recent event recorded for an issue.

        Args:
            organization_slug: Organization the issue belongs to
            issue_id: Tracker-internal issue id

        Returns:
            The latest event for that issue

        Raises:
            EventFetchFailed: If the event could not be fetched or validated
        """
        ...
