"""Error search pipeline: issues touching a file, rendered as Markdown.

This module implements the IssueSearchPipeline, which backs the
``search_errors_in_file`` tool:
1. Build a Sentry query matching unresolved issues with the file in a stack
2. Search issues (at most ``RESULT_LIMIT``)
3. Fetch the latest event of each issue, one after another, in upstream order
4. Extract the first exception and its stack trace
5. Render one Markdown section per issue

Any failure aborts the whole run; there are no partial reports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ..utils.logging import LogEventNames, bind_context, unbind_context

if TYPE_CHECKING:
    from ..interfaces.tracker import IssueTracker
    from ..models.sentry import ExceptionValue, Frame, Issue

log = structlog.get_logger()

RESULT_LIMIT = 3

FENCE = "```"


def build_search_query(filename: str) -> str:
    """Query for unresolved issues with ``filename`` as a stack path suffix."""
    return f'stack.filename:"*/{filename}" status:unresolved'


def render_frame(frame: Frame) -> str:
    """Render a frame header followed by the source line it points at.

    Only context lines numbered exactly ``frame.lineno`` are kept.
    """
    filename = frame.filename or "<unknown>"
    lineno = frame.lineno if frame.lineno is not None else "?"
    return f"{filename} (line {lineno})\n" + "\n".join(frame.matching_lines())


def render_exception(exception: ExceptionValue) -> str:
    """Render the error and stack trace blocks of one exception."""
    parts = [f"Error:\n{FENCE}\n{exception.type}: {exception.value}\n{FENCE}\n\n"]

    if exception.stacktrace is not None:
        frames = "\n".join(render_frame(frame) for frame in exception.stacktrace.frames)
        parts.append(f"Stacktrace:\n{FENCE}\n{frames}\n{FENCE}\n\n")

    return "".join(parts)


def render_issue_header(issue: Issue) -> str:
    """Render the heading and metadata list of one issue."""
    return (
        f"## {issue.short_id}: {issue.title}\n"
        f"- **ID**: {issue.short_id}\n"
        f"- **Last Seen**: {issue.last_seen}\n"
        f"- **Occurences**: {issue.count}\n"
        f"- **Link**: [View in Sentry]({issue.permalink})\n\n"
    )


def render_no_issues(filename: str, organization_slug: str) -> str:
    return (
        "# No issues found\n"
        f"Could not find any errors for file `{filename}` "
        f"in organization `{organization_slug}`."
    )


def render_usage_note(issue: Issue) -> str:
    return (
        "# Using this information\n\n"
        "You can reference the ID in commit messages "
        f"(e.g. `Fixes #{issue.short_id}`) "
        "to automatically close the issue when the commit is merged."
    )


class IssueSearchPipeline:
    """Builds the error report for one file.

    Example:
        pipeline = IssueSearchPipeline(sentry_client, organization_slug="my-org")
        report = await pipeline.run("app.py")
    """

    def __init__(
        self,
        tracker: IssueTracker,
        organization_slug: str,
        result_limit: int = RESULT_LIMIT,
    ) -> None:
        """Initialize the pipeline.

        Args:
            tracker: Issue tracker to query
            organization_slug: Organization whose issues are searched
            result_limit: Maximum number of issues in the report
        """
        self._tracker = tracker
        self._organization_slug = organization_slug
        self._result_limit = result_limit

    async def run(self, filename: str) -> str:
        """Search issues for ``filename`` and render the Markdown report.

        Args:
            filename: File path or basename to search stack traces for

        Returns:
            The Markdown report

        Raises:
            SearchRequestFailed: If the search request failed
            IssueSchemaViolation: If the search returned malformed issues
            EventFetchFailed: If any latest-event fetch failed
        """
        bind_context(filename=filename, organization_slug=self._organization_slug)
        try:
            return await self._run(filename)
        finally:
            unbind_context("filename", "organization_slug")

    async def _run(self, filename: str) -> str:
        query = build_search_query(filename)
        log.info(LogEventNames.ISSUE_SEARCH_START, query=query, limit=self._result_limit)

        issues = await self._tracker.search_issues(
            self._organization_slug,
            query,
            self._result_limit,
        )

        if not issues:
            log.info(LogEventNames.ISSUE_NO_MATCH)
            return render_no_issues(filename, self._organization_slug)

        parts = [f"# Errors in `{filename}`\n\n"]

        for issue in issues:
            parts.append(render_issue_header(issue))

            event = await self._tracker.get_latest_event(self._organization_slug, issue.id)
            exception = event.first_exception
            log.debug(
                LogEventNames.EVENT_FETCHED,
                issue_id=issue.id,
                has_exception=exception is not None,
            )

            if exception is not None:
                parts.append(render_exception(exception))

        parts.append(render_usage_note(issues[-1]))

        log.info(LogEventNames.ISSUE_SEARCH_COMPLETE, issue_count=len(issues))
        return "".join(parts)
