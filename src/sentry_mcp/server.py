"""MCP tool host.

Registers the Sentry tools on a FastMCP server:
- echo: returns its input, for connectivity checks
- search_errors_in_file: Markdown report of unresolved Sentry issues whose
  stack traces include a given file

Each tool call gets its own HTTP client and pipeline; nothing is shared
between calls except configuration.
"""

from __future__ import annotations

from typing import Annotated

import httpx
import structlog
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError as MCPToolError
from pydantic import Field

from .adapters.sentry import SearchRequestFailed, SentryClient
from .config.schema import AppConfig
from .core.issue_search import RESULT_LIMIT, IssueSearchPipeline
from .core.reporter import ErrorReporter
from .models.result import ToolError, ToolResult
from .utils.logging import LogEventNames

log = structlog.get_logger()

SEARCH_TOOL_NAME = "search_errors_in_file"
SEARCH_TOOL_DESCRIPTION = (
    "Search Sentry for errors occurring in a specific file. "
    f"A maximum of {RESULT_LIMIT} results will be returned."
)
SEARCH_FAILURE_PREFIX = "Error searching for file errors"


async def search_errors_in_file(
    filename: str,
    *,
    config: AppConfig,
    reporter: ErrorReporter,
) -> ToolResult:
    """Run the error search for one file inside the failure boundary.

    Args:
        filename: File path or basename to search for
        config: Application configuration (token, organization, timeouts)
        reporter: Failure boundary used to log and convert errors

    Returns:
        ToolOk with the report, or ToolError with a readable message
    """
    log.info(LogEventNames.TOOL_CALLED, tool=SEARCH_TOOL_NAME, filename=filename)

    async def build_report() -> str:
        async with httpx.AsyncClient(timeout=config.http.timeout) as http:
            tracker = SentryClient(
                http,
                access_token=config.sentry.access_token or "",
                base_url=config.sentry.api_base_url,
            )
            pipeline = IssueSearchPipeline(tracker, config.sentry.organization_slug)
            return await pipeline.run(filename)

    return await reporter.guard(
        build_report(),
        failure_prefix=SEARCH_FAILURE_PREFIX,
        verbatim=(SearchRequestFailed,),
        contexts={
            "tool": {
                "name": SEARCH_TOOL_NAME,
                "filename": filename,
                "organization_slug": config.sentry.organization_slug,
            }
        },
    )


def create_server(config: AppConfig, reporter: ErrorReporter | None = None) -> FastMCP:
    """Build the FastMCP server with all tools registered.

    Args:
        config: Application configuration
        reporter: Failure boundary; a sink-less reporter is used if omitted

    Returns:
        The configured server, not yet running

    Raises:
        ValueError: If no Sentry access token is configured
    """
    if not config.sentry.access_token:
        raise ValueError("sentry.access_token is required to serve tools")

    reporter = reporter or ErrorReporter()
    server = FastMCP(config.server.name, host=config.server.host, port=config.server.port)

    @server.tool(name="echo", description="Echo a message")
    async def echo(message: str) -> str:
        return message

    @server.tool(name=SEARCH_TOOL_NAME, description=SEARCH_TOOL_DESCRIPTION)
    async def search_errors_in_file_tool(
        filename: Annotated[
            str, Field(description="The path or name of the file to search for errors in")
        ],
    ) -> str:
        result = await search_errors_in_file(filename, config=config, reporter=reporter)
        if isinstance(result, ToolError):
            raise MCPToolError(result.message)
        return result.text

    return server


async def run_server(server: FastMCP, transport: str = "stdio") -> None:
    """Serve until the transport closes."""
    log.info(LogEventNames.SERVER_STARTING, transport=transport)
    if transport == "sse":
        await server.run_sse_async()
    else:
        await server.run_stdio_async()
    log.info(LogEventNames.SERVER_STOPPED)
