"""Core business logic components.

This module exports the main business logic:
- build_authorize_url / exchange_code_for_access_token: OAuth leg
- IssueSearchPipeline: Builds the error report for a file
- ErrorReporter: Failure boundary for tool calls
"""

from sentry_mcp.core.issue_search import IssueSearchPipeline, build_search_query
from sentry_mcp.core.oauth import build_authorize_url, exchange_code_for_access_token
from sentry_mcp.core.reporter import ErrorReporter

__all__ = [
    "ErrorReporter",
    "IssueSearchPipeline",
    "build_authorize_url",
    "build_search_query",
    "exchange_code_for_access_token",
]
