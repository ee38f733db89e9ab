"""Utility functions and helpers.

This module provides various utilities for the Sentry MCP server:
- security: Secret redaction, URL and slug validation
- logging: Structured logging with secret sanitization
"""

from sentry_mcp.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from sentry_mcp.utils.security import (
    InvalidUrl,
    RedactionError,
    SecretRedactor,
    SecurityError,
    ValidationError,
)

__all__ = [
    # Security
    "InvalidUrl",
    # Logging
    "LogFormat",
    "LogLevel",
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
    "ValidationError",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
]
