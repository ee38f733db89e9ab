"""Data models and transfer objects."""

from .oauth import (
    AuthorizationRequest,
    OAuthFailureReason,
    TokenExchangeFailure,
    TokenExchangeRequest,
    TokenExchangeResult,
    TokenExchangeSuccess,
    TokenResponse,
)
from .result import ToolError, ToolOk, ToolResult
from .sentry import (
    Event,
    ExceptionData,
    ExceptionEntry,
    ExceptionValue,
    Frame,
    GenericEntry,
    Issue,
    Stacktrace,
)

__all__ = [
    # OAuth models
    "AuthorizationRequest",
    "TokenExchangeRequest",
    "TokenResponse",
    "OAuthFailureReason",
    "TokenExchangeSuccess",
    "TokenExchangeFailure",
    "TokenExchangeResult",
    # Sentry payload models
    "Issue",
    "Event",
    "ExceptionEntry",
    "GenericEntry",
    "ExceptionData",
    "ExceptionValue",
    "Stacktrace",
    "Frame",
    # Tool results
    "ToolOk",
    "ToolError",
    "ToolResult",
]
