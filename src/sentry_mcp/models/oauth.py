"""Data models for the OAuth authorization-code flow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class AuthorizationRequest:
    """Parameters for the upstream authorize redirect."""

    upstream_url: str
    client_id: str
    scope: str
    redirect_uri: str
    state: str | None = None


@dataclass(frozen=True)
class TokenExchangeRequest:
    """Parameters for exchanging an authorization code for a token."""

    client_id: str
    client_secret: str
    code: str | None
    redirect_uri: str
    upstream_url: str


class TokenResponse(BaseModel):
    """Validated body of the upstream token endpoint.

    Opaque credential material: callers own its storage and lifecycle.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    expires_at: str | None = None
    scope: str | None = None
    user: dict[str, Any] | None = None


class OAuthFailureReason(Enum):
    """Why a token exchange did not produce a token."""

    MISSING_AUTHORIZATION_CODE = "missing_authorization_code"
    TOKEN_ENDPOINT_ERROR = "token_endpoint_error"
    TOKEN_RESPONSE_MALFORMED = "token_response_malformed"


@dataclass(frozen=True)
class TokenExchangeSuccess:
    """A token was obtained."""

    token: TokenResponse


@dataclass(frozen=True)
class TokenExchangeFailure:
    """A token exchange failed; ``status_code`` is what to surface to the client."""

    reason: OAuthFailureReason
    status_code: int
    message: str
    upstream_status: int | None = None
    upstream_body: str | None = None


TokenExchangeResult = TokenExchangeSuccess | TokenExchangeFailure
