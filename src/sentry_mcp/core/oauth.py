"""OAuth authorization-code flow against Sentry.

Two steps, run once per user authorization:

1. ``build_authorize_url`` produces the upstream redirect the user's browser
   is sent to.
2. ``exchange_code_for_access_token`` trades the code Sentry hands back for
   an access token.

The exchange never raises: every outcome is a ``TokenExchangeResult`` value,
and the caller decides which HTTP status to show the authorizing client.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx
import pydantic
import structlog

from ..models.oauth import (
    AuthorizationRequest,
    OAuthFailureReason,
    TokenExchangeFailure,
    TokenExchangeRequest,
    TokenExchangeResult,
    TokenExchangeSuccess,
    TokenResponse,
)
from ..utils.logging import LogEventNames
from ..utils.security import ensure_upstream_url

log = structlog.get_logger()


def build_authorize_url(request: AuthorizationRequest) -> str:
    """Build the upstream authorization URL.

    Sets ``client_id``, ``redirect_uri``, ``scope`` and ``response_type=code``
    on ``request.upstream_url``, plus ``state`` when one is given. Existing
    query parameters with other names are kept.

    Args:
        request: Client identity, scope, redirect target and optional state.

    Returns:
        The authorization URL.

    Raises:
        InvalidUrl: If ``upstream_url`` is not an absolute http(s) URL.
    """
    parts = urlsplit(ensure_upstream_url(request.upstream_url))

    overrides = {
        "client_id": request.client_id,
        "redirect_uri": request.redirect_uri,
        "scope": request.scope,
    }
    if request.state:
        overrides["state"] = request.state
    overrides["response_type"] = "code"

    # Repeated upstream parameters survive; only the names set here are replaced
    params = [
        (name, value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
        if name not in overrides
    ]
    params.extend(overrides.items())

    return urlunsplit(parts._replace(query=urlencode(params)))


async def exchange_code_for_access_token(
    request: TokenExchangeRequest,
    client: httpx.AsyncClient | None = None,
) -> TokenExchangeResult:
    """Exchange an authorization code for an access token.

    Sends a single form-encoded POST. ``redirect_uri`` is not part of the
    body. Nothing is retried.

    Args:
        request: Client credentials, the code and the token endpoint URL.
        client: HTTP client to use; a temporary one without a timeout is
            created if omitted. Callers bound the request with their own client.

    Returns:
        TokenExchangeSuccess with the validated token, or
        TokenExchangeFailure describing why no token was obtained.
    """
    if not request.code:
        log.warning(LogEventNames.TOKEN_EXCHANGE_MISSING_CODE)
        return TokenExchangeFailure(
            reason=OAuthFailureReason.MISSING_AUTHORIZATION_CODE,
            status_code=400,
            message="Missing code",
        )

    if client is None:
        async with httpx.AsyncClient(timeout=None) as owned_client:
            return await _exchange(request, request.code, owned_client)
    return await _exchange(request, request.code, client)


async def _exchange(
    request: TokenExchangeRequest,
    code: str,
    client: httpx.AsyncClient,
) -> TokenExchangeResult:
    log.info(LogEventNames.TOKEN_EXCHANGE_START, client_id=request.client_id)

    try:
        response = await client.post(
            request.upstream_url,
            data={
                "grant_type": "authorization_code",
                "client_id": request.client_id,
                "client_secret": request.client_secret,
                "code": code,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    except httpx.HTTPError as e:
        log.error(LogEventNames.TOKEN_ENDPOINT_ERROR, error=str(e))
        return TokenExchangeFailure(
            reason=OAuthFailureReason.TOKEN_ENDPOINT_ERROR,
            status_code=500,
            message="Failed to fetch access token",
            upstream_body=str(e),
        )

    if not response.is_success:
        log.error(
            LogEventNames.TOKEN_ENDPOINT_ERROR,
            status_code=response.status_code,
            body=response.text,
        )
        return TokenExchangeFailure(
            reason=OAuthFailureReason.TOKEN_ENDPOINT_ERROR,
            status_code=500,
            message="Failed to fetch access token",
            upstream_status=response.status_code,
            upstream_body=response.text,
        )

    try:
        token = TokenResponse.model_validate(response.json())
    except (ValueError, pydantic.ValidationError) as e:
        log.error(LogEventNames.TOKEN_RESPONSE_MALFORMED, error_type=type(e).__name__)
        return TokenExchangeFailure(
            reason=OAuthFailureReason.TOKEN_RESPONSE_MALFORMED,
            status_code=500,
            message="Failed to parse token response",
            upstream_status=response.status_code,
            upstream_body=response.text,
        )

    log.info(LogEventNames.TOKEN_EXCHANGE_COMPLETE, client_id=request.client_id)
    return TokenExchangeSuccess(token=token)
