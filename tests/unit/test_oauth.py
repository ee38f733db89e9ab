"""Tests for the OAuth authorization-code flow."""

from urllib.parse import parse_qs, parse_qsl, urlsplit

import httpx
import pytest
from pytest_httpx import HTTPXMock

from sentry_mcp.core.oauth import build_authorize_url, exchange_code_for_access_token
from sentry_mcp.models.oauth import (
    AuthorizationRequest,
    OAuthFailureReason,
    TokenExchangeFailure,
    TokenExchangeRequest,
    TokenExchangeSuccess,
)
from sentry_mcp.utils.security import InvalidUrl

AUTHORIZE_URL = "https://sentry.io/oauth/authorize/"
TOKEN_URL = "https://sentry.io/oauth/token/"


def _authorization_request(**overrides: str | None) -> AuthorizationRequest:
    values = {
        "upstream_url": AUTHORIZE_URL,
        "client_id": "client-123",
        "scope": "org:read event:read",
        "redirect_uri": "https://mcp.example.com/callback",
        "state": None,
    }
    values.update(overrides)
    return AuthorizationRequest(**values)  # type: ignore[arg-type]


def _exchange_request(code: str | None = "auth-code") -> TokenExchangeRequest:
    return TokenExchangeRequest(
        client_id="client-123",
        client_secret="client-secret",
        code=code,
        redirect_uri="https://mcp.example.com/callback",
        upstream_url=TOKEN_URL,
    )


class TestBuildAuthorizeUrl:
    """Test upstream authorize URL construction."""

    def test_sets_required_parameters(self) -> None:
        """Test that exactly the OAuth parameters are set without state."""
        url = build_authorize_url(_authorization_request())
        params = parse_qs(urlsplit(url).query)

        assert params == {
            "client_id": ["client-123"],
            "redirect_uri": ["https://mcp.example.com/callback"],
            "scope": ["org:read event:read"],
            "response_type": ["code"],
        }

    def test_includes_state_when_provided(self) -> None:
        """Test that state is added only when given."""
        url = build_authorize_url(_authorization_request(state="xyz"))
        params = parse_qs(urlsplit(url).query)

        assert params["state"] == ["xyz"]
        assert set(params) == {"client_id", "redirect_uri", "scope", "response_type", "state"}

    def test_keeps_upstream_base(self) -> None:
        """Test that scheme, host and path come from the upstream URL."""
        parts = urlsplit(build_authorize_url(_authorization_request()))
        assert (parts.scheme, parts.netloc, parts.path) == (
            "https",
            "sentry.io",
            "/oauth/authorize/",
        )

    def test_keeps_repeated_upstream_parameters(self) -> None:
        """Test that existing parameters survive and only OAuth names are replaced."""
        url = build_authorize_url(
            _authorization_request(upstream_url=f"{AUTHORIZE_URL}?a=1&a=2&client_id=old")
        )
        pairs = parse_qsl(urlsplit(url).query)

        assert [value for name, value in pairs if name == "a"] == ["1", "2"]
        assert [value for name, value in pairs if name == "client_id"] == ["client-123"]

    def test_idempotent(self) -> None:
        """Test that identical input yields identical output."""
        request = _authorization_request(state="abc")
        assert build_authorize_url(request) == build_authorize_url(request)

    def test_malformed_upstream_url_raises(self) -> None:
        """Test that a URL without scheme or host is rejected."""
        with pytest.raises(InvalidUrl):
            build_authorize_url(_authorization_request(upstream_url="not a url"))


class TestExchangeCodeForAccessToken:
    """Test the authorization-code exchange."""

    async def test_missing_code_makes_no_request(self, httpx_mock: HTTPXMock) -> None:
        """Test that a missing code fails fast without a network call."""
        result = await exchange_code_for_access_token(_exchange_request(code=None))

        assert isinstance(result, TokenExchangeFailure)
        assert result.reason is OAuthFailureReason.MISSING_AUTHORIZATION_CODE
        assert result.status_code == 400
        assert result.message == "Missing code"
        assert httpx_mock.get_requests() == []

    async def test_empty_code_is_missing(self, httpx_mock: HTTPXMock) -> None:
        """Test that an empty code is treated as missing."""
        result = await exchange_code_for_access_token(_exchange_request(code=""))

        assert isinstance(result, TokenExchangeFailure)
        assert result.reason is OAuthFailureReason.MISSING_AUTHORIZATION_CODE
        assert httpx_mock.get_requests() == []

    async def test_success_returns_token(self, httpx_mock: HTTPXMock) -> None:
        """Test that a valid token body is returned as TokenResponse."""
        httpx_mock.add_response(
            method="POST",
            url=TOKEN_URL,
            json={
                "access_token": "tok-abc",
                "refresh_token": "ref-def",
                "token_type": "bearer",
                "expires_in": 2591999,
                "scope": "org:read",
                "user": {"id": "1", "name": "Jane", "email": "jane@example.com"},
            },
        )

        result = await exchange_code_for_access_token(_exchange_request())

        assert isinstance(result, TokenExchangeSuccess)
        assert result.token.access_token == "tok-abc"
        assert result.token.refresh_token == "ref-def"
        assert result.token.user == {"id": "1", "name": "Jane", "email": "jane@example.com"}

    async def test_request_is_form_encoded_without_redirect_uri(
        self, httpx_mock: HTTPXMock
    ) -> None:
        """Test the exact body sent to the token endpoint."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json={"access_token": "tok"})

        await exchange_code_for_access_token(_exchange_request())

        requests = httpx_mock.get_requests()
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        body = parse_qs(request.content.decode())
        assert body == {
            "grant_type": ["authorization_code"],
            "client_id": ["client-123"],
            "client_secret": ["client-secret"],
            "code": ["auth-code"],
        }

    async def test_error_status_is_token_endpoint_error(self, httpx_mock: HTTPXMock) -> None:
        """Test that a 500 keeps the upstream status and body."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, status_code=500, text="boom")

        result = await exchange_code_for_access_token(_exchange_request())

        assert isinstance(result, TokenExchangeFailure)
        assert result.reason is OAuthFailureReason.TOKEN_ENDPOINT_ERROR
        assert result.upstream_status == 500
        assert result.upstream_body == "boom"
        assert result.message == "Failed to fetch access token"

    async def test_missing_access_token_is_malformed(self, httpx_mock: HTTPXMock) -> None:
        """Test that a 200 without access_token is a contract violation."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json={"token_type": "bearer"})

        result = await exchange_code_for_access_token(_exchange_request())

        assert isinstance(result, TokenExchangeFailure)
        assert result.reason is OAuthFailureReason.TOKEN_RESPONSE_MALFORMED
        assert result.status_code == 500
        assert result.message == "Failed to parse token response"

    async def test_non_json_body_is_malformed(self, httpx_mock: HTTPXMock) -> None:
        """Test that an unparseable body is a contract violation."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, text="<html>oops</html>")

        result = await exchange_code_for_access_token(_exchange_request())

        assert isinstance(result, TokenExchangeFailure)
        assert result.reason is OAuthFailureReason.TOKEN_RESPONSE_MALFORMED

    async def test_transport_error_is_token_endpoint_error(self, httpx_mock: HTTPXMock) -> None:
        """Test that connection failures are returned, not raised."""
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        result = await exchange_code_for_access_token(_exchange_request())

        assert isinstance(result, TokenExchangeFailure)
        assert result.reason is OAuthFailureReason.TOKEN_ENDPOINT_ERROR
        assert result.upstream_status is None

    async def test_owned_client_has_no_timeout(self, httpx_mock: HTTPXMock) -> None:
        """Test that the temporary client does not impose a timeout."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json={"access_token": "tok"})

        await exchange_code_for_access_token(_exchange_request())

        timeout = httpx_mock.get_requests()[0].extensions["timeout"]
        assert timeout == {"connect": None, "read": None, "write": None, "pool": None}

    async def test_uses_supplied_client(self, httpx_mock: HTTPXMock) -> None:
        """Test that a caller-owned client is used and left open."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json={"access_token": "tok"})

        async with httpx.AsyncClient() as client:
            result = await exchange_code_for_access_token(_exchange_request(), client)
            assert not client.is_closed

        assert isinstance(result, TokenExchangeSuccess)
