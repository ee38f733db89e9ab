"""Shared test fixtures for Sentry MCP."""

from typing import Any

import pytest

from sentry_mcp.config.schema import AppConfig, SentryConfig

API_BASE_URL = "https://sentry.example.com/api/0"


@pytest.fixture
def issue_payload() -> dict[str, Any]:
    """Return a Sentry issue as the search endpoint serializes it."""
    return {
        "id": "123",
        "shortId": "PROJ-1",
        "title": "KeyError",
        "lastSeen": "2024-05-01T12:00:00Z",
        "count": "5",
        "permalink": "https://sentry.example.com/organizations/sentry/issues/123/",
        "status": "unresolved",
        "culprit": "app.handler",
    }


@pytest.fixture
def event_payload() -> dict[str, Any]:
    """Return a latest-event body with one exception entry."""
    return {
        "eventID": "abc",
        "entries": [
            {"type": "breadcrumbs", "data": {"values": []}},
            {
                "type": "exception",
                "data": {
                    "values": [
                        {
                            "type": "KeyError",
                            "value": "'x'",
                            "stacktrace": {
                                "frames": [
                                    {
                                        "filename": "app.py",
                                        "lineno": 10,
                                        "context": [
                                            [9, "d = {}"],
                                            [10, "x = d['x']"],
                                            [11, "return x"],
                                        ],
                                    }
                                ]
                            },
                        }
                    ]
                },
            },
        ],
    }


@pytest.fixture
def event_without_exception() -> dict[str, Any]:
    """Return a latest-event body with only a message entry."""
    return {"entries": [{"type": "message", "data": {"formatted": "something happened"}}]}


@pytest.fixture
def app_config() -> AppConfig:
    """Return a minimal configuration pointing at a fake Sentry."""
    return AppConfig(
        sentry=SentryConfig(
            api_base_url=API_BASE_URL,
            organization_slug="sentry",
            access_token="test-access-token",
        )
    )
