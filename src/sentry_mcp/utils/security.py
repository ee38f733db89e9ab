"""Credential redaction and validation of values placed into upstream URLs.

OAuth access tokens and the configured Sentry token must never reach log
output; the logging sanitizer runs every string through SecretRedactor.
Organization slugs and upstream URLs are validated before requests are built
from them.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class SecurityError(Exception):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


class ValidationError(SecurityError):
    """Raised when input validation fails."""


class InvalidUrl(ValidationError):
    """Raised when an upstream URL cannot be used to build a request."""


# Sentry organization and project slugs
SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})


class SecretRedactor:
    """Replaces credentials in log text with a placeholder.

    Covers the credentials this service touches: OAuth bearer and access
    tokens, Sentry auth tokens and DSNs. Redaction fails closed: a pattern
    that cannot be compiled or applied raises RedactionError instead of
    letting the text through.

    Usage:
        safe_text = SecretRedactor().redact(response_body)
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        (
            r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
            "Generic secret",
        ),
        (r"(?i)bearer\s+[\w.~+/-]{8,}=*", "Bearer credential"),
        (r"sntrys_[A-Za-z0-9+/=_]{20,}", "Sentry organization auth token"),
        (r"sntryu_[a-f0-9]{64}", "Sentry user auth token"),
        (r"https://[a-f0-9]{32}@[\w.-]+/\d+", "Sentry DSN"),
        # OAuth providers may hand out JWT access tokens
        (r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*", "JWT"),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """
        Args:
            placeholder: Replacement text for every match
            custom_patterns: Extra (regex, name) pairs applied after the defaults

        Raises:
            RedactionError: If a pattern does not compile
        """
        self.placeholder = placeholder
        self._patterns: list[re.Pattern[str]] = []

        for regex, name in (*self.DEFAULT_PATTERNS, *(custom_patterns or ())):
            try:
                self._patterns.append(re.compile(regex))
            except re.error as e:
                log.error("pattern_compilation_failed", pattern_name=name, error=str(e))
                raise RedactionError(f"Invalid secret pattern {name!r}: {e}") from e

    def redact(self, text: str) -> str:
        """Return ``text`` with every credential match replaced.

        Raises:
            RedactionError: If a substitution fails
        """
        if not text:
            return text

        try:
            for pattern in self._patterns:
                text = pattern.sub(self.placeholder, text)
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e
        return text


def validate_slug(slug: str) -> bool:
    """Validate a Sentry organization slug.

    Slugs are lowercase alphanumerics, hyphens and underscores. They are
    interpolated into API paths, so anything else is rejected.

    Args:
        slug: The slug to validate (e.g., "my-org").

    Returns:
        True if the slug is valid, False otherwise.
    """
    if not slug:
        return False
    return bool(SLUG_PATTERN.match(slug))


def validate_upstream_url(url: str) -> bool:
    """Check that a URL is absolute with an http(s) scheme and a host."""
    if not url:
        return False

    try:
        parsed = urlsplit(url)
    except ValueError:
        return False

    return parsed.scheme in ALLOWED_URL_SCHEMES and bool(parsed.hostname)


def ensure_upstream_url(url: str) -> str:
    """Return ``url`` unchanged, or raise InvalidUrl if it is not usable.

    Raises:
        InvalidUrl: If the URL is not absolute http(s).
    """
    if not validate_upstream_url(url):
        raise InvalidUrl(f"Invalid upstream URL: {url!r}")
    return url
