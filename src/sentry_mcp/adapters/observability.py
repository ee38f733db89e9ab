"""Sentry SDK error sink.

Implements the ObservabilitySink protocol on top of ``sentry_sdk``. Until
``configure_observability`` initializes the SDK with a DSN, captures are
no-ops and return None.
"""

from __future__ import annotations

from typing import Any

import sentry_sdk
import structlog

from .._version import __version__
from ..config.schema import ObservabilityConfig

log = structlog.get_logger()


def configure_observability(config: ObservabilityConfig) -> bool:
    """Initialize the Sentry SDK if a DSN is configured.

    Returns:
        True if the SDK was initialized.
    """
    if not config.sentry_dsn:
        log.debug("observability_disabled")
        return False

    sentry_sdk.init(
        dsn=config.sentry_dsn,
        environment=config.environment,
        release=f"sentry-mcp@{__version__}",
    )
    log.info("observability_enabled", environment=config.environment)
    return True


class SentrySdkSink:
    """Capture errors and messages to Sentry at level ``error``."""

    level = "error"

    def capture(
        self,
        error: BaseException | str,
        contexts: dict[str, dict[str, Any]] | None = None,
        attachments: dict[str, str | bytes] | None = None,
    ) -> str | None:
        with sentry_sdk.new_scope() as scope:
            for filename, data in (attachments or {}).items():
                payload = data.encode() if isinstance(data, str) else data
                scope.add_attachment(bytes=payload, filename=filename)

            if isinstance(error, str):
                return sentry_sdk.capture_message(
                    error,
                    level=self.level,
                    contexts=contexts or {},
                )
            return sentry_sdk.capture_exception(
                error,
                level=self.level,
                contexts=contexts or {},
            )
