"""Failure boundary for tool invocations.

ErrorReporter turns exceptions raised inside a tool into a ``ToolError``
value after logging them and forwarding them to the observability sink, so
the calling agent receives readable failure text instead of a transport
fault.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from ..models.result import ToolError, ToolOk, ToolResult
from ..utils.logging import LogEventNames

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from ..interfaces.observability import ObservabilitySink

log = structlog.get_logger()


class ErrorReporter:
    """Logs failures and converts them into tool results.

    Example:
        reporter = ErrorReporter(SentrySdkSink())
        result = await reporter.guard(
            pipeline.run("app.py"),
            failure_prefix="Error searching for file errors",
        )
    """

    def __init__(self, sink: ObservabilitySink | None = None) -> None:
        self._sink = sink

    def log_error(
        self,
        error: BaseException | str,
        contexts: dict[str, dict[str, Any]] | None = None,
        attachments: dict[str, str | bytes] | None = None,
    ) -> str | None:
        """Log an error locally and capture it to the sink.

        Args:
            error: Exception or message to report
            contexts: Named context dictionaries for the sink
            attachments: Files to attach, keyed by filename

        Returns:
            The sink's event id, or None without a sink or on capture failure
        """
        if isinstance(error, BaseException):
            log.error(
                LogEventNames.TOOL_FAILED,
                error=str(error),
                error_type=type(error).__name__,
                exc_info=error,
            )
        else:
            log.error(LogEventNames.TOOL_FAILED, error=error)

        if self._sink is None:
            return None

        try:
            event_id = self._sink.capture(error, contexts=contexts, attachments=attachments)
        except Exception as e:
            log.warning(LogEventNames.OBSERVABILITY_CAPTURE_FAILED, error=str(e))
            return None

        log.debug(LogEventNames.ERROR_REPORTED, event_id=event_id)
        return event_id

    async def guard(
        self,
        operation: Awaitable[str],
        *,
        failure_prefix: str,
        contexts: dict[str, dict[str, Any]] | None = None,
        verbatim: tuple[type[Exception], ...] = (),
    ) -> ToolResult:
        """Await ``operation`` and wrap its outcome.

        Args:
            operation: Awaitable producing the tool's text output
            failure_prefix: Text placed before the error message on failure
            contexts: Named context dictionaries for the sink
            verbatim: Exception types whose message is already agent-facing
                and is returned without the prefix

        Returns:
            ToolOk with the output, or ToolError with the failure message
        """
        try:
            text = await operation
        except Exception as e:
            self.log_error(e, contexts=contexts)
            if isinstance(e, verbatim):
                return ToolError(message=str(e))
            return ToolError(message=f"{failure_prefix}: {e}")

        return ToolOk(text=text)
