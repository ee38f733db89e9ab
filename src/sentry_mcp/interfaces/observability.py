"""Abstract interface for error reporting sinks."""

from typing import Any, Protocol


class ObservabilitySink(Protocol):
    """Destination for captured errors.

    Capture is fire-and-forget: callers only keep the returned event id
    for correlation.
    """

    def capture(
        self,
        error: BaseException | str,
        contexts: dict[str, dict[str, Any]] | None = None,
        attachments: dict[str, str | bytes] | None = None,
    ) -> str | None:
        """
        Record an exception or a message.

        Args:
            error: Exception to capture, or a message string
            contexts: Named context dictionaries attached to the event
            attachments: Files to attach, keyed by filename

        Returns:
            Opaque event identifier, or None if nothing was recorded
        """
        ...
