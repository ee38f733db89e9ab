"""Tool invocation results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolOk:
    """A tool call that produced its report."""

    text: str

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class ToolError:
    """A tool call that failed; ``message`` is shown to the calling agent."""

    message: str

    @property
    def is_error(self) -> bool:
        return True


ToolResult = ToolOk | ToolError
