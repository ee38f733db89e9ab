"""Data models for Sentry API payloads.

Sentry responses are only partially typed, so these models validate just the
fields the error report needs and ignore everything else.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class SentryModel(BaseModel):
    """Base model for upstream payloads: frozen, camelCase aware, lenient on extras."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Issue(SentryModel):
    """An unresolved Sentry issue matching a search query."""

    id: str
    short_id: str = Field(alias="shortId")
    title: str
    last_seen: str = Field(alias="lastSeen")
    count: int  # Sentry serializes this as a numeric string
    permalink: str


class Frame(SentryModel):
    """A single stack frame with its surrounding source context."""

    filename: str | None = None
    lineno: int | None = None
    context: list[tuple[int, str]] = []

    def matching_lines(self) -> list[str]:
        """Source lines whose recorded line number equals the frame's own."""
        return [code for number, code in self.context if number == self.lineno]


class Stacktrace(SentryModel):
    """Ordered frames of one exception."""

    frames: list[Frame] = []


class ExceptionValue(SentryModel):
    """One exception in an event's exception chain."""

    type: str | None = None
    value: str | None = None
    stacktrace: Stacktrace | None = None


class ExceptionData(SentryModel):
    """Payload of an ``exception`` event entry."""

    values: list[ExceptionValue] = []


class ExceptionEntry(SentryModel):
    """Event entry carrying exception data."""

    type: Literal["exception"]
    data: ExceptionData


class GenericEntry(SentryModel):
    """Any other event entry (breadcrumbs, request, message, ...)."""

    type: str
    data: Any = None


def _entry_kind(value: Any) -> str:
    entry_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return "exception" if entry_type == "exception" else "other"


EventEntry = Annotated[
    Annotated[ExceptionEntry, Tag("exception")] | Annotated[GenericEntry, Tag("other")],
    Discriminator(_entry_kind),
]


class Event(SentryModel):
    """The latest event recorded for an issue."""

    entries: list[EventEntry] = []

    @property
    def first_exception(self) -> ExceptionValue | None:
        """First value of the first exception entry, if the event has one."""
        for entry in self.entries:
            if isinstance(entry, ExceptionEntry):
                return entry.data.values[0] if entry.data.values else None
        return None
