"""Protocol definitions for pluggable adapters."""

from .observability import ObservabilitySink
from .tracker import IssueTracker

__all__ = ["IssueTracker", "ObservabilitySink"]
