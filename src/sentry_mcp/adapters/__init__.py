"""Concrete implementations of provider interfaces."""

from .observability import SentrySdkSink, configure_observability
from .sentry import SentryClient

__all__ = [
    "SentryClient",
    "SentrySdkSink",
    "configure_observability",
]
