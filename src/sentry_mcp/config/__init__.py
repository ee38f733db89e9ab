"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    AppConfig,
    HttpConfig,
    LoggingConfig,
    OAuthConfig,
    ObservabilityConfig,
    SentryConfig,
    ServerConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "AppConfig",
    # Section configs
    "SentryConfig",
    "OAuthConfig",
    "ServerConfig",
    "HttpConfig",
    "ObservabilityConfig",
    "LoggingConfig",
]
