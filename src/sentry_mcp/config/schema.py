"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://sentry.io/api/0"
DEFAULT_AUTHORIZE_URL = "https://sentry.io/oauth/authorize/"
DEFAULT_TOKEN_URL = "https://sentry.io/oauth/token/"
DEFAULT_SCOPE = "org:read project:read event:read"


class SentryConfig(BaseModel):
    """Sentry API configuration."""

    api_base_url: str = DEFAULT_API_BASE_URL
    organization_slug: str
    access_token: str | None = None

    @field_validator("organization_slug")
    @classmethod
    def validate_organization_slug(cls, v: str) -> str:
        """Validate organization slug format."""
        from ..utils.security import validate_slug

        if not validate_slug(v):
            raise ValueError(f"Invalid organization slug: {v}")
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended."""
        return v.rstrip("/")


class OAuthConfig(BaseModel):
    """OAuth application registered with Sentry."""

    client_id: str
    client_secret: str
    redirect_uri: str
    scope: str = DEFAULT_SCOPE
    authorize_url: str = DEFAULT_AUTHORIZE_URL
    token_url: str = DEFAULT_TOKEN_URL


class ServerConfig(BaseModel):
    """MCP server configuration."""

    name: str = "Sentry MCP"
    transport: Literal["stdio", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(8000, ge=1, le=65535)


class HttpConfig(BaseModel):
    """Outbound HTTP client configuration."""

    timeout: float | None = Field(30.0, gt=0, description="Seconds; null disables")


class ObservabilityConfig(BaseModel):
    """Error reporting configuration."""

    sentry_dsn: str | None = None
    environment: str = "production"


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/sentry-mcp/server.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: FileLoggingConfig = FileLoggingConfig()


class AppConfig(BaseSettings):
    """Root configuration for Sentry MCP."""

    sentry: SentryConfig
    oauth: OAuthConfig | None = None
    server: ServerConfig = ServerConfig()
    http: HttpConfig = HttpConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
    )
