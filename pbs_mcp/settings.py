"""
PBS MCP Settings Management

Provides Pydantic-based settings with validation and environment variable support.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from pbs_mcp.constants import DEFAULT_SUBSCRIPTION_KEY, DEFAULT_TIMEOUT_MS, PBS_API_BASE_URL


class PbsApiSettings(BaseSettings):
    """Upstream PBS data API settings."""

    base_url: str = Field(
        default=PBS_API_BASE_URL,
        description="Base URL of the PBS data API",
    )
    subscription_key: str = Field(
        default=DEFAULT_SUBSCRIPTION_KEY,
        description="Subscription key used when the caller does not supply one",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        description="Default request timeout in milliseconds",
        ge=1,
    )

    model_config = {"env_prefix": "PBS_API_"}


class HttpSettings(BaseSettings):
    """HTTP/SSE server settings."""

    host: str = Field(
        default="0.0.0.0",  # noqa: S104
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=3000,
        description="Port the HTTP server listens on",
        ge=1,
        le=65535,
        validation_alias="PORT",
    )

    model_config = {"env_prefix": "PBS_MCP_HTTP_", "populate_by_name": True}


class ServerSettings(BaseSettings):
    """Server identity advertised to tool-protocol clients."""

    name: str = Field(
        default="pbs-mcp",
        description="Server name",
    )
    version: str = Field(
        default="1.0.0",
        description="Server version",
    )

    model_config = {"env_prefix": "PBS_MCP_SERVER_"}


class PbsMcpSettings(BaseSettings):
    """Main settings container."""

    pbs_api: PbsApiSettings = Field(
        default_factory=PbsApiSettings,
        description="Upstream API settings",
    )
    http: HttpSettings = Field(
        default_factory=HttpSettings,
        description="HTTP server settings",
    )
    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server settings",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    model_config = {
        "env_prefix": "PBS_MCP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    @classmethod
    def from_env(cls) -> "PbsMcpSettings":
        """Create settings from environment variables."""
        return cls()
