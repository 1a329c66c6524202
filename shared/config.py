"""
Shared configuration management for the storefront client.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOREFRONT_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=True)


class StorefrontConfig(BaseConfig):
    """Storefront client configuration."""

    service_name: str = "storefront"

    # Backend
    backend_url: str = Field(default="http://localhost:8000/api")
    request_timeout: float = Field(default=10.0)

    # Upper bound on a single refresh-token call; expiry counts as refresh failure
    refresh_timeout: float = Field(default=10.0)

    # Persisted session; in-memory storage when unset
    session_file: Optional[str] = Field(default=None)


def get_config(**overrides) -> StorefrontConfig:
    """Get storefront client configuration."""
    return StorefrontConfig(**overrides)
