"""
Shared configuration management for the reservation platform core.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheTTL, CORRELATION_ID_HEADER


class CoreConfig(BaseSettings):
    """Settings shared by every service built on the core."""

    model_config = SettingsConfigDict(
        env_prefix="CORE_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    service_name: str = Field(default="core")
    log_level: str = Field(default="info")

    # Distributed cache
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_socket_timeout: float = Field(default=5.0)
    redis_connect_timeout: float = Field(default=5.0)
    cache_default_ttl_minutes: int = Field(default=int(CacheTTL.DEFAULT))

    # Request correlation
    correlation_header: str = Field(default=CORRELATION_ID_HEADER)
    log_excluded_routes: List[str] = Field(default_factory=lambda: ["/health", "/metrics"])


def get_config(service_name: str, **overrides) -> CoreConfig:
    """Get configuration for a specific service."""
    return CoreConfig(service_name=service_name, **overrides)
