"""
Shared configuration management for the repos service.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="REPOS_",
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Cache store
    cache_backend: str = Field(default="redis", description="redis or memory")
    redis_host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("REPOS_REDIS_HOST", "REDIS_HOST", "redis_host")
    )
    redis_port: int = Field(
        default=6379,
        validation_alias=AliasChoices("REPOS_REDIS_PORT", "REDIS_PORT", "redis_port")
    )
    redis_db: int = Field(default=0)
    redis_url: Optional[str] = Field(default=None)
    cache_ttl_seconds: int = Field(default=3600, gt=0)
    cache_socket_timeout: float = Field(default=5.0, gt=0)

    # Upstream
    github_api_url: str = Field(default="https://api.github.com")
    upstream_timeout: float = Field(default=10.0, gt=0)

    @property
    def redis_dsn(self) -> str:
        """Redis connection URL; an explicit redis_url wins over host/port/db."""
        if self.redis_url:
            return self.redis_url
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "repos"
    host: str = Field(default="0.0.0.0")
    port: int = Field(
        default=5000,
        validation_alias=AliasChoices("REPOS_PORT", "PORT", "port")
    )


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
