"""Configuration management for container resources."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """Container engine connection configuration."""

    backend: Literal["docker", "memory"] = Field(default="docker", description="Runtime backend")
    base_url: str | None = Field(default=None, description="Engine URL (None = DOCKER_HOST / local socket)")
    api_version: str = Field(default="auto", description="Engine API version")
    timeout_seconds: int = Field(default=120, ge=1, description="Per-call engine timeout")


class RegistryConfig(BaseModel):
    """Registry credentials passed through to resolve and pull."""

    server_address: str | None = Field(default=None, description="Registry host")
    username: str | None = Field(default=None, description="Registry user")
    password: SecretStr | None = Field(default=None, description="Registry password or token")

    def auth_config(self) -> dict[str, Any] | None:
        """Build the engine auth config, or None for anonymous access."""
        if not self.username:
            return None
        auth: dict[str, Any] = {"username": self.username}
        if self.password is not None:
            auth["password"] = self.password.get_secret_value()
        if self.server_address:
            auth["serveraddress"] = self.server_address
        return auth


class MetricsConfig(BaseModel):
    """Prometheus metrics configuration."""

    enabled: bool = Field(default=False, description="Expose a metrics endpoint")
    port: int = Field(default=8010, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    otel_endpoint: str | None = Field(default=None)
    otel_service_name: str = Field(default="container_resources")


class Config(BaseSettings):
    """Main configuration for container resources."""

    model_config = SettingsConfigDict(
        env_prefix="CONTAINER_RESOURCES_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
