"""Pytest configuration and fixtures for container_resources tests."""

from __future__ import annotations

from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from container_resources.adapters.outbound.memory_engine import (
    InMemoryImageStore,
    InMemoryRegistry,
    InMemorySecretStore,
)
from container_resources.application.secret_manager import SecretManager
from container_resources.application.tag_manager import TagLifecycleManager
from container_resources.infrastructure.config import Config, EngineConfig
from container_resources.infrastructure.container import Container, reset_container
from container_resources.infrastructure.metrics import MetricsRegistry

NGINX = "library/nginx"
DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64
DIGEST_C = "sha256:" + "c" * 64


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry."""
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def registry() -> InMemoryRegistry:
    """Provide a registry serving nginx at DIGEST_A."""
    registry = InMemoryRegistry()
    registry.publish(NGINX, DIGEST_A)
    return registry


@pytest.fixture
def image_store(registry: InMemoryRegistry) -> InMemoryImageStore:
    """Provide an empty local image store backed by the registry."""
    return InMemoryImageStore(registry)


@pytest.fixture
def tag_manager(
    registry: InMemoryRegistry,
    image_store: InMemoryImageStore,
    metrics_registry: MetricsRegistry,
) -> TagLifecycleManager:
    """Provide a tag manager over the in-memory engine."""
    return TagLifecycleManager(
        resolver=registry,
        puller=image_store,
        remover=image_store,
        lister=image_store,
        metrics=metrics_registry,
    )


@pytest.fixture
def secret_store() -> InMemorySecretStore:
    """Provide an empty secret store."""
    return InMemorySecretStore()


@pytest.fixture
def secret_manager(secret_store: InMemorySecretStore, metrics_registry: MetricsRegistry) -> SecretManager:
    """Provide a secret manager over the in-memory store."""
    return SecretManager(store=secret_store, metrics=metrics_registry)


@pytest.fixture
def memory_config() -> Config:
    """Provide a configuration selecting the in-memory backend."""
    return Config(engine=EngineConfig(backend="memory"))


@pytest.fixture
def container() -> Generator[Container, None, None]:
    """Provide a fresh DI container."""
    reset_container()
    c = Container()
    yield c
    c.clear()


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
