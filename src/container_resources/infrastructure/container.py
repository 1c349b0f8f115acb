"""Dependency injection container."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from container_resources.application.secret_manager import SecretManager
from container_resources.application.tag_manager import TagLifecycleManager
from container_resources.infrastructure.config import Config, get_config
from container_resources.infrastructure.logging import get_logger, setup_logging
from container_resources.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from container_resources.infrastructure.tracing import setup_tracing
from container_resources.ports.outbound import (
    DigestResolverPort,
    ImagePullerPort,
    ImageRemoverPort,
    LocalImageListerPort,
    SecretStorePort,
)

T = TypeVar("T")


class Container:
    """Simple dependency injection container."""

    def __init__(self) -> None:
        self._singletons: dict[type, Any] = {}
        self._factories: dict[type, Callable[[Container], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """Register a singleton instance."""
        self._singletons[interface] = instance
        self._instances[interface] = instance

    def register_factory(self, interface: type[T], factory: Callable[[Container], T]) -> None:
        """Register a factory function, built on first resolve."""
        self._factories[interface] = factory

    def resolve(self, interface: type[T]) -> T:
        """Resolve a dependency."""
        if interface in self._instances:
            return self._instances[interface]
        if interface in self._factories:
            instance = self._factories[interface](self)
            self._instances[interface] = instance
            return instance
        raise KeyError(f"No registration found for {interface}")

    def has(self, interface: type) -> bool:
        """Check if an interface is registered."""
        return interface in self._singletons or interface in self._factories

    def clear(self) -> None:
        """Clear all registrations."""
        self._singletons.clear()
        self._factories.clear()
        self._instances.clear()


def _register_memory_engine(container: Container) -> None:
    from container_resources.adapters.outbound.memory_engine import (
        InMemoryImageStore,
        InMemoryRegistry,
        InMemorySecretStore,
    )

    registry = InMemoryRegistry()
    images = InMemoryImageStore(registry)
    container.register_singleton(InMemoryRegistry, registry)
    container.register_singleton(InMemoryImageStore, images)
    container.register_singleton(DigestResolverPort, registry)
    container.register_singleton(ImagePullerPort, images)
    container.register_singleton(ImageRemoverPort, images)
    container.register_singleton(LocalImageListerPort, images)
    container.register_singleton(SecretStorePort, InMemorySecretStore())


def _register_docker_engine(container: Container, config: Config) -> None:
    import docker

    from container_resources.adapters.outbound.docker_engine import (
        DockerDigestResolver,
        DockerImageLister,
        DockerImagePuller,
        DockerImageRemover,
        DockerSecretStore,
        create_docker_client,
    )

    auth_config = config.registry.auth_config()
    container.register_factory(docker.DockerClient, lambda c: create_docker_client(config.engine))
    container.register_factory(DigestResolverPort, lambda c: DockerDigestResolver(c.resolve(docker.DockerClient), auth_config))
    container.register_factory(ImagePullerPort, lambda c: DockerImagePuller(c.resolve(docker.DockerClient), auth_config))
    container.register_factory(ImageRemoverPort, lambda c: DockerImageRemover(c.resolve(docker.DockerClient)))
    container.register_factory(LocalImageListerPort, lambda c: DockerImageLister(c.resolve(docker.DockerClient)))
    container.register_factory(SecretStorePort, lambda c: DockerSecretStore(c.resolve(docker.DockerClient)))


def build_container(config: Config, metrics: MetricsRegistry | None = None) -> Container:
    """Wire adapters and managers for the configured engine backend.

    Args:
        config: Application configuration.
        metrics: Metrics registry override (tests pass a private one).

    Returns:
        Container resolving TagLifecycleManager and SecretManager.
    """
    container = Container()
    container.register_singleton(Config, config)

    if metrics is None:
        metrics = setup_metrics(config.metrics.port) if config.metrics.enabled else get_metrics()
    container.register_singleton(MetricsRegistry, metrics)

    if config.engine.backend == "memory":
        _register_memory_engine(container)
    else:
        _register_docker_engine(container, config)

    container.register_factory(
        TagLifecycleManager,
        lambda c: TagLifecycleManager(
            resolver=c.resolve(DigestResolverPort),
            puller=c.resolve(ImagePullerPort),
            remover=c.resolve(ImageRemoverPort),
            lister=c.resolve(LocalImageListerPort),
            metrics=c.resolve(MetricsRegistry),
        ),
    )
    container.register_factory(
        SecretManager,
        lambda c: SecretManager(store=c.resolve(SecretStorePort), metrics=c.resolve(MetricsRegistry)),
    )
    return container


def bootstrap(config: Config) -> Container:
    """Configure logging and tracing, then build the container."""
    setup_logging(config.observability.log_level, config.observability.log_format)
    setup_tracing(config.observability)
    container = build_container(config)
    get_logger(__name__).info(
        "container_resources_initialized",
        backend=config.engine.backend,
        metrics_enabled=config.metrics.enabled,
    )
    return container


_container: Container | None = None


def get_container() -> Container:
    """Get the global container instance, bootstrapping it from config."""
    global _container
    if _container is None:
        _container = bootstrap(get_config())
    return _container


def reset_container() -> None:
    """Reset the global container."""
    global _container
    if _container is not None:
        _container.clear()
    _container = None
