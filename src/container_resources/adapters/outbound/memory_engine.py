"""In-memory container engine for testing and development.

This adapter provides mock implementations of the registry, local image
store and secret store ports, for use in tests and on hosts without a
container engine.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Mapping

from container_resources.domain.value_objects.identifiers import normalize_reference
from container_resources.ports.outbound import (
    ImageListError,
    LocalImage,
    PullError,
    RemovalError,
    ResolutionError,
    SecretNotFoundError,
    SecretStoreError,
    StoredSecret,
)


logger = logging.getLogger(__name__)


def _fake_id(seed: str) -> str:
    return "sha256:" + hashlib.sha256(seed.encode()).hexdigest()


class InMemoryRegistry:
    """Mock implementation of DigestResolverPort.

    Each name keeps its publication history; the last published digest
    is the one served.

    Example:
        registry = InMemoryRegistry()
        registry.publish("library/nginx", "sha256:aaa...")
        registry.resolve_digest("library/nginx")
    """

    def __init__(self) -> None:
        self._history: dict[str, list[str]] = {}
        self._failures: dict[str, str] = {}
        self.resolve_calls: list[str] = []

    def publish(self, name: str, digest: str) -> None:
        """Point a name at a new digest."""
        self._history.setdefault(name, []).append(digest)

    def unpublish(self, name: str) -> None:
        """Delete a name from the registry."""
        self._history.pop(name, None)

    def fail_resolution(self, name: str, message: str = "registry unavailable") -> None:
        """Make lookups of a name fail with a transient error."""
        self._failures[name] = message

    def clear_failures(self) -> None:
        self._failures.clear()

    def knows(self, name: str, digest: str) -> bool:
        """Check whether a digest was ever published for a name."""
        return digest in self._history.get(name, [])

    def resolve_digest(self, name: str) -> str:
        """Resolve the digest currently published for a name."""
        self.resolve_calls.append(name)
        if name in self._failures:
            raise ResolutionError(name, self._failures[name])
        history = self._history.get(name)
        if not history:
            raise ResolutionError(name, "manifest unknown", not_found=True)
        return history[-1]


class InMemoryImageStore:
    """Mock implementation of the puller, lister and remover ports.

    Example:
        store = InMemoryImageStore(registry)
        store.pull("library/nginx@sha256:aaa...")
        store.list_local_images()
        store.remove_image("library/nginx@sha256:aaa...")
    """

    def __init__(self, registry: InMemoryRegistry | None = None) -> None:
        self._registry = registry
        self._images: dict[str, LocalImage] = {}  # normalized repo digest -> image
        self._pull_failures: dict[str, str] = {}
        self._removal_failures: dict[str, str] = {}
        self._list_failure: str | None = None
        self.pulled: list[str] = []
        self.removed: list[str] = []

    def add_image(self, reference: str) -> LocalImage:
        """Seed a local image without going through pull."""
        key = normalize_reference(reference)
        image = LocalImage(image_id=_fake_id(key), repo_digests=[key], size_bytes=100_000_000)
        self._images[key] = image
        return image

    def has_image(self, reference: str) -> bool:
        return normalize_reference(reference) in self._images

    def fail_pull(self, reference: str, message: str = "connection reset") -> None:
        self._pull_failures[normalize_reference(reference)] = message

    def fail_removal(self, reference: str, message: str = "image is in use") -> None:
        self._removal_failures[normalize_reference(reference)] = message

    def fail_listing(self, message: str = "engine unavailable") -> None:
        self._list_failure = message

    def clear_failures(self) -> None:
        self._pull_failures.clear()
        self._removal_failures.clear()
        self._list_failure = None

    def pull(self, reference: str) -> None:
        """Pull an image unless already cached."""
        key = normalize_reference(reference)
        if key in self._pull_failures:
            raise PullError(reference, self._pull_failures[key])
        if self._registry is not None:
            name, _, digest = reference.partition("@")
            if not self._registry.knows(name, digest):
                raise PullError(reference, "manifest unknown")

        self.pulled.append(reference)
        if key not in self._images:
            self.add_image(reference)
            logger.debug(f"Pulled {reference}")

    def list_local_images(self) -> Mapping[str, LocalImage]:
        """List local images keyed by id and normalized repo digest."""
        if self._list_failure is not None:
            raise ImageListError(self._list_failure)
        listing: dict[str, LocalImage] = {}
        for image in self._images.values():
            for key in image.keys():
                listing[key] = image
        return listing

    def remove_image(self, reference: str, force: bool = True) -> None:
        """Remove an image; absence is not an error."""
        key = normalize_reference(reference)
        if key in self._removal_failures:
            raise RemovalError(reference, self._removal_failures[key])
        if self._images.pop(key, None) is not None:
            self.removed.append(reference)
            logger.debug(f"Removed {reference} (force={force})")


@dataclass
class MockSecretState:
    """State for a mock secret."""

    secret_id: str
    name: str
    data: bytes = field(repr=False)
    labels: dict[str, str] = field(default_factory=dict)


class InMemorySecretStore:
    """Mock implementation of SecretStorePort.

    Secret names are unique, like swarm secrets.
    """

    def __init__(self) -> None:
        self._secrets: dict[str, MockSecretState] = {}
        self._next_id = 1
        self._failure: str | None = None

    def fail_all(self, message: str = "swarm unavailable") -> None:
        self._failure = message

    def clear_failures(self) -> None:
        self._failure = None

    def get_payload(self, secret_id: str) -> bytes:
        """Read back a stored payload (test helper only)."""
        return self._secrets[secret_id].data

    def create_secret(self, name: str, data: bytes, labels: Mapping[str, str]) -> str:
        self._check_available()
        if any(secret.name == name for secret in self._secrets.values()):
            raise SecretStoreError(f"Secret {name} already exists")

        secret_id = f"secret-{self._next_id:06d}"
        self._next_id += 1
        self._secrets[secret_id] = MockSecretState(
            secret_id=secret_id,
            name=name,
            data=data,
            labels=dict(labels),
        )
        logger.debug(f"Created secret {name} as {secret_id}")
        return secret_id

    def inspect_secret(self, secret_id: str) -> StoredSecret:
        self._check_available()
        secret = self._secrets.get(secret_id)
        if secret is None:
            raise SecretNotFoundError(secret_id)
        return StoredSecret(secret_id=secret.secret_id, name=secret.name, labels=dict(secret.labels))

    def remove_secret(self, secret_id: str) -> None:
        self._check_available()
        if self._secrets.pop(secret_id, None) is None:
            raise SecretNotFoundError(secret_id)
        logger.debug(f"Removed secret {secret_id}")

    def _check_available(self) -> None:
        if self._failure is not None:
            raise SecretStoreError(self._failure)
