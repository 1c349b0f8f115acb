"""Outbound ports - External dependency interfaces for container resources.

Outbound ports define the registry, local image store and secret store
operations the lifecycle managers depend on. Every call is blocking and
is issued sequentially; implementations own their own timeouts.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Protocol


# =============================================================================
# Digest Resolver Port
# =============================================================================


class ResolutionError(Exception):
    """Raised when the registry digest for a name cannot be resolved.

    Attributes:
        name: Repository name being resolved.
        not_found: True if the registry reports the name no longer exists.
    """

    def __init__(self, name: str, message: str, not_found: bool = False) -> None:
        super().__init__(f"Unable to resolve digest for {name}: {message}")
        self.name = name
        self.not_found = not_found


class DigestResolverPort(Protocol):
    """Protocol for registry digest lookups.

    References:
        - https://github.com/opencontainers/distribution-spec
    """

    @abstractmethod
    def resolve_digest(self, name: str) -> str:
        """Resolve the digest the registry currently serves for a name.

        Args:
            name: Repository name, optionally tagged (e.g., "nginx:1.25").

        Returns:
            Content digest (e.g., "sha256:<hex>").

        Raises:
            ResolutionError: If lookup fails; ``not_found`` is set when
                the name does not exist in the registry.
        """
        ...


# =============================================================================
# Image Puller Port
# =============================================================================


class PullError(Exception):
    """Raised when pulling a resolved digest fails."""

    def __init__(self, reference: str, message: str) -> None:
        super().__init__(f"Unable to pull image {reference}: {message}")
        self.reference = reference


class ImagePullerPort(Protocol):
    """Protocol for pulling digest-pinned images into the local store."""

    @abstractmethod
    def pull(self, reference: str) -> None:
        """Ensure a local copy of the image exists, pulling if absent.

        Args:
            reference: Digest-pinned reference (name@digest).

        Raises:
            PullError: If the pull fails.
        """
        ...


# =============================================================================
# Local Image Lister Port
# =============================================================================


@dataclass
class LocalImage:
    """A locally cached image as reported by the runtime."""
    image_id: str
    repo_tags: list[str] = field(default_factory=list)
    repo_digests: list[str] = field(default_factory=list)
    size_bytes: int = 0

    def keys(self) -> list[str]:
        """Get every reference this image can be looked up by."""
        return [self.image_id, *self.repo_tags, *self.repo_digests]


class LocalImageListerPort(Protocol):
    """Protocol for enumerating locally cached images."""

    @abstractmethod
    def list_local_images(self) -> Mapping[str, LocalImage]:
        """List local images.

        Returns:
            Mapping from image id, normalized repo tag and normalized repo
            digest to the image.

        Raises:
            ImageListError: If the runtime cannot be queried.
        """
        ...


# =============================================================================
# Image Remover Port
# =============================================================================


class RemovalError(Exception):
    """Raised when removing a managed digest fails."""

    def __init__(self, reference: str, message: str) -> None:
        subject = f"image {reference}" if reference else "images"
        super().__init__(f"Unable to remove {subject}: {message}")
        self.reference = reference


class ImageListError(RemovalError):
    """Raised when local images cannot be listed before a removal pass.

    Listers raise it without a name; the tag manager re-raises it with
    the tag name whose removal pass needed the listing.
    """

    def __init__(self, message: str, name: str = "") -> None:
        super().__init__(name, f"local images could not be listed: {message}")
        self.detail = message


class ImageRemoverPort(Protocol):
    """Protocol for deleting local image copies."""

    @abstractmethod
    def remove_image(self, reference: str, force: bool = True) -> None:
        """Delete the local copy of an image.

        An image that is already absent is not an error.

        Args:
            reference: Digest-pinned reference (name@digest).
            force: Remove even if containers reference the image.

        Raises:
            RemovalError: If removal fails.
        """
        ...


# =============================================================================
# Secret Store Port
# =============================================================================


class SecretStoreError(Exception):
    """Raised when a secret store operation fails."""

    pass


class SecretNotFoundError(SecretStoreError):
    """Raised when a secret id does not exist in the store."""

    def __init__(self, secret_id: str) -> None:
        super().__init__(f"Secret {secret_id} not found")
        self.secret_id = secret_id


@dataclass
class StoredSecret:
    """Secret metadata returned by the store (never the payload)."""
    secret_id: str
    name: str
    labels: dict[str, str] = field(default_factory=dict)


class SecretStorePort(Protocol):
    """Protocol for runtime secret storage.

    Secrets are write-once: the store never returns the payload.
    """

    @abstractmethod
    def create_secret(self, name: str, data: bytes, labels: Mapping[str, str]) -> str:
        """Create a secret.

        Args:
            name: Secret name.
            data: Raw payload bytes.
            labels: Secret labels.

        Returns:
            Store-assigned secret id.

        Raises:
            SecretStoreError: If creation fails.
        """
        ...

    @abstractmethod
    def inspect_secret(self, secret_id: str) -> StoredSecret:
        """Look up a secret by id.

        Raises:
            SecretNotFoundError: If the secret does not exist.
            SecretStoreError: If the lookup fails.
        """
        ...

    @abstractmethod
    def remove_secret(self, secret_id: str) -> None:
        """Remove a secret by id.

        Raises:
            SecretStoreError: If removal fails.
        """
        ...


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Digest resolver
    "DigestResolverPort",
    "ResolutionError",
    # Image puller
    "ImagePullerPort",
    "PullError",
    # Local image lister
    "LocalImageListerPort",
    "LocalImage",
    "ImageListError",
    # Image remover
    "ImageRemoverPort",
    "RemovalError",
    # Secret store
    "SecretStorePort",
    "StoredSecret",
    "SecretStoreError",
    "SecretNotFoundError",
]
