"""Docker Engine adapters.

Implements the outbound ports on top of the Docker SDK. SDK exceptions
are translated into the port errors, with ``docker.errors.NotFound``
mapped to the not-found variants.

References:
    - https://docker-py.readthedocs.io/en/stable/images.html
    - https://docker-py.readthedocs.io/en/stable/secrets.html
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import docker
from docker.errors import DockerException, ImageNotFound, NotFound

from container_resources.domain.value_objects.identifiers import (
    normalize_reference,
    strip_tag,
)
from container_resources.infrastructure.config import EngineConfig
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


def create_docker_client(config: EngineConfig) -> docker.DockerClient:
    """Create a Docker SDK client.

    Args:
        config: Engine configuration; without ``base_url`` the client is
            built from the environment (DOCKER_HOST, DOCKER_TLS_VERIFY...).

    Returns:
        Docker client.
    """
    if config.base_url:
        return docker.DockerClient(
            base_url=config.base_url,
            version=config.api_version,
            timeout=config.timeout_seconds,
        )
    return docker.from_env(version=config.api_version, timeout=config.timeout_seconds)


class DockerDigestResolver:
    """Resolves registry digests through the engine's distribution endpoint."""

    def __init__(self, client: docker.DockerClient, auth_config: Optional[dict[str, Any]] = None) -> None:
        self._client = client
        self._auth_config = auth_config

    def resolve_digest(self, name: str) -> str:
        try:
            registry_data = self._client.images.get_registry_data(name, auth_config=self._auth_config)
        except NotFound as e:
            raise ResolutionError(name, str(e), not_found=True) from e
        except DockerException as e:
            raise ResolutionError(name, str(e)) from e
        return registry_data.id


class DockerImagePuller:
    """Pulls digest-pinned images, skipping ones already present."""

    def __init__(self, client: docker.DockerClient, auth_config: Optional[dict[str, Any]] = None) -> None:
        self._client = client
        self._auth_config = auth_config

    def pull(self, reference: str) -> None:
        repository, _, digest = reference.partition("@")
        repository = strip_tag(repository)
        try:
            self._client.images.get(f"{repository}@{digest}")
            logger.debug(f"Image {reference} already present")
            return
        except ImageNotFound:
            pass
        except DockerException as e:
            raise PullError(reference, str(e)) from e

        logger.info(f"Pulling {reference}")
        try:
            self._client.images.pull(repository, tag=digest, auth_config=self._auth_config)
        except DockerException as e:
            raise PullError(reference, str(e)) from e


class DockerImageLister:
    """Lists local images keyed by id, repo tags and repo digests."""

    def __init__(self, client: docker.DockerClient) -> None:
        self._client = client

    def list_local_images(self) -> Mapping[str, LocalImage]:
        try:
            images = self._client.images.list()
        except DockerException as e:
            raise ImageListError(str(e)) from e

        listing: dict[str, LocalImage] = {}
        for image in images:
            local = LocalImage(
                image_id=image.id,
                repo_tags=[normalize_reference(tag) for tag in image.tags],
                repo_digests=[normalize_reference(d) for d in image.attrs.get("RepoDigests") or []],
                size_bytes=image.attrs.get("Size", 0),
            )
            for key in local.keys():
                listing[key] = local
        return listing


class DockerImageRemover:
    """Force-removes local images; a missing image is not an error."""

    def __init__(self, client: docker.DockerClient) -> None:
        self._client = client

    def remove_image(self, reference: str, force: bool = True) -> None:
        try:
            self._client.images.remove(image=reference, force=force)
        except ImageNotFound:
            logger.debug(f"Image {reference} already removed")
        except DockerException as e:
            raise RemovalError(reference, str(e)) from e


class DockerSecretStore:
    """Swarm secret store."""

    def __init__(self, client: docker.DockerClient) -> None:
        self._client = client

    def create_secret(self, name: str, data: bytes, labels: Mapping[str, str]) -> str:
        try:
            secret = self._client.secrets.create(name=name, data=data, labels=dict(labels) or None)
        except DockerException as e:
            raise SecretStoreError(f"Unable to create secret {name}: {e}") from e
        return secret.id

    def inspect_secret(self, secret_id: str) -> StoredSecret:
        try:
            secret = self._client.secrets.get(secret_id)
        except NotFound as e:
            raise SecretNotFoundError(secret_id) from e
        except DockerException as e:
            raise SecretStoreError(f"Unable to inspect secret {secret_id}: {e}") from e

        spec = secret.attrs.get("Spec", {})
        return StoredSecret(
            secret_id=secret.id,
            name=spec.get("Name", ""),
            labels=spec.get("Labels") or {},
        )

    def remove_secret(self, secret_id: str) -> None:
        try:
            self._client.api.remove_secret(secret_id)
        except DockerException as e:
            raise SecretStoreError(f"Unable to remove secret {secret_id}: {e}") from e
