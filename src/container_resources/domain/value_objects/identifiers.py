"""Image reference value objects."""

import re
from typing import NewType

# Type-safe identifier
ImageReference = NewType('ImageReference', str)

DIGEST_PATTERN = re.compile(r"^[a-z0-9]+(?:[.+_-][a-z0-9]+)*:[a-fA-F0-9]{32,}$")

_DEFAULT_REGISTRY_PREFIXES = ("docker.io/", "index.docker.io/", "registry-1.docker.io/")
_OFFICIAL_NAMESPACE = "library/"


def is_digest(value: str) -> bool:
    """Check whether a string looks like a content digest.

    Args:
        value: Candidate digest (e.g., "sha256:<hex>").

    Returns:
        True if value is a digest.
    """
    return bool(DIGEST_PATTERN.match(value))


def validate_repository_name(name: str) -> str:
    """Validate a tracked repository name.

    Args:
        name: Repository reference, optionally with a tag.

    Returns:
        The unchanged name.

    Raises:
        ValueError: If the name is empty or embeds a digest.
    """
    if not name:
        raise ValueError("Repository name must not be empty")
    if "@" in name:
        raise ValueError(f"Repository name {name!r} must not contain a digest segment")
    return name


def create_image_reference(name: str, digest: str) -> ImageReference:
    """Create a digest-pinned image reference.

    Args:
        name: Repository name.
        digest: Content digest.

    Returns:
        Reference of the form name@digest.
    """
    return ImageReference(f"{name}@{digest}")


def strip_tag(name: str) -> str:
    """Drop a trailing ":tag" from a repository name.

    A colon inside the registry host (host:port/repo) is not a tag.
    """
    last_slash = name.rfind("/")
    last_colon = name.rfind(":")
    if last_colon > last_slash:
        return name[:last_colon]
    return name


def normalize_reference(reference: str) -> str:
    """Normalize an image reference for local lookups.

    The runtime reports Docker Hub images without the implicit registry
    host and "library/" namespace, and digest references never carry a tag.
    """
    repository, sep, digest = reference.partition("@")
    if sep:
        repository = strip_tag(repository)
    for prefix in _DEFAULT_REGISTRY_PREFIXES:
        if repository.startswith(prefix):
            repository = repository[len(prefix):]
            break
    if repository.startswith(_OFFICIAL_NAMESPACE) and repository.count("/") == 1:
        repository = repository[len(_OFFICIAL_NAMESPACE):]
    return f"{repository}{sep}{digest}"
