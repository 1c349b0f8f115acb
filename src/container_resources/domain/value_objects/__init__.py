"""Value objects for container resources."""

from container_resources.domain.value_objects.identifiers import (
    ImageReference,
    create_image_reference,
    is_digest,
    normalize_reference,
    strip_tag,
    validate_repository_name,
)

__all__ = [
    "ImageReference",
    "create_image_reference",
    "is_digest",
    "normalize_reference",
    "strip_tag",
    "validate_repository_name",
]
