"""Image tag tracker entity."""

from __future__ import annotations

from dataclasses import dataclass, field

from container_resources.domain.entities.label import Label
from container_resources.domain.value_objects.identifiers import (
    create_image_reference,
    validate_repository_name,
)


@dataclass
class TagResource:
    """A tracked repository tag and the local images it is responsible for.

    ``managed_digests`` is ordered: index 0 is the digest currently in use,
    the rest are superseded digests still pending removal.
    """
    name: str
    pull_triggers: frozenset[str] = field(default_factory=frozenset)
    labels: frozenset[Label] = field(default_factory=frozenset)
    resource_id: str = ""  # Empty when the resource does not exist
    latest_digest: str = ""
    full_image_name: str = ""
    managed_digests: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        validate_repository_name(self.name)
        self.pull_triggers = frozenset(self.pull_triggers)
        self.labels = frozenset(self.labels)
        self.managed_digests = list(self.managed_digests)

    def exists(self) -> bool:
        """Check if the resource has an external identifier.

        Returns:
            True if the resource exists.
        """
        return bool(self.resource_id)

    def set_latest(self, digest: str) -> None:
        """Record the freshly resolved digest.

        Args:
            digest: Digest the registry currently serves for ``name``.
        """
        self.latest_digest = digest
        self.full_image_name = create_image_reference(self.name, digest)

    def reference_for(self, digest: str) -> str:
        """Get the name@digest reference for one of this tag's digests."""
        return create_image_reference(self.name, digest)

    def mark_deleted(self) -> None:
        """Clear the identifier so callers treat the resource as gone."""
        self.resource_id = ""
