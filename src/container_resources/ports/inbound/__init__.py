"""Inbound ports - Lifecycle contracts offered to the reconciliation framework.

The surrounding framework decides which operation to run (for example,
update only when pull triggers changed) and persists the returned state.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from container_resources.domain.entities.label import Label
from container_resources.domain.entities.secret import SecretResource
from container_resources.domain.entities.tag import TagResource


class TagLifecyclePort(Protocol):
    """Protocol for tag tracker lifecycle operations.

    Example:
        tag = manager.create("library/nginx")
        tag = manager.read(tag)
        if triggers_changed:
            tag = manager.update(tag)
        manager.delete(tag)
    """

    def create(
        self,
        name: str,
        pull_triggers: Iterable[str] = (),
        labels: Iterable[Label] = (),
    ) -> TagResource:
        """Resolve, pull and start tracking a tag."""
        ...

    def read(self, resource: TagResource) -> TagResource:
        """Refresh computed fields; clears the id if the tag is gone."""
        ...

    def update(self, resource: TagResource) -> TagResource:
        """Pull the refreshed digest and prune superseded digests."""
        ...

    def delete(self, resource: TagResource) -> TagResource:
        """Remove every managed digest and clear the id."""
        ...


class SecretLifecyclePort(Protocol):
    """Protocol for secret lifecycle operations (no update)."""

    def create(self, resource: SecretResource) -> SecretResource:
        """Create the secret and adopt the store id."""
        ...

    def read(self, resource: SecretResource) -> SecretResource:
        """Confirm existence; clears the id if the secret is gone."""
        ...

    def delete(self, resource: SecretResource) -> SecretResource:
        """Remove the secret and clear the id."""
        ...


__all__ = [
    "SecretLifecyclePort",
    "TagLifecyclePort",
]
