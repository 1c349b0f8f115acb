"""Managed digest set reconciliation.

Pure planning for the digests a tag resource has pulled: which ones are
stale after an update, which ones a delete must remove, and which of those
actually exist in the local image store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from container_resources.domain.value_objects.identifiers import (
    create_image_reference,
    normalize_reference,
)


@dataclass
class PrunePlan:
    """Outcome of planning an update of the managed digest set."""
    current: str
    stale: list[str] = field(default_factory=list)
    retained: list[str] = field(default_factory=list)


@dataclass
class RemovalTarget:
    """A managed digest resolved against the local image store."""
    digest: str
    reference: str
    present: bool


def _unique(digests: Iterable[str]) -> list[str]:
    """Drop repeated digests, keeping first-seen order."""
    seen: set[str] = set()
    ordered = []
    for digest in digests:
        if digest and digest not in seen:
            seen.add(digest)
            ordered.append(digest)
    return ordered


def plan_update(managed_digests: Sequence[str], new_digest: str) -> PrunePlan:
    """Plan the managed set transition for an update.

    Every previously managed digest except the one just pulled is stale.
    The retained set always keeps the previous current digest behind the
    new one, even when both are equal, so the next update retries its
    removal.

    Args:
        managed_digests: Managed set before the update (index 0 = current).
        new_digest: Digest that was just pulled.

    Returns:
        Prune plan.
    """
    stale = [digest for digest in _unique(managed_digests) if digest != new_digest]
    if managed_digests:
        retained = [new_digest, managed_digests[0]]
    else:
        retained = [new_digest]
    return PrunePlan(current=new_digest, stale=stale, retained=retained)


def plan_delete(managed_digests: Sequence[str]) -> list[str]:
    """Get the digests a delete must remove, in stored order."""
    return _unique(managed_digests)


def locate(
    name: str,
    digests: Sequence[str],
    local_images: Mapping[str, object],
) -> list[RemovalTarget]:
    """Resolve digests against a local image listing.

    Args:
        name: Tracked repository name.
        digests: Digests to look up, in processing order.
        local_images: Listing keyed by normalized reference.

    Returns:
        One target per digest, in the same order.
    """
    targets = []
    for digest in digests:
        reference = create_image_reference(name, digest)
        present = normalize_reference(reference) in local_images
        targets.append(RemovalTarget(digest=digest, reference=reference, present=present))
    return targets
