"""Label entity shared by tag and secret resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True, order=True)
class Label:
    """A single key/value label attached to a resource."""
    label: str
    value: str


def labels_from_mapping(mapping: Mapping[str, str]) -> frozenset[Label]:
    """Build a label set from a plain mapping.

    Args:
        mapping: Label key to value.

    Returns:
        Frozen set of labels.
    """
    return frozenset(Label(label=key, value=value) for key, value in mapping.items())


def labels_to_mapping(labels: Iterable[Label]) -> dict[str, str]:
    """Flatten a label set into the mapping the runtime API expects."""
    return {item.label: item.value for item in sorted(labels)}
