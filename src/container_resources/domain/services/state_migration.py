"""Persisted state schema migration.

Version history:
    0: labels stored as a mapping {"key": "value"}
    1: labels stored as a list of {"label": ..., "value": ...} records

Upgraders are pure functions applied in sequence from the persisted version
up to SCHEMA_VERSION. They never touch the runtime.
"""

from __future__ import annotations

import copy
from typing import Any, Callable

SCHEMA_VERSION = 1

RawState = dict[str, Any]


class StateMigrationError(Exception):
    """Raised when persisted state cannot be upgraded."""

    pass


def replace_labels_map_with_set(raw_state: RawState) -> RawState:
    """Convert version-0 labels into version-1 label records.

    Args:
        raw_state: Version-0 state document.

    Returns:
        A new document with labels as a list of records.
    """
    state = copy.deepcopy(raw_state)
    labels = state.get("labels")
    if labels is None:
        state["labels"] = []
    elif isinstance(labels, dict):
        state["labels"] = [
            {"label": str(key), "value": str(value)}
            for key, value in sorted(labels.items())
        ]
    elif not isinstance(labels, list):
        raise StateMigrationError(
            f"Cannot upgrade labels of type {type(labels).__name__}"
        )
    return state


# Upgrader registered under the version it upgrades *from*
STATE_UPGRADERS: dict[int, Callable[[RawState], RawState]] = {
    0: replace_labels_map_with_set,
}


def upgrade_state(raw_state: RawState, from_version: int) -> RawState:
    """Upgrade a persisted state document to the current schema.

    Args:
        raw_state: Persisted state document.
        from_version: Schema version the document was written with.

    Returns:
        Document in the current schema. The input is not modified.

    Raises:
        StateMigrationError: If the version is unknown or newer than supported.
    """
    if from_version < 0 or from_version > SCHEMA_VERSION:
        raise StateMigrationError(
            f"Unsupported state schema version {from_version} "
            f"(current is {SCHEMA_VERSION})"
        )

    state = raw_state
    for version in range(from_version, SCHEMA_VERSION):
        upgrader = STATE_UPGRADERS.get(version)
        if upgrader is None:
            raise StateMigrationError(f"No upgrader registered for version {version}")
        state = upgrader(state)
    return state
