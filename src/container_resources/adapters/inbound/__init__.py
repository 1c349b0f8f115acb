"""Inbound adapters - Entry points from the reconciliation framework.

Validates persisted state documents and converts them to domain entities.
"""

from container_resources.adapters.inbound.state_schema import (
    LabelModel,
    SecretStateModel,
    TagStateModel,
    dump_secret_state,
    dump_tag_state,
    load_secret_state,
    load_tag_state,
)

__all__ = [
    "LabelModel",
    "SecretStateModel",
    "TagStateModel",
    "dump_secret_state",
    "dump_tag_state",
    "load_secret_state",
    "load_tag_state",
]
