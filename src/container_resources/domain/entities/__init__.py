"""Domain entities for container resources.

Entities represent the declaratively managed runtime objects:
- TagResource: Tracked repository tag and its managed local digests
- SecretResource: Immutable runtime secret
- Label: Key/value pair attached to either resource
"""

from container_resources.domain.entities.label import (
    Label,
    labels_from_mapping,
    labels_to_mapping,
)
from container_resources.domain.entities.secret import (
    DecodeError,
    SecretResource,
    decode_payload,
)
from container_resources.domain.entities.tag import TagResource

__all__ = [
    # Labels
    "Label",
    "labels_from_mapping",
    "labels_to_mapping",
    # Secret
    "DecodeError",
    "SecretResource",
    "decode_payload",
    # Tag
    "TagResource",
]
