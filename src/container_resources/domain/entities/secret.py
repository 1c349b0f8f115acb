"""Runtime secret entity."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field

from container_resources.domain.entities.label import Label, labels_to_mapping


class DecodeError(ValueError):
    """Raised when a secret payload is not valid base64."""

    pass


def decode_payload(data: str) -> bytes:
    """Decode a base64 secret payload.

    Args:
        data: Standard base64 text. Line breaks are ignored, so wrapped
            output of the base64 tool is accepted.

    Returns:
        Raw payload bytes.

    Raises:
        DecodeError: If data is not valid base64.
    """
    try:
        return base64.b64decode(data.replace("\r", "").replace("\n", ""), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Secret data is not base64 encoded: {e}") from e


@dataclass
class SecretResource:
    """An immutable secret stored by the container runtime.

    There is no in-place update: any change to name, data or labels
    means a new secret.
    """
    name: str
    data: str = field(repr=False)  # Base64 payload, never logged
    labels: frozenset[Label] = field(default_factory=frozenset)
    resource_id: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Secret name must not be empty")
        decode_payload(self.data)
        self.labels = frozenset(self.labels)

    def payload(self) -> bytes:
        """Get the decoded secret payload."""
        return decode_payload(self.data)

    def label_mapping(self) -> dict[str, str]:
        """Get labels as the mapping the runtime API expects."""
        return labels_to_mapping(self.labels)

    def exists(self) -> bool:
        """Check if the secret has a store-assigned identifier."""
        return bool(self.resource_id)

    def mark_deleted(self) -> None:
        """Clear the identifier so callers treat the secret as gone."""
        self.resource_id = ""
