"""Outbound adapters - Implementations of outbound port interfaces.

Provides the Docker Engine implementation and in-memory implementations
for testing and development on hosts without an engine.
"""

from container_resources.adapters.outbound.memory_engine import (
    InMemoryImageStore,
    InMemoryRegistry,
    InMemorySecretStore,
    MockSecretState,
)

__all__ = [
    # In-memory engine
    "InMemoryImageStore",
    "InMemoryRegistry",
    "InMemorySecretStore",
    "MockSecretState",
]
