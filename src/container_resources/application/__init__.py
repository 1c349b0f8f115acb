"""Application layer for container resources.

Orchestrates the outbound ports and domain services into the tag and
secret lifecycles.
"""

from container_resources.application.secret_manager import SecretManager
from container_resources.application.tag_manager import TagLifecycleManager

__all__ = [
    "SecretManager",
    "TagLifecycleManager",
]
