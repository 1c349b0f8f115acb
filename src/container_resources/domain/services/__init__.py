"""Domain services for container resources.

Pure logic with no runtime calls: planning changes to a tag's managed
digest set and upgrading persisted state documents.
"""

from container_resources.domain.services.digest_set import (
    PrunePlan,
    RemovalTarget,
    locate,
    plan_delete,
    plan_update,
)
from container_resources.domain.services.state_migration import (
    SCHEMA_VERSION,
    StateMigrationError,
    replace_labels_map_with_set,
    upgrade_state,
)

__all__ = [
    "PrunePlan",
    "RemovalTarget",
    "SCHEMA_VERSION",
    "StateMigrationError",
    "locate",
    "plan_delete",
    "plan_update",
    "replace_labels_map_with_set",
    "upgrade_state",
]
