"""Secret Manager: create-once, read-back and delete of runtime secrets."""

from __future__ import annotations

from typing import Optional

from container_resources.application.instrumentation import observe_operation
from container_resources.domain.entities.secret import SecretResource
from container_resources.infrastructure.logging import get_logger
from container_resources.infrastructure.metrics import MetricsRegistry
from container_resources.ports.outbound import SecretNotFoundError, SecretStorePort

logger = get_logger(__name__)

RESOURCE_KIND = "secret"


class SecretManager:
    """Manages immutable secrets in the runtime's secret store.

    There is no update operation; a changed secret is deleted and
    created again by the caller.
    """

    def __init__(self, store: SecretStorePort, metrics: Optional[MetricsRegistry] = None) -> None:
        self._store = store
        self._metrics = metrics

    def create(self, resource: SecretResource) -> SecretResource:
        """Submit the secret and adopt the store-assigned identifier.

        Args:
            resource: Secret to create; its payload was validated on construction.

        Returns:
            The same resource with ``resource_id`` set.

        Raises:
            DecodeError: If the payload is not valid base64.
            SecretStoreError: If the store rejects the secret.
        """
        with observe_operation(self._metrics, RESOURCE_KIND, "create", {"secret.name": resource.name}):
            secret_id = self._store.create_secret(
                resource.name,
                resource.payload(),
                resource.label_mapping(),
            )
            resource.resource_id = secret_id
            logger.info("secret_created", name=resource.name, secret_id=secret_id)
        return self.read(resource)

    def read(self, resource: SecretResource) -> SecretResource:
        """Confirm the secret still exists.

        A secret missing from the store is reported as deleted by
        clearing its identifier.

        Raises:
            SecretStoreError: If the lookup fails for any other reason.
        """
        with observe_operation(self._metrics, RESOURCE_KIND, "read", {"secret.id": resource.resource_id}):
            try:
                stored = self._store.inspect_secret(resource.resource_id)
            except SecretNotFoundError:
                logger.warning(
                    "secret_not_found",
                    name=resource.name,
                    secret_id=resource.resource_id,
                )
                resource.mark_deleted()
                return resource
            resource.resource_id = stored.secret_id
        return resource

    def delete(self, resource: SecretResource) -> SecretResource:
        """Remove the secret from the store.

        Raises:
            SecretStoreError: If removal fails; the identifier is kept.
        """
        with observe_operation(self._metrics, RESOURCE_KIND, "delete", {"secret.id": resource.resource_id}):
            self._store.remove_secret(resource.resource_id)
            logger.info("secret_deleted", name=resource.name, secret_id=resource.resource_id)
            resource.mark_deleted()
        return resource
