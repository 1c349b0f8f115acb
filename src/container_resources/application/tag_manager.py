"""Tag Lifecycle Manager.

Keeps a local copy of the image a registry tag currently points at and
prunes the copies it pulled for earlier digests.

Lifecycle:
    create: resolve -> pull -> managed set = [digest]
    read:   re-resolve, refresh computed fields (managed set untouched)
    update: pull refreshed digest -> prune old managed digests
            -> managed set = [new, previous current]
    delete: remove every managed digest -> clear identifier

Every runtime call is blocking and issued one at a time. Nothing is
retried here; retry and backoff belong to the caller.
"""

from __future__ import annotations

import time
from typing import Iterable, Optional

from container_resources.application.instrumentation import observe_operation
from container_resources.domain.entities.label import Label
from container_resources.domain.entities.tag import TagResource
from container_resources.domain.services.digest_set import (
    locate,
    plan_delete,
    plan_update,
)
from container_resources.infrastructure.logging import get_logger
from container_resources.infrastructure.metrics import MetricsRegistry
from container_resources.ports.outbound import (
    DigestResolverPort,
    ImageListError,
    ImagePullerPort,
    ImageRemoverPort,
    LocalImageListerPort,
    PullError,
    RemovalError,
    ResolutionError,
)

logger = get_logger(__name__)

RESOURCE_KIND = "tag"


class TagLifecycleManager:
    """Reconciles tag resources against the registry and local image store."""

    def __init__(
        self,
        resolver: DigestResolverPort,
        puller: ImagePullerPort,
        remover: ImageRemoverPort,
        lister: LocalImageListerPort,
        metrics: Optional[MetricsRegistry] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            resolver: Registry digest lookups.
            puller: Pulls digest-pinned references.
            remover: Force-removes local images.
            lister: Enumerates local images before removals.
            metrics: Optional metrics registry.
        """
        self._resolver = resolver
        self._puller = puller
        self._remover = remover
        self._lister = lister
        self._metrics = metrics

    def create(
        self,
        name: str,
        pull_triggers: Iterable[str] = (),
        labels: Iterable[Label] = (),
    ) -> TagResource:
        """Start tracking a tag.

        Args:
            name: Repository name to track; must not embed a digest.
            pull_triggers: Opaque values whose change forces an update.
            labels: Labels carried with the resource.

        Returns:
            The created resource.

        Raises:
            ValueError: If name is invalid.
            ResolutionError: If the digest cannot be resolved.
            PullError: If the image cannot be pulled.
        """
        resource = TagResource(
            name=name,
            pull_triggers=frozenset(pull_triggers),
            labels=frozenset(labels),
        )

        with observe_operation(self._metrics, RESOURCE_KIND, "create", {"tag.name": name}):
            digest = self._resolver.resolve_digest(name)
            self._pull(resource.reference_for(digest))

            resource.resource_id = name
            resource.set_latest(digest)
            resource.managed_digests = [digest]
            logger.info("tag_created", name=name, digest=digest)

        self._record_managed(resource)
        return self.read(resource)

    def read(self, resource: TagResource) -> TagResource:
        """Refresh the computed fields from the registry.

        A tag the registry no longer knows is reported as deleted by
        clearing its identifier; no error is raised in that case.

        Args:
            resource: Resource to refresh in place.

        Returns:
            The same resource.

        Raises:
            ResolutionError: If the lookup fails for any other reason.
        """
        with observe_operation(self._metrics, RESOURCE_KIND, "read", {"tag.name": resource.name}):
            try:
                digest = self._resolver.resolve_digest(resource.name)
            except ResolutionError as e:
                if not e.not_found:
                    raise
                logger.warning("tag_not_found", name=resource.name, error=str(e))
                resource.mark_deleted()
                return resource

            if digest != resource.latest_digest:
                logger.info(
                    "tag_digest_changed",
                    name=resource.name,
                    previous=resource.latest_digest,
                    digest=digest,
                )
            resource.set_latest(digest)
        return resource

    def update(self, resource: TagResource) -> TagResource:
        """Pull the current digest and prune superseded ones.

        Expects ``latest_digest`` to have been refreshed by a read in the
        same cycle. Prune failures still advance the managed set to
        ``[new, previous current]`` before the error is raised, so the
        next update retries the leftover removal.

        Args:
            resource: Resource to update in place.

        Returns:
            The same resource.

        Raises:
            PullError: If the pull fails; the resource is left untouched.
            RemovalError: If pruning fails after the managed set advanced.
        """
        with observe_operation(self._metrics, RESOURCE_KIND, "update", {"tag.name": resource.name}):
            digest = resource.latest_digest
            if not digest:
                digest = self._resolver.resolve_digest(resource.name)
            self._pull(resource.reference_for(digest))

            plan = plan_update(resource.managed_digests, digest)
            prune_error: RemovalError | None = None
            try:
                self._remove_present(resource.name, plan.stale)
            except RemovalError as e:
                prune_error = e

            resource.set_latest(digest)
            resource.managed_digests = plan.retained
            self._record_managed(resource)

            if prune_error is not None:
                logger.error(
                    "tag_prune_failed",
                    name=resource.name,
                    digest=digest,
                    retained=plan.retained,
                    error=str(prune_error),
                )
                raise prune_error
            logger.info("tag_updated", name=resource.name, digest=digest, pruned=plan.stale)

        return self.read(resource)

    def delete(self, resource: TagResource) -> TagResource:
        """Remove every managed digest and stop tracking the tag.

        Args:
            resource: Resource to delete in place.

        Returns:
            The same resource, with its identifier cleared.

        Raises:
            RemovalError: If any removal fails; the identifier is kept so
                the delete can be retried.
        """
        with observe_operation(self._metrics, RESOURCE_KIND, "delete", {"tag.name": resource.name}):
            self._remove_present(resource.name, plan_delete(resource.managed_digests))
            resource.mark_deleted()
            logger.info("tag_deleted", name=resource.name, removed=resource.managed_digests)

        if self._metrics:
            self._metrics.managed_digests.remove(resource.name)
        return resource

    def _pull(self, reference: str) -> None:
        """Pull a digest-pinned reference, recording the outcome."""
        start = time.perf_counter()
        try:
            self._puller.pull(reference)
        except PullError:
            if self._metrics:
                self._metrics.image_pulls_total.labels(status="failed").inc()
            raise
        if self._metrics:
            self._metrics.image_pulls_total.labels(status="success").inc()
            self._metrics.image_pull_duration_seconds.observe(time.perf_counter() - start)
        logger.debug("image_pulled", reference=reference)

    def _remove_present(self, name: str, digests: list[str]) -> None:
        """Remove the digests that exist locally, in order.

        Stops at the first failure. Digests already absent are skipped.
        """
        if not digests:
            return

        try:
            local_images = self._lister.list_local_images()
        except ImageListError as e:
            raise ImageListError(e.detail, name=name) from e
        for target in locate(name, digests, local_images):
            if not target.present:
                logger.debug("digest_already_absent", name=name, digest=target.digest)
                self._count_removal("absent")
                continue
            try:
                self._remover.remove_image(target.reference, force=True)
            except RemovalError:
                self._count_removal("failed")
                raise
            self._count_removal("removed")
            logger.info("digest_pruned", name=name, digest=target.digest)

    def _count_removal(self, outcome: str) -> None:
        if self._metrics:
            self._metrics.image_removals_total.labels(outcome=outcome).inc()

    def _record_managed(self, resource: TagResource) -> None:
        if self._metrics:
            self._metrics.managed_digests.labels(name=resource.name).set(len(resource.managed_digests))
