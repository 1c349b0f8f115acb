"""Integration tests for tag and secret lifecycles over the in-memory engine."""

import base64

import pytest

from container_resources.adapters.inbound.state_schema import (
    dump_secret_state,
    dump_tag_state,
    load_secret_state,
    load_tag_state,
)
from container_resources.adapters.outbound.memory_engine import InMemoryImageStore, InMemoryRegistry
from container_resources.application.secret_manager import SecretManager
from container_resources.application.tag_manager import TagLifecycleManager
from container_resources.infrastructure.container import build_container
from container_resources.ports.outbound import RemovalError, SecretStorePort

NGINX = "library/nginx"
DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64
DIGEST_C = "sha256:" + "c" * 64


@pytest.fixture
def wired(memory_config, metrics_registry):
    """Provide a container wired to the memory backend."""
    return build_container(memory_config, metrics_registry)


@pytest.mark.integration
class TestTagLifecycle:
    """Tag tracking across several refresh cycles with persisted state."""

    def test_tracks_and_prunes_across_cycles(self, wired):
        """Test create, two upstream moves and delete with state round trips."""
        registry = wired.resolve(InMemoryRegistry)
        images = wired.resolve(InMemoryImageStore)
        manager = wired.resolve(TagLifecycleManager)
        registry.publish(NGINX, DIGEST_A)

        # Create
        tag = manager.create(NGINX, pull_triggers=["build-1"])
        state = dump_tag_state(tag)
        assert state["id"] == NGINX
        assert state["all"] == [DIGEST_A]
        assert images.has_image(f"{NGINX}@{DIGEST_A}")

        # Upstream moves to B
        registry.publish(NGINX, DIGEST_B)
        tag = manager.read(load_tag_state(state))
        assert tag.latest_digest == DIGEST_B
        tag = manager.update(tag)
        state = dump_tag_state(tag)
        assert state["all"] == [DIGEST_B, DIGEST_A]
        assert state["full_image_name"] == f"{NGINX}@{DIGEST_B}"
        assert not images.has_image(f"{NGINX}@{DIGEST_A}")
        assert images.has_image(f"{NGINX}@{DIGEST_B}")

        # Upstream moves to C
        registry.publish(NGINX, DIGEST_C)
        tag = manager.update(manager.read(load_tag_state(state)))
        assert tag.managed_digests == [DIGEST_C, DIGEST_B]
        assert images.removed == [f"{NGINX}@{DIGEST_A}", f"{NGINX}@{DIGEST_B}"]

        # Delete
        tag = manager.delete(load_tag_state(dump_tag_state(tag)))
        assert not tag.exists()
        assert not images.has_image(f"{NGINX}@{DIGEST_C}")

    def test_failed_prune_is_retried_next_cycle(self, wired):
        """Test a digest left behind by a failed prune is removed later."""
        registry = wired.resolve(InMemoryRegistry)
        images = wired.resolve(InMemoryImageStore)
        manager = wired.resolve(TagLifecycleManager)
        registry.publish(NGINX, DIGEST_A)
        tag = manager.create(NGINX)

        registry.publish(NGINX, DIGEST_B)
        images.fail_removal(f"{NGINX}@{DIGEST_A}")
        manager.read(tag)
        with pytest.raises(RemovalError):
            manager.update(tag)
        assert tag.managed_digests == [DIGEST_B, DIGEST_A]
        assert images.has_image(f"{NGINX}@{DIGEST_A}")

        images.clear_failures()
        registry.publish(NGINX, DIGEST_C)
        manager.update(manager.read(tag))

        assert tag.managed_digests == [DIGEST_C, DIGEST_B]
        assert not images.has_image(f"{NGINX}@{DIGEST_A}")
        assert not images.has_image(f"{NGINX}@{DIGEST_B}")

    def test_tag_removed_upstream_reads_as_deleted(self, wired):
        """Test a repository deleted from the registry clears the id."""
        registry = wired.resolve(InMemoryRegistry)
        manager = wired.resolve(TagLifecycleManager)
        registry.publish(NGINX, DIGEST_A)
        tag = manager.create(NGINX)

        registry.unpublish(NGINX)

        assert dump_tag_state(manager.read(tag))["id"] == ""


@pytest.mark.integration
class TestSecretLifecycle:
    """Secret lifecycle starting from version-0 state."""

    def test_legacy_state_is_read_and_deleted(self, wired):
        """Test an upgraded legacy document drives read and delete."""
        store = wired.resolve(SecretStorePort)
        manager = wired.resolve(SecretManager)
        payload = base64.b64encode(b"hunter2").decode()
        secret_id = store.create_secret("db-password", b"hunter2", {"env": "prod"})

        legacy = {"id": secret_id, "name": "db-password", "data": payload, "labels": {"env": "prod"}}
        secret = manager.read(load_secret_state(legacy, schema_version=0))
        state = dump_secret_state(secret)
        assert state["id"] == secret_id
        assert state["labels"] == [{"label": "env", "value": "prod"}]

        secret = manager.delete(load_secret_state(state))
        assert dump_secret_state(secret)["id"] == ""
