"""Unit tests for persisted state migration and validation."""

import base64

import pytest
from pydantic import ValidationError

from container_resources.adapters.inbound.state_schema import (
    dump_secret_state,
    dump_tag_state,
    load_secret_state,
    load_tag_state,
)
from container_resources.domain.entities.label import Label
from container_resources.domain.entities.tag import TagResource
from container_resources.domain.services.state_migration import (
    SCHEMA_VERSION,
    StateMigrationError,
    replace_labels_map_with_set,
    upgrade_state,
)

DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64
PAYLOAD = base64.b64encode(b"s3cr3t").decode()


@pytest.mark.unit
class TestStateMigration:
    """Tests for the label schema upgrade."""

    def test_map_labels_become_records(self):
        """Test version-0 label maps become sorted label records."""
        raw = {"name": "token", "labels": {"team": "infra", "env": "prod"}}

        upgraded = replace_labels_map_with_set(raw)

        assert upgraded["labels"] == [
            {"label": "env", "value": "prod"},
            {"label": "team", "value": "infra"},
        ]
        assert raw["labels"] == {"team": "infra", "env": "prod"}

    def test_missing_labels_become_empty(self):
        """Test absent labels upgrade to an empty list."""
        assert replace_labels_map_with_set({"name": "token"})["labels"] == []

    def test_current_version_passes_through(self):
        """Test current-version state is returned unchanged."""
        raw = {"name": "token", "labels": [{"label": "a", "value": "b"}]}

        assert upgrade_state(raw, SCHEMA_VERSION) == raw

    def test_future_version_rejected(self):
        """Test state from a newer schema is refused."""
        with pytest.raises(StateMigrationError, match="Unsupported"):
            upgrade_state({}, SCHEMA_VERSION + 1)

    def test_unexpected_label_shape_rejected(self):
        """Test labels that are neither map nor list fail the upgrade."""
        with pytest.raises(StateMigrationError):
            upgrade_state({"labels": "team=infra"}, 0)


@pytest.mark.unit
class TestSecretState:
    """Tests for secret state loading and dumping."""

    def test_load_version_zero(self):
        """Test a version-0 secret document loads with label pairs."""
        raw = {"id": "abc123", "name": "token", "data": PAYLOAD, "labels": {"env": "prod"}}

        secret = load_secret_state(raw, schema_version=0)

        assert secret.resource_id == "abc123"
        assert secret.labels == frozenset({Label("env", "prod")})
        assert secret.payload() == b"s3cr3t"

    def test_invalid_payload_rejected(self):
        """Test non-base64 data fails validation at the boundary."""
        with pytest.raises(ValidationError):
            load_secret_state({"name": "token", "data": "%%%"})

    def test_wrapped_payload_loads(self):
        """Test persisted payloads wrapped across lines are accepted."""
        data = base64.encodebytes(b"x" * 100).decode()

        secret = load_secret_state({"name": "token", "data": data})

        assert secret.payload() == b"x" * 100

    def test_dump_writes_current_version(self):
        """Test dumped documents carry the schema version and label records."""
        secret = load_secret_state({"name": "token", "data": PAYLOAD, "labels": {"b": "2", "a": "1"}}, 0)

        state = dump_secret_state(secret)

        assert state["schema_version"] == SCHEMA_VERSION
        assert state["labels"] == [{"label": "a", "value": "1"}, {"label": "b", "value": "2"}]
        assert load_secret_state(state) == secret


@pytest.mark.unit
class TestTagState:
    """Tests for tag state loading and dumping."""

    def test_dump_uses_persisted_field_names(self):
        """Test tag state is written with the persisted attribute names."""
        tag = TagResource(
            name="library/nginx",
            pull_triggers=frozenset({"b", "a"}),
            resource_id="library/nginx",
            latest_digest=DIGEST_B,
            full_image_name=f"library/nginx@{DIGEST_B}",
            managed_digests=[DIGEST_B, DIGEST_A],
        )

        state = dump_tag_state(tag)

        assert state == {
            "id": "library/nginx",
            "name": "library/nginx",
            "pull_triggers": ["a", "b"],
            "labels": [],
            "latest": DIGEST_B,
            "full_image_name": f"library/nginx@{DIGEST_B}",
            "all": [DIGEST_B, DIGEST_A],
            "schema_version": SCHEMA_VERSION,
        }

    def test_load_keeps_managed_order(self):
        """Test managed digest order survives loading."""
        tag = load_tag_state({"name": "library/nginx", "all": [DIGEST_B, DIGEST_A]})

        assert tag.managed_digests == [DIGEST_B, DIGEST_A]

    def test_malformed_latest_rejected(self):
        """Test a latest value that is not a digest fails validation."""
        with pytest.raises(ValidationError, match="latest"):
            load_tag_state({"name": "nginx", "latest": "not-a-digest"})

    @pytest.mark.parametrize("entry", ["latest", ""])
    def test_malformed_managed_entry_rejected(self, entry):
        """Test every managed entry must be a digest."""
        with pytest.raises(ValidationError, match="all"):
            load_tag_state({"name": "nginx", "latest": DIGEST_A, "all": [DIGEST_A, entry]})

    def test_unresolved_tag_loads(self):
        """Test an empty latest digest is accepted before the first resolve."""
        tag = load_tag_state({"name": "nginx", "latest": "", "all": []})

        assert tag.latest_digest == ""

    def test_name_with_digest_rejected(self):
        """Test a tracked name embedding a digest fails validation."""
        with pytest.raises(ValidationError):
            load_tag_state({"name": f"library/nginx@{DIGEST_A}"})
