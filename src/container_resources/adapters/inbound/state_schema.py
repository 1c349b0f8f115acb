"""Persisted state schema for tag and secret resources.

Pydantic models validate state documents where they cross into the
domain. Loading upgrades older schema versions first; dumping always
writes the current version.

Usage:
    from container_resources.adapters.inbound.state_schema import load_tag_state

    tag = load_tag_state(document["attributes"], document["schema_version"])
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from container_resources.domain.entities.label import Label
from container_resources.domain.entities.secret import SecretResource, decode_payload
from container_resources.domain.entities.tag import TagResource
from container_resources.domain.services.state_migration import SCHEMA_VERSION, upgrade_state
from container_resources.domain.value_objects.identifiers import is_digest, validate_repository_name


class LabelModel(BaseModel):
    """A persisted label record."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1, description="Label key")
    value: str = Field(default="", description="Label value")

    def to_label(self) -> Label:
        return Label(label=self.label, value=self.value)


def _labels_out(labels: frozenset[Label]) -> list[LabelModel]:
    return [LabelModel(label=item.label, value=item.value) for item in sorted(labels)]


class TagStateModel(BaseModel):
    """Persisted tag tracker state."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default="", description="External identifier")
    name: str = Field(..., description="Tracked repository name")
    pull_triggers: set[str] = Field(default_factory=set, description="Opaque refresh triggers")
    labels: list[LabelModel] = Field(default_factory=list)
    latest: str = Field(default="", description="Latest resolved digest")
    full_image_name: str = Field(default="", description="name@latest")
    all_digests: list[str] = Field(default_factory=list, alias="all", description="Managed digests")

    @field_validator("name")
    @classmethod
    def _name_has_no_digest(cls, value: str) -> str:
        return validate_repository_name(value)

    @field_validator("latest")
    @classmethod
    def _latest_is_digest(cls, value: str) -> str:
        if value and not is_digest(value):
            raise ValueError(f"{value!r} is not a content digest")
        return value

    @field_validator("all_digests")
    @classmethod
    def _managed_are_digests(cls, value: list[str]) -> list[str]:
        invalid = [digest for digest in value if not is_digest(digest)]
        if invalid:
            raise ValueError(f"Managed digests {invalid!r} are not content digests")
        return value

    def to_resource(self) -> TagResource:
        return TagResource(
            name=self.name,
            pull_triggers=frozenset(self.pull_triggers),
            labels=frozenset(item.to_label() for item in self.labels),
            resource_id=self.id,
            latest_digest=self.latest,
            full_image_name=self.full_image_name,
            managed_digests=list(self.all_digests),
        )

    @classmethod
    def from_resource(cls, resource: TagResource) -> TagStateModel:
        return cls(
            id=resource.resource_id,
            name=resource.name,
            pull_triggers=set(resource.pull_triggers),
            labels=_labels_out(resource.labels),
            latest=resource.latest_digest,
            full_image_name=resource.full_image_name,
            all_digests=list(resource.managed_digests),
        )


class SecretStateModel(BaseModel):
    """Persisted secret state. ``data`` is sensitive."""

    id: str = Field(default="", description="Store-assigned identifier")
    name: str = Field(..., min_length=1, description="Secret name")
    data: str = Field(..., repr=False, description="Base64 payload")
    labels: list[LabelModel] = Field(default_factory=list)

    @field_validator("data")
    @classmethod
    def _data_is_base64(cls, value: str) -> str:
        decode_payload(value)
        return value

    def to_resource(self) -> SecretResource:
        return SecretResource(
            name=self.name,
            data=self.data,
            labels=frozenset(item.to_label() for item in self.labels),
            resource_id=self.id,
        )

    @classmethod
    def from_resource(cls, resource: SecretResource) -> SecretStateModel:
        return cls(
            id=resource.resource_id,
            name=resource.name,
            data=resource.data,
            labels=_labels_out(resource.labels),
        )


def load_tag_state(raw_state: dict[str, Any], schema_version: int = SCHEMA_VERSION) -> TagResource:
    """Load a persisted tag document, upgrading it if needed.

    Raises:
        StateMigrationError: If the schema version is unsupported.
        pydantic.ValidationError: If the document is malformed.
    """
    state = upgrade_state(raw_state, schema_version)
    return TagStateModel.model_validate(state).to_resource()


def dump_tag_state(resource: TagResource) -> dict[str, Any]:
    """Serialize a tag resource in the current schema."""
    state = TagStateModel.from_resource(resource).model_dump(mode="json", by_alias=True)
    state["pull_triggers"] = sorted(state["pull_triggers"])
    state["schema_version"] = SCHEMA_VERSION
    return state


def load_secret_state(raw_state: dict[str, Any], schema_version: int = SCHEMA_VERSION) -> SecretResource:
    """Load a persisted secret document, upgrading it if needed.

    Raises:
        StateMigrationError: If the schema version is unsupported.
        pydantic.ValidationError: If the document is malformed or the
            payload is not base64.
    """
    state = upgrade_state(raw_state, schema_version)
    return SecretStateModel.model_validate(state).to_resource()


def dump_secret_state(resource: SecretResource) -> dict[str, Any]:
    """Serialize a secret resource in the current schema."""
    state = SecretStateModel.from_resource(resource).model_dump(mode="json")
    state["schema_version"] = SCHEMA_VERSION
    return state
