"""Catalog entity model and entity reference grammar.

Entity references identify catalog entities by ``kind:namespace/name``.
Raw references coming from identity providers are untrusted text, so
``parse_entity_ref`` returns a ``MalformedReference`` value instead of
raising when the text does not follow the grammar.
"""

import re
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from rollcall.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_KIND = "user"
DEFAULT_NAMESPACE = "default"
RELATION_MEMBER_OF = "memberOf"

MAX_SEGMENT_LENGTH = 63

_KIND_RE = re.compile(r"[a-z][a-z0-9]*")
_NAMESPACE_RE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")
_NAME_RE = re.compile(r"[a-z0-9]+(?:[-_.][a-z0-9]+)*")


@dataclass(frozen=True)
class EntityReference:
    """Canonical (kind, namespace, name) triple. All parts are lower-case."""

    kind: str
    namespace: str
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", self.kind.lower())
        object.__setattr__(self, "namespace", self.namespace.lower())
        object.__setattr__(self, "name", self.name.lower())

    def __str__(self) -> str:
        return f"{self.kind}:{self.namespace}/{self.name}"


@dataclass(frozen=True)
class MalformedReference:
    """A raw reference that failed the grammar."""

    raw: str
    reason: str


def stringify_entity_ref(ref: EntityReference) -> str:
    """Return the canonical ``kind:namespace/name`` form."""
    return str(ref)


def _split_ref(text: str) -> tuple[str | None, str | None, str]:
    colon = text.find(":")
    slash = text.find("/")

    # A slash ahead of the colon means the colon belongs to the name
    if slash != -1 and slash < colon:
        colon = -1

    kind = text[:colon] if colon != -1 else None
    namespace = text[colon + 1 : slash] if slash != -1 else None
    name = text[max(colon + 1, slash + 1) :]
    return kind, namespace, name


def _check_segment(label: str, value: str, pattern: re.Pattern[str]) -> str | None:
    if not value:
        return f"empty {label}"
    if len(value) > MAX_SEGMENT_LENGTH:
        return f"{label} longer than {MAX_SEGMENT_LENGTH} characters"
    if not pattern.fullmatch(value):
        return f"invalid {label} {value!r}"
    return None


def parse_entity_ref(
    ref: Any,
    default_kind: str = DEFAULT_KIND,
    default_namespace: str = DEFAULT_NAMESPACE,
) -> EntityReference | MalformedReference:
    """Parse ``[kind:][namespace/]name`` into an EntityReference.

    Matching is case-insensitive; the result is always lower-case. Missing
    kind and namespace segments are filled from the defaults. Segments that
    are present but empty, or that contain characters outside the entity
    name alphabet, produce a MalformedReference.

    Args:
        ref: Raw reference text.
        default_kind: Kind used when the reference has no ``kind:`` prefix.
        default_namespace: Namespace used when there is no ``namespace/`` part.

    Returns:
        The parsed reference, or a MalformedReference describing the failure.
    """
    if not isinstance(ref, str):
        return MalformedReference(raw=repr(ref), reason="reference is not a string")

    kind, namespace, name = _split_ref(ref.lower())
    if kind is None:
        kind = default_kind.lower()
    if namespace is None:
        namespace = default_namespace.lower()

    for label, value, pattern in (
        ("kind", kind, _KIND_RE),
        ("namespace", namespace, _NAMESPACE_RE),
        ("name", name, _NAME_RE),
    ):
        problem = _check_segment(label, value, pattern)
        if problem:
            return MalformedReference(raw=ref, reason=problem)

    return EntityReference(kind=kind, namespace=namespace, name=name)


# --- Catalog records ---


class EntityMetadata(BaseModel):
    """The subset of entity metadata the resolvers read."""

    model_config = ConfigDict(extra="allow")

    name: str
    namespace: str = DEFAULT_NAMESPACE
    uid: str | None = None
    title: str | None = None
    annotations: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)


class Relation(BaseModel):
    """A directed relation from the owning entity to ``target``."""

    type: str
    target: EntityReference

    @model_validator(mode="before")
    @classmethod
    def _accept_target_ref(cls, data: Any) -> Any:
        # Newer catalogs send only the stringified targetRef
        if isinstance(data, dict) and "target" not in data and "targetRef" in data:
            return {**data, "target": data["targetRef"]}
        return data

    @field_validator("target", mode="before")
    @classmethod
    def _coerce_target(cls, value: Any) -> Any:
        if isinstance(value, EntityReference):
            return value
        if isinstance(value, dict):
            namespace = value.get("namespace") or DEFAULT_NAMESPACE
            value = f"{value.get('kind', '')}:{namespace}/{value.get('name', '')}"
        parsed = parse_entity_ref(value)
        if isinstance(parsed, MalformedReference):
            raise ValueError(f"unparseable relation target: {parsed.reason}")
        return parsed


class CatalogEntity(BaseModel):
    """An entity record as returned by the catalog."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(default="backstage.io/v1alpha1", alias="apiVersion")
    kind: str
    metadata: EntityMetadata
    spec: dict[str, Any] = Field(default_factory=dict)
    relations: list[Relation] = Field(default_factory=list)

    @field_validator("relations", mode="before")
    @classmethod
    def _drop_unreadable_relations(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        kept = []
        for raw in value:
            try:
                kept.append(Relation.model_validate(raw))
            except ValidationError:
                logger.debug("Skipping unreadable relation", relation=raw)
        return kept

    @property
    def ref(self) -> EntityReference:
        return EntityReference(
            kind=self.kind,
            namespace=self.metadata.namespace,
            name=self.metadata.name,
        )

    def relation_targets(self, relation_type: str) -> list[EntityReference]:
        """Targets of all relations of the given type, in declaration order."""
        return [r.target for r in self.relations if r.type == relation_type]


class UserEntity(CatalogEntity):
    """A catalog entity of kind ``user``."""

    @property
    def profile(self) -> dict[str, Any]:
        return self.spec.get("profile") or {}

    @property
    def display_name(self) -> str | None:
        return self.profile.get("displayName")

    @property
    def email(self) -> str | None:
        return self.profile.get("email")

    @property
    def member_of(self) -> list[str]:
        """Group references declared directly on the user entity."""
        return list(self.spec.get("memberOf") or [])
