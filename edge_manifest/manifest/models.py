"""Pydantic v2 models for a validated manifest.

Instances are only ever built from the output of the structural validator
(see :mod:`edge_manifest.manifest.validator`), so the models themselves carry
no extra constraints.  They are frozen and hold entities and fields as
tuples, so generators receive a read-only view; dumping turns the tuples
back into lists.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, field_serializer


ScalarKind = Literal["id", "string", "number", "boolean", "date", "json", "uuid"]
RelationType = Literal["one", "many"]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class ManifestRelation(_FrozenModel):
    """Target of a relation field."""
    entity: str = Field(..., description="Name of the referenced entity")
    field: Optional[str] = Field(default=None, description="Referenced field, if not the primary key")
    type: RelationType = Field(..., description="Cardinality: 'one' or 'many'")


class _FieldBase(_FrozenModel):
    name: str = Field(..., description="Field name, unique within its entity")
    description: Optional[str] = Field(default=None, description="Human-readable description")
    required: Optional[bool] = Field(default=None)
    unique: Optional[bool] = Field(default=None)
    nullable: Optional[bool] = Field(default=None)
    default: Any = Field(default=None, description="Default value (not type-checked)")

    @property
    def has_default(self) -> bool:
        """Whether ``default`` was supplied, including an explicit ``None``."""
        return "default" in self.model_fields_set

    @property
    def is_relation(self) -> bool:
        return self.kind == "relation"


class ScalarField(_FieldBase):
    kind: ScalarKind


class RelationField(_FieldBase):
    kind: Literal["relation"]
    relation: ManifestRelation


ManifestField = Annotated[Union[RelationField, ScalarField], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class ManifestEntity(_FrozenModel):
    """A named record type, emitted as one table / model / route group."""

    name: str = Field(..., description="Entity name, unique within the manifest")
    table: Optional[str] = Field(default=None, description="Table name override")
    fields: tuple[ManifestField, ...] = Field(..., description="Ordered field list")

    @field_serializer("fields", mode="wrap")
    def dump_fields_as_list(self, value: Any, handler: SerializerFunctionWrapHandler) -> list[Any]:
        return list(handler(value))

    @property
    def table_name(self) -> str:
        """``table`` if given, otherwise the lowercased entity name."""
        return self.table or self.name.lower()

    @property
    def route_segment(self) -> str:
        """Plural URL segment, e.g. ``User`` -> ``users``."""
        return f"{self.name.lower()}s"

    @property
    def scalar_fields(self) -> list[ScalarField]:
        return [f for f in self.fields if not f.is_relation]

    @property
    def relation_fields(self) -> list[RelationField]:
        return [f for f in self.fields if f.is_relation]

    @property
    def primary_key(self) -> str:
        """Name of the first ``id``/``uuid`` field, falling back to ``"id"``."""
        for f in self.fields:
            if f.kind in ("id", "uuid"):
                return f.name
        return "id"


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class Manifest(_FrozenModel):
    """Root of a validated manifest."""

    id: str = Field(..., description="Manifest identifier")
    name: str = Field(..., description="Application name")
    version: str = Field(..., description="Manifest version string")
    generators: Optional[dict[str, Any]] = Field(
        default=None, description="Free-form generator settings"
    )
    entities: tuple[ManifestEntity, ...] = Field(..., description="Ordered entity list")
    relations: Optional[dict[str, Any]] = Field(
        default=None, description="Free-form relation settings"
    )

    @field_serializer("entities", mode="wrap")
    def dump_entities_as_list(self, value: Any, handler: SerializerFunctionWrapHandler) -> list[Any]:
        return list(handler(value))

    def get_entity(self, name: str) -> ManifestEntity | None:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict containing only the attributes that were supplied."""
        return self.model_dump(exclude_unset=True)
