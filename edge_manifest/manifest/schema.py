"""Structural schema of a manifest, built from the validation combinators."""

from __future__ import annotations

from edge_manifest.manifest import validation as v


SCALAR_FIELD_KINDS: tuple[str, ...] = ("id", "string", "number", "boolean", "date", "json", "uuid")
RELATION_TYPES: tuple[str, ...] = ("one", "many")


non_empty_string = v.pipe(v.string(), v.min_length(1, "Expected a non-empty string"))

relation_type_schema = v.union([v.literal(t) for t in RELATION_TYPES])

relation_schema = v.object_({
    "entity": non_empty_string,
    "field": v.optional(non_empty_string),
    "type": relation_type_schema,
})

scalar_kind_schema = v.union([v.literal(k) for k in SCALAR_FIELD_KINDS])


def _field_attributes() -> dict[str, v.Schema]:
    """Optional attributes shared by scalar and relation fields."""
    return {
        "description": v.optional(non_empty_string),
        "required": v.optional(v.boolean()),
        "unique": v.optional(v.boolean()),
        "nullable": v.optional(v.boolean()),
        "default": v.optional(v.unknown()),
    }


scalar_field_schema = v.object_({
    "name": non_empty_string,
    "kind": scalar_kind_schema,
    **_field_attributes(),
})

relation_field_schema = v.object_({
    "name": non_empty_string,
    "kind": v.literal("relation"),
    "relation": relation_schema,
    **_field_attributes(),
})

# Order matters: when neither alternative matches, the one reporting more
# issues wins, and ties go to the relation alternative.
field_schema = v.union([relation_field_schema, scalar_field_schema])

entity_schema = v.object_({
    "name": non_empty_string,
    "table": v.optional(non_empty_string),
    "fields": v.pipe(v.array(field_schema), v.min_length(1, "Expected at least one field")),
})

MANIFEST_SCHEMA = v.object_({
    "id": non_empty_string,
    "name": non_empty_string,
    "version": non_empty_string,
    "generators": v.optional(v.record(v.string(), v.unknown())),
    "entities": v.pipe(v.array(entity_schema), v.min_length(1, "Expected at least one entity")),
    "relations": v.optional(v.record(v.string(), v.unknown())),
})
