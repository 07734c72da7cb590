"""Helpers shared by the individual generators."""

from __future__ import annotations

import json
from typing import Any

from edge_manifest.manifest.models import Manifest, ManifestEntity, ScalarField


# Added to every table unless the entity declares a field of the same name.
AUTO_TIMESTAMP_COLUMNS: tuple[str, ...] = ("created_at", "updated_at")


def is_required(field: ScalarField) -> bool:
    return field.required is True


def key_field(entity: ManifestEntity) -> ScalarField | None:
    """The declared field acting as primary key, or ``None`` if one is synthesised.

    The first ``id``/``uuid`` field wins; failing that, a scalar field named
    ``id`` of any kind is used so the synthetic column never shadows it.
    """
    scalars = entity.scalar_fields
    for f in scalars:
        if f.kind in ("id", "uuid"):
            return f
    for f in scalars:
        if f.name == "id":
            return f
    return None


def is_primary_key(entity: ManifestEntity, field: ScalarField) -> bool:
    key = key_field(entity)
    return key is not None and field.name == key.name


def needs_synthetic_key(entity: ManifestEntity) -> bool:
    """Whether generators must add an ``id TEXT`` primary key column."""
    return key_field(entity) is None


def server_assigns_key(entity: ManifestEntity) -> bool:
    """Whether create requests get a generated UUID key rather than sending one."""
    key = key_field(entity)
    return key is None or key.kind in ("id", "uuid")


def auto_timestamp_columns(entity: ManifestEntity) -> list[str]:
    declared = {f.name for f in entity.scalar_fields}
    return [name for name in AUTO_TIMESTAMP_COLUMNS if name not in declared]


def writable_fields(entity: ManifestEntity) -> list[ScalarField]:
    """Scalar fields a client may send on create/update (all but a server-assigned key)."""
    if not server_assigns_key(entity):
        return list(entity.scalar_fields)
    return [f for f in entity.scalar_fields if not is_primary_key(entity, f)]


def sql_literal(value: Any) -> str:
    """Render a manifest ``default`` as an SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    if not isinstance(value, str):
        value = json.dumps(value, ensure_ascii=False)
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def source_banner(manifest: Manifest) -> str:
    """One-line provenance note placed at the top of generated files."""
    return f"Generated from the {manifest.name!r} manifest ({manifest.id} v{manifest.version})."
