"""SQL migration generation (SQLite dialect).

Generates:
- ``migrations`` -- ``CREATE TABLE`` / ``CREATE UNIQUE INDEX`` statements
- ``rollback``   -- the matching ``DROP`` statements, in reverse order

The migration name is derived from a timestamp.  Pass the same ``timestamp``
to get byte-identical output across runs.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from edge_manifest.generators.common import (
    auto_timestamp_columns,
    is_primary_key,
    is_required,
    needs_synthetic_key,
    sql_literal,
)
from edge_manifest.manifest.models import Manifest, ManifestEntity, ScalarField


_SQL_TYPE_MAP: dict[str, str] = {
    "id": "TEXT",
    "uuid": "TEXT",
    "string": "TEXT",
    "number": "REAL",
    "boolean": "INTEGER",
    "date": "TEXT",
    "json": "TEXT",
}


class MigrationMetadata(BaseModel):
    """Summary of a generated migration."""
    version: str = Field(..., description="Digits-only migration version, e.g. '20260101120000'")
    timestamp: str = Field(..., description="ISO-8601 generation time")
    entities: list[str] = Field(default_factory=list, description="Entity names covered")


def _resolve_timestamp(timestamp: datetime | None) -> datetime:
    if timestamp is None:
        return datetime.now(timezone.utc).replace(microsecond=0)
    return timestamp


def migration_version(timestamp: datetime) -> str:
    """Format *timestamp* as ``YYYYMMDDHHMMSS``."""
    return timestamp.strftime("%Y%m%d%H%M%S")


def generate_migration_metadata(
    manifest: Manifest, timestamp: datetime | None = None
) -> MigrationMetadata:
    ts = _resolve_timestamp(timestamp)
    return MigrationMetadata(
        version=migration_version(ts),
        timestamp=ts.isoformat(),
        entities=[e.name for e in manifest.entities],
    )


def _header(manifest: Manifest, ts: datetime, suffix: str) -> list[str]:
    return [
        f"-- Migration: {migration_version(ts)}_{suffix}",
        f"-- Manifest: {manifest.id} v{manifest.version}",
        f"-- Timestamp: {ts.isoformat()}",
    ]


# ---------------------------------------------------------------------------
# Forward migration
# ---------------------------------------------------------------------------


async def generate_migrations(manifest: Manifest, timestamp: datetime | None = None) -> str:
    """Generate the initial schema migration."""
    ts = _resolve_timestamp(timestamp)
    lines = _header(manifest, ts, "init")

    for entity in manifest.entities:
        lines.append("")
        lines.extend(_build_create_table(entity))
        for statement in _build_indexes(entity):
            lines.append(statement)

    lines.append("")
    return "\n".join(lines)


def _build_column(entity: ManifestEntity, field: ScalarField) -> str:
    parts = [field.name, _SQL_TYPE_MAP[field.kind]]
    if is_primary_key(entity, field):
        parts.append("PRIMARY KEY NOT NULL")
        return " ".join(parts)

    if is_required(field) and not field.nullable:
        parts.append("NOT NULL")
    if field.unique:
        parts.append("UNIQUE")
    if field.has_default:
        parts.append(f"DEFAULT {sql_literal(field.default)}")
    return " ".join(parts)


def _build_create_table(entity: ManifestEntity) -> list[str]:
    columns: list[str] = []
    if needs_synthetic_key(entity):
        columns.append("id TEXT PRIMARY KEY NOT NULL")
    columns.extend(_build_column(entity, f) for f in entity.scalar_fields)
    columns.extend(f"{name} TEXT DEFAULT CURRENT_TIMESTAMP" for name in auto_timestamp_columns(entity))

    body = ",\n".join(f"  {c}" for c in columns)
    return [f"CREATE TABLE IF NOT EXISTS {entity.table_name} (", body, ");"]


def _unique_fields(entity: ManifestEntity) -> list[ScalarField]:
    return [
        f for f in entity.scalar_fields
        if f.unique and not is_primary_key(entity, f)
    ]


def _index_name(entity: ManifestEntity, field: ScalarField) -> str:
    return f"idx_{entity.table_name}_{field.name}"


def _build_indexes(entity: ManifestEntity) -> list[str]:
    return [
        f"CREATE UNIQUE INDEX IF NOT EXISTS {_index_name(entity, f)} "
        f"ON {entity.table_name} ({f.name});"
        for f in _unique_fields(entity)
    ]


# ---------------------------------------------------------------------------
# Rollback
# ---------------------------------------------------------------------------


async def generate_rollback(manifest: Manifest, timestamp: datetime | None = None) -> str:
    """Generate statements undoing :func:`generate_migrations`."""
    ts = _resolve_timestamp(timestamp)
    lines = _header(manifest, ts, "rollback")
    lines.append("")

    for entity in reversed(manifest.entities):
        for field in _unique_fields(entity):
            lines.append(f"DROP INDEX IF EXISTS {_index_name(entity, field)};")
        lines.append(f"DROP TABLE IF EXISTS {entity.table_name};")

    lines.append("")
    return "\n".join(lines)
