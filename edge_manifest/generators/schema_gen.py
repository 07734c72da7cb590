"""Database schema and validation schema generation.

Generates:
- ``schema``              -- SQLAlchemy 2.0 declarative models, one class per entity
- ``validation_schemas``  -- Pydantic v2 models (read / create / update) per entity

Relation fields are not emitted as columns or model attributes.
"""

from __future__ import annotations

from edge_manifest.generators.common import (
    auto_timestamp_columns,
    is_primary_key,
    is_required,
    needs_synthetic_key,
    source_banner,
    sql_literal,
    writable_fields,
)
from edge_manifest.manifest.models import Manifest, ManifestEntity, ScalarField


# ---------------------------------------------------------------------------
# Kind mappings
# ---------------------------------------------------------------------------

_SQLALCHEMY_TYPE_MAP: dict[str, str] = {
    "id": "String",
    "uuid": "String",
    "string": "Text",
    "number": "Float",
    "boolean": "Boolean",
    "date": "Text",
    "json": "JSON",
}

_PYTHON_TYPE_MAP: dict[str, str] = {
    "id": "str",
    "uuid": "str",
    "string": "str",
    "number": "float",
    "boolean": "bool",
    "date": "datetime",
    "json": "Any",
}

# Columns store dates as ISO-8601 text.
_COLUMN_PYTHON_TYPE_MAP: dict[str, str] = {**_PYTHON_TYPE_MAP, "date": "str"}


# ---------------------------------------------------------------------------
# SQLAlchemy models
# ---------------------------------------------------------------------------


async def generate_sqlalchemy_schema(manifest: Manifest) -> str:
    """Generate a module of SQLAlchemy declarative models."""
    lines = [
        '"""SQLAlchemy models.',
        "",
        source_banner(manifest),
        '"""',
        "",
        "from __future__ import annotations",
        "",
        "from typing import Any, Optional",
        "",
        "from sqlalchemy import JSON, Boolean, Float, String, Text, text",
        "from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column",
        "",
        "",
        "class Base(DeclarativeBase):",
        "    pass",
    ]

    for entity in manifest.entities:
        lines.append("")
        lines.append("")
        lines.extend(_build_model(entity))

    lines.append("")
    return "\n".join(lines)


def _build_model(entity: ManifestEntity) -> list[str]:
    lines = [
        f"class {entity.name}(Base):",
        f"    __tablename__ = {entity.table_name!r}",
        "",
    ]
    if needs_synthetic_key(entity):
        lines.append('    id: Mapped[str] = mapped_column("id", String, primary_key=True)')

    for field in entity.scalar_fields:
        lines.append(f"    {_build_column(entity, field)}")

    for name in auto_timestamp_columns(entity):
        lines.append(
            f'    {name}: Mapped[Optional[str]] = mapped_column('
            f'"{name}", Text, server_default=text("CURRENT_TIMESTAMP"))'
        )
    return lines


def _build_column(entity: ManifestEntity, field: ScalarField) -> str:
    sa_type = _SQLALCHEMY_TYPE_MAP[field.kind]
    py_type = _COLUMN_PYTHON_TYPE_MAP[field.kind]

    if is_primary_key(entity, field):
        return f"{field.name}: Mapped[{py_type}] = mapped_column({field.name!r}, {sa_type}, primary_key=True)"

    nullable = not is_required(field) or field.nullable is True
    args = [repr(field.name), sa_type, f"nullable={nullable}"]
    if field.unique:
        args.append("unique=True")
    if field.has_default and field.kind in ("string", "number", "boolean"):
        args.append(f"server_default=text({sql_literal(field.default)!r})")

    annotation = f"Optional[{py_type}]" if nullable else py_type
    return f"{field.name}: Mapped[{annotation}] = mapped_column({', '.join(args)})"


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------


async def generate_pydantic_schemas(manifest: Manifest) -> str:
    """Generate Pydantic read/create/update models for every entity."""
    lines = [
        '"""Pydantic validation schemas.',
        "",
        source_banner(manifest),
        '"""',
        "",
        "from __future__ import annotations",
        "",
        "from datetime import datetime",
        "from typing import Any, Optional",
        "",
        "from pydantic import BaseModel",
    ]

    for entity in manifest.entities:
        lines.append("")
        lines.append("")
        lines.extend(_build_schema_class(f"{entity.name}Schema", entity.scalar_fields, partial=False))
        lines.append("")
        lines.append("")
        lines.extend(_build_schema_class(f"Create{entity.name}Schema", writable_fields(entity), partial=False))
        lines.append("")
        lines.append("")
        lines.extend(_build_schema_class(f"Update{entity.name}Schema", writable_fields(entity), partial=True))

    lines.append("")
    return "\n".join(lines)


def _build_schema_class(class_name: str, fields: list[ScalarField], *, partial: bool) -> list[str]:
    lines = [f"class {class_name}(BaseModel):"]
    if not fields:
        lines.append("    pass")
        return lines

    for field in fields:
        py_type = _PYTHON_TYPE_MAP[field.kind]
        if partial:
            lines.append(f"    {field.name}: Optional[{py_type}] = None")
        elif is_required(field) and not field.nullable:
            lines.append(f"    {field.name}: {py_type}")
        else:
            default = repr(field.default) if field.has_default else "None"
            lines.append(f"    {field.name}: Optional[{py_type}] = {default}")
    return lines
