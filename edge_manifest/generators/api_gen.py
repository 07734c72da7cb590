"""CRUD API generation.

Generates:
- ``routes``           -- a FastAPI module with one router per entity and a
                          ``create_api_router()`` factory mounting them under ``/api``
- ``request_schemas``  -- JSON Schema documents for create/update request bodies

The routes module imports the models and schemas emitted by
:mod:`edge_manifest.generators.schema_gen` (``models.py`` / ``schemas.py``).
"""

from __future__ import annotations

import json
from typing import Any

from edge_manifest.generators.common import (
    auto_timestamp_columns,
    is_required,
    key_field,
    server_assigns_key,
    source_banner,
    writable_fields,
)
from edge_manifest.generators.templates import TemplateRenderer, default_renderer
from edge_manifest.manifest.models import Manifest, ManifestEntity, ScalarField


# Path parameter type for keys the client supplies.
_KEY_PYTHON_TYPE_MAP: dict[str, str] = {"number": "float", "boolean": "bool"}

_JSON_SCHEMA_TYPE_MAP: dict[str, dict[str, Any]] = {
    "id": {"type": "string"},
    "uuid": {"type": "string", "format": "uuid"},
    "string": {"type": "string"},
    "number": {"type": "number"},
    "boolean": {"type": "boolean"},
    "date": {"type": "string", "format": "date-time"},
    "json": {},
}


async def generate_api_routes(
    manifest: Manifest, renderer: TemplateRenderer | None = None
) -> str:
    """Render the FastAPI routes module."""
    renderer = renderer or default_renderer()
    context = {
        "banner": source_banner(manifest),
        "entities": [_route_context(e) for e in manifest.entities],
    }
    return renderer.render("routes.py.j2", context)


def _route_context(entity: ManifestEntity) -> dict[str, Any]:
    lower = entity.name.lower()
    key = key_field(entity)
    return {
        "name": entity.name,
        "var": lower,
        "plural": entity.route_segment,
        "primary_key": entity.primary_key,
        "key_type": _KEY_PYTHON_TYPE_MAP.get(key.kind, "str") if key is not None else "str",
        "assigns_key": server_assigns_key(entity),
        "touches_updated_at": "updated_at" in auto_timestamp_columns(entity),
    }


# ---------------------------------------------------------------------------
# JSON Schema request bodies
# ---------------------------------------------------------------------------


async def generate_request_schemas(manifest: Manifest) -> str:
    """Generate JSON Schema documents for every entity's request bodies."""
    document = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": f"{manifest.name} request bodies",
        "entities": {
            entity.name: {
                "create": _object_schema(writable_fields(entity), partial=False),
                "update": _object_schema(writable_fields(entity), partial=True),
            }
            for entity in manifest.entities
        },
    }
    return json.dumps(document, indent=2, ensure_ascii=False, default=str) + "\n"


def _property_schema(field: ScalarField) -> dict[str, Any]:
    schema = dict(_JSON_SCHEMA_TYPE_MAP[field.kind])
    if field.nullable and "type" in schema:
        schema["type"] = [schema["type"], "null"]
    if field.description:
        schema["description"] = field.description
    if field.has_default:
        schema["default"] = field.default
    return schema


def _object_schema(fields: list[ScalarField], *, partial: bool) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {f.name: _property_schema(f) for f in fields},
        "additionalProperties": False,
    }
    required = [] if partial else [f.name for f in fields if is_required(f)]
    if required:
        schema["required"] = required
    return schema
