"""TypeScript type generation for frontend consumers.

Generates:
- ``types``      -- entity interfaces, create/update input types, list query types
                    and the API response envelope
- ``api_types``  -- request/response interfaces for every CRUD endpoint
"""

from __future__ import annotations

from edge_manifest.generators.common import is_required, server_assigns_key
from edge_manifest.manifest.models import Manifest, ManifestEntity, ScalarField


_TS_TYPE_MAP: dict[str, str] = {
    "id": "string",
    "uuid": "string",
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "date": "Date",
    "json": "unknown",
}

_API_ENVELOPE = """export interface ApiResponse<T> {
  data: T;
  meta?: {
    total?: number;
    page?: number;
    limit?: number;
  };
  error?: string;
}

export interface ApiError {
  error: string;
  code?: string;
  details?: unknown;
}"""


async def generate_types(manifest: Manifest) -> str:
    """Generate entity interfaces, query types and the response envelope."""
    entity_types = "\n\n".join(_build_entity_types(e) for e in manifest.entities)
    query_types = "\n\n".join(_build_query_type(e) for e in manifest.entities)
    return f"{entity_types}\n\n{query_types}\n\n{_API_ENVELOPE}\n"


def _build_type_field(field: ScalarField) -> str:
    optional = "?" if not is_required(field) or field.nullable else ""
    return f"{field.name}{optional}: {_TS_TYPE_MAP[field.kind]};"


def _build_entity_types(entity: ManifestEntity) -> str:
    name = entity.name
    lines = [f"export interface {name} {{"]
    lines.extend(f"  {_build_type_field(f)}" for f in entity.scalar_fields)
    lines.append("  createdAt?: Date;")
    lines.append("  updatedAt?: Date;")
    lines.append("}")
    lines.append("")
    omitted = ["'createdAt'", "'updatedAt'"]
    if server_assigns_key(entity):
        omitted.insert(0, f"'{entity.primary_key}'")
    lines.append(f"export type Create{name}Input = Omit<{name}, {' | '.join(omitted)}>;")
    lines.append(f"export type Update{name}Input = Partial<Create{name}Input>;")
    return "\n".join(lines)


def _build_query_type(entity: ManifestEntity) -> str:
    sortable = [f"'{f.name}'" for f in entity.scalar_fields] + ["'createdAt'", "'updatedAt'"]
    return "\n".join([
        f"export interface List{entity.name}Query {{",
        "  page?: number;",
        "  limit?: number;",
        f"  sortBy?: {' | '.join(sortable)};",
        "  order?: 'asc' | 'desc';",
        "}",
    ])


# ---------------------------------------------------------------------------
# Endpoint types
# ---------------------------------------------------------------------------


async def generate_api_types(manifest: Manifest) -> str:
    """Generate request/response interfaces for each entity's CRUD endpoints."""
    return "\n\n".join(_build_endpoint_types(e) for e in manifest.entities) + "\n"


def _build_endpoint_types(entity: ManifestEntity) -> str:
    n = entity.name
    return f"""// {n} API endpoints
export interface Get{n}Request {{
  id: string;
}}

export interface Get{n}Response {{
  data: {n};
}}

export interface List{n}Request extends List{n}Query {{}}

export interface List{n}Response {{
  data: {n}[];
  meta: {{
    total: number;
    page: number;
    limit: number;
  }};
}}

export interface Create{n}Request {{
  data: Create{n}Input;
}}

export interface Create{n}Response {{
  data: {n};
}}

export interface Update{n}Request {{
  id: string;
  data: Update{n}Input;
}}

export interface Update{n}Response {{
  data: {n};
}}

export interface Delete{n}Request {{
  id: string;
}}

export interface Delete{n}Response {{
  data: {{ deleted: boolean }};
}}"""
