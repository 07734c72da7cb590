"""Admin UI page generation.

For every entity, renders three pages (list, create, detail/edit) and two
reusable fragments (form, table).  Pages are plain HTML with a small inline
module script talking to the generated ``/api`` routes.

Returned paths are relative to the admin pages / components directories::

    AdminOutput(
        routes={"user/index.html": ..., "user/new.html": ..., "user/detail.html": ...},
        components={"user-form.html": ..., "user-table.html": ...},
    )
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from edge_manifest.generators.common import is_required, writable_fields
from edge_manifest.generators.templates import TemplateRenderer, default_renderer
from edge_manifest.manifest.models import Manifest, ManifestEntity, ScalarField


# Columns shown in list views.
LIST_COLUMN_LIMIT = 4

_INPUT_TYPE_MAP: dict[str, str] = {
    "id": "text",
    "uuid": "text",
    "string": "text",
    "number": "number",
    "boolean": "checkbox",
    "date": "datetime-local",
    "json": "textarea",
}


class AdminNameConflictError(ValueError):
    """Raised when two entity names map to the same admin page directory."""

    def __init__(self, name: str, other: str) -> None:
        self.name = name
        self.other = other
        super().__init__(
            f"Entity names {other!r} and {name!r} both produce admin pages under "
            f"{name.lower()!r}; rename one of them"
        )


class AdminOutput(BaseModel):
    """Generated admin pages and components keyed by relative path."""
    routes: dict[str, str] = Field(default_factory=dict)
    components: dict[str, str] = Field(default_factory=dict)


async def generate_admin_ui(
    manifest: Manifest, renderer: TemplateRenderer | None = None
) -> AdminOutput:
    """Render pages and components for every entity.

    Raises:
        AdminNameConflictError: If two entity names differ only in case.
    """
    renderer = renderer or default_renderer()
    output = AdminOutput()
    owners: dict[str, str] = {}

    for entity in manifest.entities:
        lower = entity.name.lower()
        if lower in owners:
            raise AdminNameConflictError(entity.name, owners[lower])
        owners[lower] = entity.name
        ctx = {"entity": _entity_context(entity)}

        output.routes[f"{lower}/index.html"] = renderer.render("admin_pages/list.html.j2", ctx)
        output.routes[f"{lower}/new.html"] = renderer.render("admin_pages/new.html.j2", ctx)
        output.routes[f"{lower}/detail.html"] = renderer.render("admin_pages/detail.html.j2", ctx)

        output.components[f"{lower}-form.html"] = renderer.render("admin_pages/form.html.j2", ctx)
        output.components[f"{lower}-table.html"] = renderer.render("admin_pages/table.html.j2", ctx)

    return output


def _field_context(field: ScalarField, *, editable: bool = True) -> dict[str, Any]:
    return {
        "name": field.name,
        "kind": field.kind,
        "input": _INPUT_TYPE_MAP[field.kind],
        "required": is_required(field),
        "default": field.default if field.has_default else None,
        "editable": editable,
    }


def _entity_context(entity: ManifestEntity) -> dict[str, Any]:
    writable = {f.name for f in writable_fields(entity)}
    return {
        "name": entity.name,
        "lower": entity.name.lower(),
        "plural": entity.route_segment,
        "primary_key": entity.primary_key,
        "columns": [f.name for f in entity.scalar_fields][:LIST_COLUMN_LIMIT],
        "form_fields": [_field_context(f) for f in writable_fields(entity)],
        "detail_fields": [
            _field_context(f, editable=f.name in writable) for f in entity.scalar_fields
        ],
    }
