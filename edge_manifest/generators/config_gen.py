"""Application config generation.

Emits a Python module embedding the validated manifest (``MANIFEST``) and a
summary of every entity's table, primary key and API route (``APP_CONFIG``).
"""

from __future__ import annotations

import pprint

from edge_manifest.generators.common import source_banner
from edge_manifest.generators.templates import TemplateRenderer, default_renderer
from edge_manifest.manifest.models import Manifest


async def generate_config(manifest: Manifest, renderer: TemplateRenderer | None = None) -> str:
    renderer = renderer or default_renderer()
    entities = [
        {
            "name": entity.name,
            "table": entity.table_name,
            "primary_key": entity.primary_key,
            "route": f"/api/{entity.route_segment}",
        }
        for entity in manifest.entities
    ]
    context = {
        "banner": source_banner(manifest),
        "manifest_literal": pprint.pformat(manifest.to_dict(), indent=1, width=88, sort_dicts=False),
        "entities": entities,
    }
    return renderer.render("app_config.py.j2", context)
