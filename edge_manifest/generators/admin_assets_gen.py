"""Static admin shell: index page, hash router script and stylesheet.

``generate_admin_assets_module`` additionally packs the same files into a
Python module so an application can serve them without touching disk.
"""

from __future__ import annotations

from edge_manifest.generators.common import source_banner
from edge_manifest.generators.templates import TemplateRenderer, default_renderer
from edge_manifest.manifest.models import Manifest


_CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
}


def content_type_for(path: str) -> str:
    for suffix, content_type in _CONTENT_TYPES.items():
        if path.endswith(suffix):
            return content_type
    return "application/octet-stream"


async def generate_admin_assets(
    manifest: Manifest, renderer: TemplateRenderer | None = None
) -> dict[str, str]:
    renderer = renderer or default_renderer()
    ctx = {
        "manifest_name": manifest.name,
        "entities": [
            {"name": e.name, "plural": e.route_segment} for e in manifest.entities
        ],
    }
    return {
        "admin/index.html": renderer.render("admin/index.html.j2", ctx),
        "admin/admin.js": renderer.render("admin/admin.js.j2", ctx),
        "admin/styles.css": renderer.render("admin/styles.css.j2", ctx),
    }


async def generate_admin_assets_module(
    manifest: Manifest, renderer: TemplateRenderer | None = None
) -> str:
    assets = await generate_admin_assets(manifest, renderer)

    lines = [
        '"""Admin static assets.',
        "",
        source_banner(manifest),
        '"""',
        "",
        "ADMIN_ASSETS = {",
    ]
    for path, body in assets.items():
        lines.append(f"    {'/' + path!r}: {{")
        lines.append(f"        'content_type': {content_type_for(path)!r},")
        lines.append(f"        'body': {body!r},")
        lines.append("    },")
    lines.append("}")
    lines.append("")
    return "\n".join(lines)
