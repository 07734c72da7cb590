"""Jinja2 environment for the bundled ``.j2`` templates.

Generators render to strings only; writing files is left to
:mod:`edge_manifest.workspace`.  Missing context variables raise
``jinja2.UndefinedError`` so a typo in a template fails loudly instead of
producing half-empty source files.

Output is not autoescaped: most templates emit Python, SQL or JavaScript.
HTML templates escape user-supplied names explicitly with ``| e``.
"""

from __future__ import annotations

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

from jinja2 import Environment, FileSystemLoader, StrictUndefined

BUNDLED_TEMPLATES = Path(__file__).parent / "templates"

_SEPARATORS = re.compile(r"[-_\s]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def pascal_case(value: str) -> str:
    """``order-item`` / ``order_item`` -> ``OrderItem``."""
    return "".join(part[:1].upper() + part[1:] for part in _SEPARATORS.split(value) if part)


def snake_case(value: str) -> str:
    """``displayName`` / ``HTTPServer`` / ``blog-post`` -> ``display_name`` etc."""
    return re.sub(r"[-\s]+", "_", _CAMEL_BOUNDARY.sub("_", value)).lower()


def js_string(value: Any) -> str:
    """Quote *value* as a JavaScript (JSON) string literal."""
    return json.dumps(str(value), ensure_ascii=False)


FILTERS: dict[str, Callable[[Any], str]] = {
    "pascal_case": pascal_case,
    "snake_case": snake_case,
    "pyrepr": repr,
    "jsstr": js_string,
}


class TemplateRenderer:
    """Renders templates found under *template_dir* (the bundled set by default)."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else BUNDLED_TEMPLATES
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(FILTERS)

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render *template_path* (relative to the template dir, e.g. ``"routes.py.j2"``)."""
        return self.env.get_template(template_path).render(**context)

    def render_string(self, source: str, context: dict[str, Any]) -> str:
        return self.env.from_string(source).render(**context)

    def list_templates(self, prefix: str = "") -> list[str]:
        """Sorted ``.j2`` template names, optionally limited to the *prefix* directory."""
        names = self.env.list_templates(extensions=["j2"])
        if not prefix:
            return names
        folder = prefix.rstrip("/") + "/"
        return [name for name in names if name.startswith(folder)]


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Renderer over the bundled templates, shared by all generators."""
    return TemplateRenderer()
