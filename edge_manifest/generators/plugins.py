"""Custom generator plugins.

A plugin is any object with ``name``, ``output_path`` and an async
``generate(manifest, options)``; it may also define ``validate(manifest)``
to opt out of manifests it cannot handle.  Subclassing
:class:`GeneratorPlugin` is the convenient way to get all of that.

Plugins live in an explicit :class:`GeneratorRegistry` owned by the caller::

    registry = GeneratorRegistry()
    registry.register(ApiDocsPlugin())
    results = await run_all_generators(registry, manifest)
"""

from __future__ import annotations

from typing import Any, Protocol, Union, runtime_checkable

from edge_manifest.generators.common import is_required
from edge_manifest.generators.templates import TemplateRenderer, default_renderer
from edge_manifest.manifest.models import Manifest
from edge_manifest.utils import print_warning


PluginResult = Union[str, dict[str, str]]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GeneratorPluginError(Exception):
    """Base class for plugin registry failures."""


class PluginRegistrationError(GeneratorPluginError):
    """Raised when registering a plugin whose name is already taken."""


class PluginNotFoundError(GeneratorPluginError):
    """Raised when running a plugin that is not registered."""


class PluginValidationError(GeneratorPluginError):
    """Raised when a plugin's ``validate`` gate rejects the manifest."""


# ---------------------------------------------------------------------------
# Plugin interface
# ---------------------------------------------------------------------------


@runtime_checkable
class SupportsGenerate(Protocol):
    name: str
    output_path: str

    async def generate(
        self, manifest: Manifest, options: dict[str, Any] | None = None
    ) -> PluginResult: ...


class GeneratorPlugin:
    """Base class for generator plugins.

    Subclasses set ``name`` and ``output_path`` and implement :meth:`generate`.
    ``output_path`` is relative to the output directory; a plugin returning a
    path map has its files written beneath it.
    """

    name: str = ""
    description: str = ""
    output_path: str = ""

    async def generate(
        self, manifest: Manifest, options: dict[str, Any] | None = None
    ) -> PluginResult:
        raise NotImplementedError

    def validate(self, manifest: Manifest) -> bool:
        return True


def _passes_gate(plugin: SupportsGenerate, manifest: Manifest) -> bool:
    validate = getattr(plugin, "validate", None)
    return validate is None or bool(validate(manifest))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class GeneratorRegistry:
    """Name-keyed plugin store, kept in registration order."""

    def __init__(self) -> None:
        self._plugins: dict[str, SupportsGenerate] = {}

    def register(self, plugin: SupportsGenerate) -> None:
        if plugin.name in self._plugins:
            raise PluginRegistrationError(
                f'Generator plugin "{plugin.name}" is already registered'
            )
        self._plugins[plugin.name] = plugin

    def unregister(self, name: str) -> bool:
        """Remove *name*; returns whether it was registered."""
        return self._plugins.pop(name, None) is not None

    def get(self, name: str) -> SupportsGenerate | None:
        return self._plugins.get(name)

    def has(self, name: str) -> bool:
        return name in self._plugins

    def list(self) -> list[str]:
        return list(self._plugins)

    def get_all(self) -> list[SupportsGenerate]:
        return list(self._plugins.values())

    def clear(self) -> None:
        self._plugins.clear()


# ---------------------------------------------------------------------------
# Running plugins
# ---------------------------------------------------------------------------


async def run_generator(
    registry: GeneratorRegistry,
    name: str,
    manifest: Manifest,
    options: dict[str, Any] | None = None,
) -> PluginResult:
    """Run one registered plugin.

    Raises:
        PluginNotFoundError: If *name* is not registered.
        PluginValidationError: If the plugin's gate rejects *manifest*.
    """
    plugin = registry.get(name)
    if plugin is None:
        raise PluginNotFoundError(f'Generator plugin "{name}" is not registered')
    if not _passes_gate(plugin, manifest):
        raise PluginValidationError(f'Manifest validation failed for generator "{name}"')
    return await plugin.generate(manifest, options)


async def run_all_generators(
    registry: GeneratorRegistry,
    manifest: Manifest,
    options: dict[str, Any] | None = None,
) -> dict[str, PluginResult]:
    """Run every registered plugin in registration order.

    Plugins whose gate rejects *manifest* are skipped with a warning.
    """
    results: dict[str, PluginResult] = {}
    for plugin in registry.get_all():
        if not _passes_gate(plugin, manifest):
            print_warning(f'Skipping generator "{plugin.name}" - validation failed')
            continue
        results[plugin.name] = await plugin.generate(manifest, options)
    return results


# ---------------------------------------------------------------------------
# Bundled plugins
# ---------------------------------------------------------------------------


class ApiDocsPlugin(GeneratorPlugin):
    """Markdown listing of the generated CRUD endpoints."""

    name = "api-docs"
    description = "Generates API documentation in Markdown format"
    output_path = "docs/api.md"

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or default_renderer()

    async def generate(
        self, manifest: Manifest, options: dict[str, Any] | None = None
    ) -> str:
        context = {
            "manifest_name": manifest.name,
            "manifest_version": manifest.version,
            "entities": [
                {
                    "name": entity.name,
                    "plural": entity.route_segment,
                    "fields": [
                        {"name": f.name, "kind": f.kind, "required": is_required(f)}
                        for f in entity.scalar_fields
                    ],
                }
                for entity in manifest.entities
            ],
        }
        return self.renderer.render("api_docs.md.j2", context)

    def validate(self, manifest: Manifest) -> bool:
        return len(manifest.entities) > 0
