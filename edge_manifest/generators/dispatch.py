"""Generator dispatch.

Runs the built-in generators by *group*.  Each group produces one or more
``GeneratorOutput`` keys:

=============  ====================================================
group          keys
=============  ====================================================
schema         ``schema``, ``validation_schemas``
types          ``types``, ``api_types``
routes         ``routes``, ``request_schemas``
config         ``config``
migrations     ``migrations``, ``rollback``
admin          ``admin``, ``admin_assets``, ``admin_assets_module``
=============  ====================================================
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from edge_manifest.generators.admin_assets_gen import (
    generate_admin_assets,
    generate_admin_assets_module,
)
from edge_manifest.generators.admin_gen import AdminOutput, generate_admin_ui
from edge_manifest.generators.api_gen import generate_api_routes, generate_request_schemas
from edge_manifest.generators.config_gen import generate_config
from edge_manifest.generators.migration_gen import generate_migrations, generate_rollback
from edge_manifest.generators.schema_gen import (
    generate_pydantic_schemas,
    generate_sqlalchemy_schema,
)
from edge_manifest.generators.type_gen import generate_api_types, generate_types
from edge_manifest.manifest.models import Manifest


GENERATOR_GROUPS: tuple[str, ...] = (
    "schema",
    "types",
    "routes",
    "config",
    "migrations",
    "admin",
)


class UnknownGeneratorTargetError(ValueError):
    """Raised when :func:`generate` is asked for a group that does not exist."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Unknown generator target: {target}")


@dataclass
class GeneratorOptions:
    skip: Iterable[str] = ()
    output_dir: str | None = None
    # Used by the migrations header; ``None`` means "now".
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        # A bare string is a comma-separated list, as on the command line.
        if isinstance(self.skip, str):
            self.skip = [name.strip() for name in self.skip.split(",") if name.strip()]


@dataclass
class GeneratorOutput:
    """Every artifact produced by :func:`generate_all`.

    Skipped groups keep their empty placeholders.
    """

    schema: str = ""
    validation_schemas: str = ""
    types: str = ""
    api_types: str = ""
    routes: str = ""
    request_schemas: str = ""
    config: str = ""
    migrations: str = ""
    rollback: str = ""
    admin: AdminOutput = field(default_factory=AdminOutput)
    admin_assets: dict[str, str] = field(default_factory=dict)
    admin_assets_module: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": self.schema,
            "validation_schemas": self.validation_schemas,
            "types": self.types,
            "api_types": self.api_types,
            "routes": self.routes,
            "request_schemas": self.request_schemas,
            "config": self.config,
            "migrations": self.migrations,
            "rollback": self.rollback,
            "admin": self.admin.model_dump(),
            "admin_assets": dict(self.admin_assets),
            "admin_assets_module": self.admin_assets_module,
        }


# ---------------------------------------------------------------------------
# Group runners
# ---------------------------------------------------------------------------

_GroupRunner = Callable[[Manifest, GeneratorOptions], Awaitable[dict[str, Any]]]


async def _run_schema(manifest: Manifest, options: GeneratorOptions) -> dict[str, Any]:
    return {
        "schema": await generate_sqlalchemy_schema(manifest),
        "validation_schemas": await generate_pydantic_schemas(manifest),
    }


async def _run_types(manifest: Manifest, options: GeneratorOptions) -> dict[str, Any]:
    return {
        "types": await generate_types(manifest),
        "api_types": await generate_api_types(manifest),
    }


async def _run_routes(manifest: Manifest, options: GeneratorOptions) -> dict[str, Any]:
    return {
        "routes": await generate_api_routes(manifest),
        "request_schemas": await generate_request_schemas(manifest),
    }


async def _run_config(manifest: Manifest, options: GeneratorOptions) -> dict[str, Any]:
    return {"config": await generate_config(manifest)}


async def _run_migrations(manifest: Manifest, options: GeneratorOptions) -> dict[str, Any]:
    return {
        "migrations": await generate_migrations(manifest, options.timestamp),
        "rollback": await generate_rollback(manifest, options.timestamp),
    }


async def _run_admin(manifest: Manifest, options: GeneratorOptions) -> dict[str, Any]:
    return {
        "admin": await generate_admin_ui(manifest),
        "admin_assets": await generate_admin_assets(manifest),
        "admin_assets_module": await generate_admin_assets_module(manifest),
    }


_GROUP_RUNNERS: dict[str, _GroupRunner] = {
    "schema": _run_schema,
    "types": _run_types,
    "routes": _run_routes,
    "config": _run_config,
    "migrations": _run_migrations,
    "admin": _run_admin,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def generate_all(
    manifest: Manifest, options: GeneratorOptions | None = None
) -> GeneratorOutput:
    """Run every generator group not listed in ``options.skip``.

    Unknown names in ``skip`` are ignored.
    """
    options = options or GeneratorOptions()
    skip = set(options.skip)

    output = GeneratorOutput()
    for group in GENERATOR_GROUPS:
        if group in skip:
            continue
        for key, value in (await _GROUP_RUNNERS[group](manifest, options)).items():
            setattr(output, key, value)
    return output


async def generate(
    manifest: Manifest,
    targets: Iterable[str],
    options: GeneratorOptions | None = None,
) -> dict[str, Any]:
    """Run only the requested groups, in the order given.

    The result holds exactly the keys of the requested groups.  Groups
    requested before an unknown target have already run when
    :class:`UnknownGeneratorTargetError` is raised; their output is discarded.
    """
    options = options or GeneratorOptions()
    output: dict[str, Any] = {}
    for target in targets:
        runner = _GROUP_RUNNERS.get(target)
        if runner is None:
            raise UnknownGeneratorTargetError(target)
        output.update(await runner(manifest, options))
    return output
