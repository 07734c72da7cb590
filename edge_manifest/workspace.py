"""Write generated artifacts into an output directory.

Layout of the output directory::

    __init__.py              package marker (routes.py uses relative imports)
    models.py                SQLAlchemy models
    schemas.py               Pydantic request/response models
    types.ts                 TypeScript entity and API types
    routes.py                FastAPI CRUD routers
    request_schemas.json     JSON Schema request bodies
    app_config.py            application config embedding the manifest
    admin_assets.py          admin static files packed into a module
    admin/                   index.html, admin.js, styles.css
    admin/pages/<entity>/    list, create and detail pages
    admin/components/        form and table fragments
    migrations/              <YYYYMMDDHHMMSS>_init.sql, <YYYYMMDDHHMMSS>_rollback.sql
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from edge_manifest.config import Config
from edge_manifest.generators.dispatch import GeneratorOptions, GeneratorOutput, generate_all
from edge_manifest.generators.migration_gen import migration_version
from edge_manifest.generators.plugins import GeneratorRegistry, run_all_generators
from edge_manifest.loader import ConfigParser, find_manifest
from edge_manifest.utils import ensure_dir, print_success, write_text


PACKAGE_INIT = '"""Generated by edge-manifest."""\n'


class WorkspaceError(Exception):
    """Raised when the output directory cannot be written as requested."""


def _resolve(path: Path, cwd: Path) -> Path:
    return path if path.is_absolute() else cwd / path


def plan_files(
    output: GeneratorOutput, output_dir: Path, timestamp: datetime
) -> dict[Path, str]:
    """Map every non-empty artifact in *output* to its destination path."""
    files: dict[Path, str] = {}

    def add(relative: str, content: str) -> None:
        if content:
            files[output_dir / relative] = content

    add("models.py", output.schema)
    add("schemas.py", output.validation_schemas)
    add("types.ts", "\n\n".join(part for part in (output.types, output.api_types) if part))
    add("routes.py", output.routes)
    add("request_schemas.json", output.request_schemas)
    add("app_config.py", output.config)
    add("admin_assets.py", output.admin_assets_module)

    for relative, body in output.admin_assets.items():
        add(relative, body)
    for relative, body in output.admin.routes.items():
        add(f"admin/pages/{relative}", body)
    for relative, body in output.admin.components.items():
        add(f"admin/components/{relative}", body)

    version = migration_version(timestamp)
    add(f"migrations/{version}_init.sql", output.migrations)
    add(f"migrations/{version}_rollback.sql", output.rollback)

    if any(path.suffix == ".py" for path in files):
        files[output_dir / "__init__.py"] = PACKAGE_INIT
    return files


def check_contained(files: dict[Path, str], output_dir: Path) -> None:
    """Raise :class:`WorkspaceError` if any planned path leaves *output_dir*."""
    root = output_dir.resolve()
    for path in files:
        if not path.resolve().is_relative_to(root):
            raise WorkspaceError(f"Refusing to write outside the output directory: {path}")


def _plan_plugin_files(
    results: dict[str, str | dict[str, str]],
    registry: GeneratorRegistry,
    output_dir: Path,
) -> dict[Path, str]:
    files: dict[Path, str] = {}
    for name, result in results.items():
        plugin = registry.get(name)
        if plugin is None:
            continue
        target = output_dir / plugin.output_path
        if isinstance(result, str):
            files[target] = result
        else:
            for relative, body in result.items():
                files[target / relative] = body
    return files


async def setup_workspace(
    config: Config,
    registry: GeneratorRegistry | None = None,
    cwd: str | Path | None = None,
) -> list[Path]:
    """Load the manifest, run every generator and write the results.

    Args:
        config: Tool configuration (manifest location, output dir, skips).
        registry: Optional plugin registry; plugin output is written at each
            plugin's ``output_path``.
        cwd: Base for relative paths and manifest discovery. Defaults to the
            process working directory.

    Returns:
        The written file paths, in write order.

    Raises:
        WorkspaceError: If a target file exists and ``config.force`` is unset,
            or a planned path (from an entity name or a plugin's
            ``output_path``) resolves outside the output directory.  Nothing is
            written in either case.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    output_dir = _resolve(config.output_dir, base)

    manifest_path = (
        _resolve(config.manifest_path, base)
        if config.manifest_path is not None
        else find_manifest(base)
    )

    parser = ConfigParser()
    loaded = await parser.load_from_file(manifest_path, config.runtime_overrides() or None)
    manifest = loaded.manifest

    timestamp = datetime.now(timezone.utc).replace(microsecond=0)
    options = GeneratorOptions(skip=config.skip, output_dir=str(output_dir), timestamp=timestamp)
    output = await generate_all(manifest, options)

    files = plan_files(output, output_dir, timestamp)
    if registry is not None:
        plugin_results = await run_all_generators(registry, manifest)
        files.update(_plan_plugin_files(plugin_results, registry, output_dir))
    check_contained(files, output_dir)

    if not config.force:
        existing = [path for path in files if path.exists()]
        if existing:
            raise WorkspaceError(
                f"Refusing to overwrite existing file: {existing[0]} (use --force)"
            )

    ensure_dir(output_dir)
    written = [await write_text(path, content) for path, content in files.items()]

    print_success(
        f"Generated {len(written)} files in {output_dir} (manifest: {manifest_path})"
    )
    return written
