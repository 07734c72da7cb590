"""``edge-manifest`` command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from edge_manifest.config import Config
from edge_manifest.generators.admin_gen import AdminNameConflictError
from edge_manifest.generators.dispatch import GENERATOR_GROUPS
from edge_manifest.loader import ConfigParser, ManifestLoadError, find_manifest
from edge_manifest.manifest.validator import ManifestValidationError
from edge_manifest.utils import print_error, print_success, print_warning
from edge_manifest.workspace import WorkspaceError, setup_workspace


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edge-manifest",
        description="Validate a data-model manifest and generate code from it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  edge-manifest validate\n"
            "  edge-manifest setup --manifest manifest.yaml --out-dir build\n"
            "  edge-manifest setup --skip admin,types --force\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup = subparsers.add_parser("setup", help="Generate artifacts from a manifest")
    setup.add_argument(
        "--manifest",
        default=None,
        help="Path to the manifest (discovered from the working directory if omitted)",
    )
    setup.add_argument(
        "--out-dir",
        default=None,
        help="Output directory (default: .output)",
    )
    setup.add_argument("--force", action="store_true", help="Overwrite existing files")
    setup.add_argument(
        "--skip",
        default="",
        help=f"Comma-separated generator groups to skip ({', '.join(GENERATOR_GROUPS)})",
    )

    validate = subparsers.add_parser("validate", help="Validate a manifest and exit")
    validate.add_argument("--manifest", default=None, help="Path to the manifest")

    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    updates: dict[str, object] = {}
    if args.manifest:
        updates["manifest_path"] = Path(args.manifest)
    if getattr(args, "out_dir", None):
        updates["output_dir"] = Path(args.out_dir)
    if getattr(args, "force", False):
        updates["force"] = True
    skip = [s.strip() for s in getattr(args, "skip", "").split(",") if s.strip()]
    if skip:
        updates["skip"] = skip
    return config.model_copy(update=updates)


async def _validate(config: Config) -> None:
    path = config.manifest_path or find_manifest(Path.cwd())
    loaded = await ConfigParser().load_from_file(path)
    manifest = loaded.manifest
    print_success(
        f"Manifest {manifest.id} v{manifest.version} is valid "
        f"({len(manifest.entities)} entities, source: {path})"
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``edge-manifest`` and ``python -m edge_manifest``."""
    args = _build_parser().parse_args(argv)
    config = _config_from_args(args)

    unknown = [group for group in config.skip if group not in GENERATOR_GROUPS]
    for group in unknown:
        print_warning(f"Ignoring unknown generator group: {group}")

    try:
        if args.command == "setup":
            asyncio.run(setup_workspace(config))
        else:
            asyncio.run(_validate(config))
    except (
        ManifestLoadError,
        ManifestValidationError,
        WorkspaceError,
        AdminNameConflictError,
        FileNotFoundError,
    ) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
