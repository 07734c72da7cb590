"""Manifest discovery, loading and the config parser.

A manifest can be authored as JSON, YAML or a Python module exposing a
``MANIFEST`` (or ``manifest``) mapping.  :func:`find_manifest` locates one
below a project root; :class:`ConfigParser` loads, validates and merges
runtime overrides into it.
"""

from __future__ import annotations

import asyncio
import importlib.util
import json
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from edge_manifest.manifest.models import Manifest
from edge_manifest.manifest.validator import ManifestValidationError, validate_manifest


# Checked in this order; each name is looked up at the root first, then
# breadth-first through sub-directories.
MANIFEST_CANDIDATES: tuple[str, ...] = (
    "manifest.py",
    ".manifest.json",
    ".manifest.yaml",
    ".manifest.yml",
    "manifest.yaml",
    "manifest.yml",
    "manifest.json",
)

IGNORED_DIRS = frozenset({".git", "node_modules", "dist", ".output", ".venv", "__pycache__"})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ManifestLoadError(Exception):
    """Raised when a manifest cannot be found, parsed or validated."""

    def __init__(self, reason: str, source_path: str | Path | None = None) -> None:
        self.reason = reason
        self.source_path = Path(source_path) if source_path is not None else None
        origin = f" from {self.source_path}" if self.source_path is not None else ""
        super().__init__(f"Failed to load manifest{origin}:\n- {reason}")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _find_by_name(root: Path, file_name: str) -> Path | None:
    queue: deque[Path] = deque([root])
    while queue:
        directory = queue.popleft()
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                if entry.name not in IGNORED_DIRS:
                    queue.append(entry)
            elif entry.is_file() and entry.name == file_name:
                return entry
    return None


def find_manifest(root: str | Path) -> Path:
    """Locate the manifest file for the project rooted at *root*.

    Raises:
        ManifestLoadError: If none of :data:`MANIFEST_CANDIDATES` exists.
    """
    root = Path(root)
    for candidate in MANIFEST_CANDIDATES:
        at_root = root / candidate
        if at_root.is_file():
            return at_root
        found = _find_by_name(root, candidate)
        if found is not None:
            return found

    looked_for = ", ".join(json.dumps(c) for c in MANIFEST_CANDIDATES)
    raise ManifestLoadError(f"No manifest found. Looked for: {looked_for} (starting at {root})")


# ---------------------------------------------------------------------------
# Source loading
# ---------------------------------------------------------------------------


def _load_python_manifest(path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(f"_edge_manifest_source_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ManifestLoadError("Cannot import manifest module", path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ManifestLoadError(f"Cannot import manifest module: {type(exc).__name__}: {exc}", path) from exc

    for attr in ("MANIFEST", "manifest"):
        if hasattr(module, attr):
            return getattr(module, attr)
    raise ManifestLoadError("Manifest module defines neither MANIFEST nor manifest", path)


def load_manifest_source(path: str | Path) -> Any:
    """Read the raw (unvalidated) manifest value stored at *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ManifestLoadError: On an unsupported extension, an unreadable or
            non-UTF-8 file, a syntax error or a failing manifest module.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".py":
        if not path.is_file():
            raise FileNotFoundError(f"No such file: {path}")
        return _load_python_manifest(path)

    if suffix not in (".json", ".yaml", ".yml"):
        raise ManifestLoadError(f"Unsupported manifest extension: {suffix or path.name}", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestLoadError(f"Cannot read manifest: {exc}", path) from exc
    if suffix == ".json":
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestLoadError(f"Invalid JSON syntax: {exc}", path) from exc
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ManifestLoadError(f"Invalid YAML syntax: {exc}", path) from exc


# ---------------------------------------------------------------------------
# Config parser
# ---------------------------------------------------------------------------


class LoadedManifest(BaseModel):
    """A validated manifest plus where and when it was loaded."""

    model_config = ConfigDict(frozen=True)

    manifest: Manifest
    source_path: Path | None = None
    runtime_overrides: dict[str, Any] | None = None
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def merge_runtime_overrides(
    manifest: Manifest, runtime_overrides: dict[str, Any] | None
) -> Manifest:
    """Return a copy of *manifest* with *runtime_overrides* merged into ``generators``.

    ``default_region`` is stored as ``defaultRegion``, ``generator_flags`` is
    flattened into the mapping and every other key is copied as is.
    """
    if not runtime_overrides:
        return manifest

    generators = dict(manifest.generators or {})
    for key, value in runtime_overrides.items():
        if key == "default_region":
            if value:
                generators["defaultRegion"] = value
        elif key == "generator_flags":
            generators.update(value or {})
        else:
            generators[key] = value
    return manifest.model_copy(update={"generators": generators})


class ConfigParser:
    """Loads manifests and remembers the most recent result."""

    def __init__(self) -> None:
        self._config: LoadedManifest | None = None

    @property
    def config(self) -> LoadedManifest | None:
        return self._config

    async def load_from_file(
        self,
        path: str | Path,
        runtime_overrides: dict[str, Any] | None = None,
    ) -> LoadedManifest:
        """Load, validate and merge the manifest stored at *path*.

        ``FileNotFoundError`` propagates unchanged; every other failure is
        reported as :class:`ManifestLoadError` naming *path*.
        """
        path = Path(path)
        raw = await asyncio.to_thread(load_manifest_source, path)
        return self.load_from_object(raw, runtime_overrides, source_path=path)

    def load_from_object(
        self,
        raw: Any,
        runtime_overrides: dict[str, Any] | None = None,
        source_path: str | Path | None = None,
    ) -> LoadedManifest:
        try:
            manifest = validate_manifest(raw)
        except ManifestValidationError as exc:
            raise ManifestLoadError(str(exc), source_path) from exc

        result = LoadedManifest(
            manifest=merge_runtime_overrides(manifest, runtime_overrides),
            source_path=Path(source_path) if source_path is not None else None,
            runtime_overrides=runtime_overrides or None,
        )
        self._config = result
        return result
