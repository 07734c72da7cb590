"""edge-manifest configuration.

Typed configuration for the ``edge-manifest`` tool.  All settings use a
Pydantic v2 model so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global edge-manifest configuration.

    Instances are typically created once by the CLI entry point and then
    passed to :func:`edge_manifest.workspace.setup_workspace`.
    """

    manifest_path: Path | None = Field(
        default=None,
        description="Explicit manifest file; discovered from the working directory when unset",
    )
    output_dir: Path = Field(default=Path(".output"))
    force: bool = Field(default=False, description="Overwrite existing generated files")
    skip: list[str] = Field(default_factory=list, description="Generator groups to skip")
    default_region: str | None = Field(default=None)
    generator_flags: dict[str, Any] = Field(default_factory=dict)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def migrations_dir(self) -> Path:
        """Directory holding the generated SQL migrations."""
        return self.output_dir / "migrations"

    @property
    def admin_dir(self) -> Path:
        """Root of the generated admin UI."""
        return self.output_dir / "admin"

    # ------------------------------------------------------------------
    # Runtime overrides
    # ------------------------------------------------------------------

    def runtime_overrides(self) -> dict[str, Any]:
        """Settings merged into ``manifest.generators`` by the config parser."""
        overrides: dict[str, Any] = {}
        if self.default_region:
            overrides["default_region"] = self.default_region
        if self.generator_flags:
            overrides["generator_flags"] = dict(self.generator_flags)
        return overrides

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<output_dir>/edge-manifest.json``.

        Returns:
            The path where the file was written.
        """
        target = path or (self.output_dir / "edge-manifest.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            EDGE_MANIFEST_PATH, EDGE_MANIFEST_OUT_DIR, EDGE_MANIFEST_FORCE,
            EDGE_MANIFEST_SKIP (comma separated), EDGE_MANIFEST_DEFAULT_REGION.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("EDGE_MANIFEST_PATH"):
            kwargs["manifest_path"] = Path(os.environ["EDGE_MANIFEST_PATH"])
        if os.environ.get("EDGE_MANIFEST_DEFAULT_REGION"):
            kwargs["default_region"] = os.environ["EDGE_MANIFEST_DEFAULT_REGION"]

        skip_str = os.environ.get("EDGE_MANIFEST_SKIP", "")
        skip = [s.strip() for s in skip_str.split(",") if s.strip()]

        return cls(
            output_dir=Path(os.environ.get("EDGE_MANIFEST_OUT_DIR", ".output")),
            force=os.environ.get("EDGE_MANIFEST_FORCE", "").strip().lower() in _TRUTHY,
            skip=skip,
            **kwargs,
        )
