"""Manifest data model, structural validation and the manifest validator.

Quick usage::

    from edge_manifest.manifest import validate_manifest

    manifest = validate_manifest(json.loads(raw_text))
    for entity in manifest.entities:
        print(entity.name, entity.table_name)
"""

from edge_manifest.manifest.models import (
    Manifest,
    ManifestEntity,
    ManifestField,
    ManifestRelation,
    RelationField,
    ScalarField,
)
from edge_manifest.manifest.schema import MANIFEST_SCHEMA
from edge_manifest.manifest.validation import Issue, safe_parse
from edge_manifest.manifest.validator import (
    ManifestValidationError,
    ensure_unique_names,
    format_manifest_error,
    format_path,
    validate_manifest,
)

__all__ = [
    "Issue",
    "MANIFEST_SCHEMA",
    "Manifest",
    "ManifestEntity",
    "ManifestField",
    "ManifestRelation",
    "ManifestValidationError",
    "RelationField",
    "ScalarField",
    "ensure_unique_names",
    "format_manifest_error",
    "format_path",
    "safe_parse",
    "validate_manifest",
]
