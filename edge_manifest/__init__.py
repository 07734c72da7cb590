"""edge-manifest: validate a declarative data-model manifest and generate code from it.

Quick usage::

    from edge_manifest import generate_all, validate_manifest

    manifest = validate_manifest(raw)
    output = await generate_all(manifest)
"""

from edge_manifest.generators import GeneratorOptions, GeneratorOutput, generate, generate_all
from edge_manifest.manifest import Manifest, ManifestValidationError, validate_manifest

__version__ = "0.1.0"

__all__ = [
    "GeneratorOptions",
    "GeneratorOutput",
    "Manifest",
    "ManifestValidationError",
    "generate",
    "generate_all",
    "validate_manifest",
]
