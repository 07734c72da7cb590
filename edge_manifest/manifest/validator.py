"""Manifest validation.

Validation runs in two passes with deliberately different failure strategies:

1. Structural validation against :data:`MANIFEST_SCHEMA` collects *every*
   issue so a hand-authored manifest can be fixed in one round trip.
2. :func:`ensure_unique_names` checks the invariants the combinators cannot
   express (entity/field name uniqueness, relation targets) and stops at the
   *first* violation.

Both passes report through a single :class:`ManifestValidationError` whose
message is the multi-line report::

    Manifest validation failed:
    - $.entities[0].fields[0].kind: Missing required property
    - $.entities[1].name: Expected a non-empty string
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Sequence
from typing import Any

from edge_manifest.manifest.models import Manifest
from edge_manifest.manifest.schema import MANIFEST_SCHEMA
from edge_manifest.manifest.validation import Issue, PathKey, safe_parse


HEADER = "Manifest validation failed:"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][0-9A-Za-z_$]*$")
_DIGITS_RE = re.compile(r"^\d+$")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ManifestValidationError(ValueError):
    """Raised when a manifest is structurally invalid or breaks an invariant.

    Attributes:
        issues: The issues behind the failure (one for fail-fast checks).
        code: ``schema_violation``, ``duplicate_entity_name``,
            ``duplicate_field_name`` or ``unknown_relation_target``.
    """

    def __init__(self, issues: Sequence[Issue], code: str = "schema_violation") -> None:
        self.issues = list(issues)
        self.code = code
        super().__init__(format_manifest_error(self.issues))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_path(path: Iterable[PathKey]) -> str:
    """Render an issue path as ``$.entities[0].fields[1].kind``."""
    out = "$"
    for key in path:
        if isinstance(key, int):
            out += f"[{key}]"
        elif isinstance(key, str):
            if _DIGITS_RE.match(key):
                out += f"[{key}]"
            elif _IDENTIFIER_RE.match(key):
                out += f".{key}"
            else:
                out += f"[{json.dumps(key, ensure_ascii=False)}]"
        else:
            out += f"[{json.dumps(str(key), ensure_ascii=False)}]"
    return out


def format_manifest_error(issues: Iterable[Issue]) -> str:
    lines = [HEADER]
    for issue in issues:
        message = issue.message if isinstance(issue.message, str) else "Invalid value"
        lines.append(f"- {format_path(issue.path)}: {message}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Invariant pass
# ---------------------------------------------------------------------------


def _quote(name: str) -> str:
    return json.dumps(name, ensure_ascii=False)


def ensure_unique_names(manifest: Manifest) -> None:
    """Check name uniqueness and relation targets, failing on the first violation."""
    known_entities = {entity.name for entity in manifest.entities}
    seen_entities: dict[str, int] = {}

    for entity_index, entity in enumerate(manifest.entities):
        previous = seen_entities.get(entity.name)
        if previous is not None:
            raise ManifestValidationError(
                [Issue(
                    message=(
                        f"Duplicate entity name {_quote(entity.name)} "
                        f"(already used at $.entities[{previous}].name)"
                    ),
                    path=("entities", entity_index, "name"),
                )],
                code="duplicate_entity_name",
            )
        seen_entities[entity.name] = entity_index

        seen_fields: dict[str, int] = {}
        for field_index, field in enumerate(entity.fields):
            previous_field = seen_fields.get(field.name)
            if previous_field is not None:
                raise ManifestValidationError(
                    [Issue(
                        message=(
                            f"Duplicate field name {_quote(field.name)} (already used at "
                            f"$.entities[{entity_index}].fields[{previous_field}].name)"
                        ),
                        path=("entities", entity_index, "fields", field_index, "name"),
                    )],
                    code="duplicate_field_name",
                )
            seen_fields[field.name] = field_index

            if field.is_relation and field.relation.entity not in known_entities:
                raise ManifestValidationError(
                    [Issue(
                        message=f"Unknown entity {_quote(field.relation.entity)}",
                        path=("entities", entity_index, "fields", field_index, "relation", "entity"),
                    )],
                    code="unknown_relation_target",
                )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def validate_manifest(raw: Any) -> Manifest:
    """Validate an already-parsed manifest value and return the typed manifest.

    Args:
        raw: The decoded manifest (dict from JSON/YAML, or a ``Manifest``).

    Returns:
        A frozen :class:`Manifest`.

    Raises:
        ManifestValidationError: If the manifest is invalid.
    """
    if isinstance(raw, Manifest):
        raw = raw.to_dict()

    result = safe_parse(MANIFEST_SCHEMA, raw)
    if not result.success:
        raise ManifestValidationError(result.issues)

    manifest = Manifest.model_validate(result.output)
    ensure_unique_names(manifest)
    return manifest
