"""Shared pytest fixtures for the edge-manifest test suite.

Provides reusable fixtures for:
- Raw manifest dicts (a small blog and a single-entity manifest)
- Validated ``Manifest`` instances built from them
- A fixed timestamp for deterministic migration output
- Project directories containing manifest files
"""

from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from edge_manifest.manifest import Manifest, validate_manifest


# ---------------------------------------------------------------------------
# Raw manifests
# ---------------------------------------------------------------------------

_BLOG_MANIFEST: dict[str, Any] = {
    "id": "blog",
    "name": "Blog",
    "version": "1.0.0",
    "generators": {"admin": True},
    "entities": [
        {
            "name": "User",
            "fields": [
                {"name": "id", "kind": "id", "required": True},
                {"name": "email", "kind": "string", "required": True, "unique": True},
                {"name": "displayName", "kind": "string", "description": "Public name"},
                {"name": "isAdmin", "kind": "boolean", "default": False},
                {"name": "posts", "kind": "relation", "relation": {"entity": "Post", "type": "many"}},
            ],
        },
        {
            "name": "Post",
            "table": "blog_posts",
            "fields": [
                {"name": "id", "kind": "uuid", "required": True},
                {"name": "title", "kind": "string", "required": True},
                {"name": "body", "kind": "string"},
                {"name": "views", "kind": "number", "default": 0},
                {"name": "publishedAt", "kind": "date", "nullable": True},
                {"name": "extra", "kind": "json"},
                {
                    "name": "author",
                    "kind": "relation",
                    "relation": {"entity": "User", "field": "id", "type": "one"},
                },
            ],
        },
    ],
}

_TODO_MANIFEST: dict[str, Any] = {
    "id": "todo",
    "name": "Todo",
    "version": "1",
    "entities": [
        {
            "name": "Task",
            "fields": [
                {"name": "title", "kind": "string", "required": True},
                {"name": "done", "kind": "boolean", "default": True},
            ],
        },
    ],
}


@pytest.fixture
def blog_manifest_dict() -> dict[str, Any]:
    """Two entities with relations both ways, a table override and defaults."""
    return copy.deepcopy(_BLOG_MANIFEST)


@pytest.fixture
def todo_manifest_dict() -> dict[str, Any]:
    """One entity without an id/uuid field (gets a synthetic primary key)."""
    return copy.deepcopy(_TODO_MANIFEST)


# ---------------------------------------------------------------------------
# Validated manifests
# ---------------------------------------------------------------------------


@pytest.fixture
def blog_manifest(blog_manifest_dict: dict[str, Any]) -> Manifest:
    return validate_manifest(blog_manifest_dict)


@pytest.fixture
def todo_manifest(todo_manifest_dict: dict[str, Any]) -> Manifest:
    return validate_manifest(todo_manifest_dict)


@pytest.fixture
def fixed_timestamp() -> datetime:
    """Deterministic generation time for migration output."""
    return datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Project directories
# ---------------------------------------------------------------------------


@pytest.fixture
def project_dir(tmp_path: Path, blog_manifest_dict: dict[str, Any]) -> Path:
    """Temporary project whose root holds ``.manifest.json``."""
    root = tmp_path / "project"
    root.mkdir()
    (root / ".manifest.json").write_text(json.dumps(blog_manifest_dict), encoding="utf-8")
    return root
