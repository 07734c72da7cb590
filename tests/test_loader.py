"""Unit tests for manifest discovery, loading and the config parser."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from edge_manifest.loader import (
    ConfigParser,
    LoadedManifest,
    ManifestLoadError,
    find_manifest,
    load_manifest_source,
    merge_runtime_overrides,
)
from edge_manifest.manifest import Manifest


pytestmark = pytest.mark.unit


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# find_manifest
# ---------------------------------------------------------------------------


class TestFindManifest:
    def test_root_file(self, project_dir: Path):
        assert find_manifest(project_dir) == project_dir / ".manifest.json"

    def test_candidate_order_beats_depth(self, tmp_path: Path):
        _write(tmp_path / "manifest.json", "{}")
        nested = _write(tmp_path / "config" / ".manifest.json", "{}")
        assert find_manifest(tmp_path) == nested

    def test_python_manifest_first(self, tmp_path: Path):
        _write(tmp_path / ".manifest.json", "{}")
        module = _write(tmp_path / "manifest.py", "MANIFEST = {}\n")
        assert find_manifest(tmp_path) == module

    def test_breadth_first(self, tmp_path: Path):
        _write(tmp_path / "a" / "b" / "manifest.yaml", "")
        shallow = _write(tmp_path / "z" / "manifest.yaml", "")
        assert find_manifest(tmp_path) == shallow

    def test_ignored_directories(self, tmp_path: Path):
        _write(tmp_path / "node_modules" / "pkg" / ".manifest.json", "{}")
        _write(tmp_path / ".output" / "manifest.yaml", "")
        found = _write(tmp_path / "src" / "manifest.yml", "")
        assert find_manifest(tmp_path) == found

    def test_not_found(self, tmp_path: Path):
        with pytest.raises(ManifestLoadError, match="No manifest found") as exc_info:
            find_manifest(tmp_path)
        assert '"manifest.py"' in str(exc_info.value)
        assert str(tmp_path) in str(exc_info.value)
        assert exc_info.value.source_path is None


# ---------------------------------------------------------------------------
# load_manifest_source
# ---------------------------------------------------------------------------


class TestLoadManifestSource:
    def test_json(self, tmp_path: Path, todo_manifest_dict: dict[str, Any]):
        path = _write(tmp_path / "m.json", json.dumps(todo_manifest_dict))
        assert load_manifest_source(path) == todo_manifest_dict

    def test_yaml(self, tmp_path: Path, todo_manifest_dict: dict[str, Any]):
        path = _write(tmp_path / "m.yaml", yaml.safe_dump(todo_manifest_dict))
        assert load_manifest_source(path) == todo_manifest_dict

    def test_python_upper_and_lower(self, tmp_path: Path):
        upper = _write(tmp_path / "upper" / "manifest.py", "MANIFEST = {'id': 'a'}\nmanifest = {'id': 'b'}\n")
        lower = _write(tmp_path / "lower" / "manifest.py", "manifest = {'id': 'b'}\n")
        assert load_manifest_source(upper) == {"id": "a"}
        assert load_manifest_source(lower) == {"id": "b"}

    def test_python_without_manifest(self, tmp_path: Path):
        path = _write(tmp_path / "manifest.py", "OTHER = 1\n")
        with pytest.raises(ManifestLoadError, match="neither MANIFEST nor manifest"):
            load_manifest_source(path)

    def test_unsupported_extension(self, tmp_path: Path):
        path = _write(tmp_path / "manifest.toml", "")
        with pytest.raises(ManifestLoadError, match="Unsupported manifest extension: .toml"):
            load_manifest_source(path)

    def test_invalid_json(self, tmp_path: Path):
        path = _write(tmp_path / "m.json", "{not json")
        with pytest.raises(ManifestLoadError, match="Invalid JSON syntax") as exc_info:
            load_manifest_source(path)
        assert exc_info.value.source_path == path
        assert str(exc_info.value).startswith(f"Failed to load manifest from {path}:\n- ")

    def test_invalid_yaml(self, tmp_path: Path):
        path = _write(tmp_path / "m.yaml", "key: [unclosed\n")
        with pytest.raises(ManifestLoadError, match="Invalid YAML syntax"):
            load_manifest_source(path)

    @pytest.mark.parametrize("name", ["missing.json", "missing.yaml", "missing.py"])
    def test_missing_file(self, tmp_path: Path, name: str):
        with pytest.raises(FileNotFoundError):
            load_manifest_source(tmp_path / name)

    def test_python_syntax_error(self, tmp_path: Path):
        path = _write(tmp_path / "manifest.py", "MANIFEST = {\n")
        with pytest.raises(ManifestLoadError, match="Cannot import manifest module: SyntaxError") as exc_info:
            load_manifest_source(path)
        assert exc_info.value.source_path == path

    def test_python_raising_at_import(self, tmp_path: Path):
        path = _write(tmp_path / "manifest.py", "import not_a_real_module_xyz\nMANIFEST = {}\n")
        with pytest.raises(ManifestLoadError, match="ModuleNotFoundError"):
            load_manifest_source(path)

    @pytest.mark.parametrize("name", ["m.json", "m.yaml"])
    def test_non_utf8_file(self, tmp_path: Path, name: str):
        path = tmp_path / name
        path.write_bytes(b'{"id": "\xff"}')
        with pytest.raises(ManifestLoadError, match="Cannot read manifest") as exc_info:
            load_manifest_source(path)
        assert exc_info.value.source_path == path

    def test_directory_with_manifest_suffix(self, tmp_path: Path):
        path = tmp_path / "manifest.json"
        path.mkdir()
        with pytest.raises(ManifestLoadError, match="Cannot read manifest"):
            load_manifest_source(path)


# ---------------------------------------------------------------------------
# merge_runtime_overrides
# ---------------------------------------------------------------------------


class TestMergeRuntimeOverrides:
    def test_no_overrides_returns_same(self, blog_manifest: Manifest):
        assert merge_runtime_overrides(blog_manifest, None) is blog_manifest
        assert merge_runtime_overrides(blog_manifest, {}) is blog_manifest

    def test_merges_into_generators(self, blog_manifest: Manifest):
        merged = merge_runtime_overrides(
            blog_manifest,
            {"default_region": "eu", "generator_flags": {"docs": True}, "theme": "dark"},
        )
        assert merged.generators == {"admin": True, "defaultRegion": "eu", "docs": True, "theme": "dark"}
        assert blog_manifest.generators == {"admin": True}

    def test_creates_generators(self, todo_manifest: Manifest):
        merged = merge_runtime_overrides(todo_manifest, {"default_region": "us"})
        assert merged.generators == {"defaultRegion": "us"}
        assert merged.to_dict()["generators"] == {"defaultRegion": "us"}
        assert todo_manifest.generators is None


# ---------------------------------------------------------------------------
# ConfigParser
# ---------------------------------------------------------------------------


class TestConfigParser:
    def test_initially_empty(self):
        assert ConfigParser().config is None

    @pytest.mark.asyncio
    async def test_load_from_file(self, project_dir: Path):
        parser = ConfigParser()
        path = project_dir / ".manifest.json"
        loaded = await parser.load_from_file(path, {"default_region": "eu"})

        assert isinstance(loaded, LoadedManifest)
        assert loaded.source_path == path
        assert loaded.manifest.id == "blog"
        assert loaded.manifest.generators["defaultRegion"] == "eu"
        assert loaded.runtime_overrides == {"default_region": "eu"}
        assert loaded.loaded_at.tzinfo is not None
        assert parser.config is loaded

    @pytest.mark.asyncio
    async def test_missing_file_propagates(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            await ConfigParser().load_from_file(tmp_path / "nope.json")

    @pytest.mark.asyncio
    async def test_validation_errors_are_wrapped(self, tmp_path: Path):
        path = _write(tmp_path / "bad.json", json.dumps({"id": "x", "name": "X", "entities": []}))
        with pytest.raises(ManifestLoadError) as exc_info:
            await ConfigParser().load_from_file(path)
        message = str(exc_info.value)
        assert message.startswith(f"Failed to load manifest from {path}:")
        assert "Manifest validation failed:" in message
        assert "$.version" in message

    def test_load_from_object(self, todo_manifest_dict: dict[str, Any]):
        loaded = ConfigParser().load_from_object(todo_manifest_dict)
        assert loaded.source_path is None
        assert loaded.runtime_overrides is None
        assert [e.name for e in loaded.manifest.entities] == ["Task"]

    def test_load_from_object_invalid(self):
        with pytest.raises(ManifestLoadError, match=r"Failed to load manifest:\n- "):
            ConfigParser().load_from_object("not a manifest")

    def test_loaded_manifest_is_frozen(self, todo_manifest_dict: dict[str, Any]):
        loaded = ConfigParser().load_from_object(todo_manifest_dict)
        with pytest.raises(ValidationError):
            loaded.source_path = Path("x")
