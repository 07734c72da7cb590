"""Tests for the Jinja2 TemplateRenderer and its custom filters."""

from __future__ import annotations

from pathlib import Path

import jinja2
import pytest

from edge_manifest.generators.templates import TemplateRenderer, default_renderer


pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


class TestFilters:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("user-profile", "UserProfile"), ("order_item", "OrderItem"), ("Post", "Post")],
    )
    def test_pascal_case(self, renderer: TemplateRenderer, value, expected):
        assert renderer.render_string("{{ v | pascal_case }}", {"v": value}) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("displayName", "display_name"), ("HTTPServer", "http_server"), ("blog-post", "blog_post")],
    )
    def test_snake_case(self, renderer: TemplateRenderer, value, expected):
        assert renderer.render_string("{{ v | snake_case }}", {"v": value}) == expected

    def test_pyrepr(self, renderer: TemplateRenderer):
        assert renderer.render_string("{{ v | pyrepr }}", {"v": "it's"}) == '"it\'s"'

    def test_jsstr(self, renderer: TemplateRenderer):
        assert renderer.render_string("{{ v | jsstr }}", {"v": 'say "hi"'}) == '"say \\"hi\\""'

    def test_no_autoescape(self, renderer: TemplateRenderer):
        assert renderer.render_string("{{ v }}", {"v": "<b>"}) == "<b>"
        assert renderer.render_string("{{ v | e }}", {"v": "<b>"}) == "&lt;b&gt;"


class TestTemplateRenderer:
    def test_undefined_variable_raises(self, renderer: TemplateRenderer):
        with pytest.raises(jinja2.UndefinedError):
            renderer.render_string("{{ missing }}", {})

    def test_list_templates(self, renderer: TemplateRenderer):
        names = renderer.list_templates()
        assert "routes.py.j2" in names
        assert "admin/index.html.j2" in names
        assert renderer.list_templates("admin_pages") == [
            "admin_pages/detail.html.j2",
            "admin_pages/form.html.j2",
            "admin_pages/list.html.j2",
            "admin_pages/new.html.j2",
            "admin_pages/table.html.j2",
        ]

    def test_list_templates_missing_prefix(self, renderer: TemplateRenderer):
        assert renderer.list_templates("nope") == []

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.txt.j2").write_text("Hello {{ name }}!\n", encoding="utf-8")
        custom = TemplateRenderer(tmp_path)
        assert custom.render("hello.txt.j2", {"name": "edge"}) == "Hello edge!\n"

    def test_default_renderer_is_shared(self):
        assert default_renderer() is default_renderer()
