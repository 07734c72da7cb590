"""Tests for SQLAlchemy model and Pydantic schema generation."""

from __future__ import annotations

import pytest

from edge_manifest.generators.common import (
    auto_timestamp_columns,
    key_field,
    needs_synthetic_key,
    sql_literal,
    writable_fields,
)
from edge_manifest.generators.schema_gen import (
    generate_pydantic_schemas,
    generate_sqlalchemy_schema,
)
from edge_manifest.manifest import Manifest, validate_manifest


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


class TestCommonHelpers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "NULL"),
            (True, "1"),
            (False, "0"),
            (0, "0"),
            (2.5, "2.5"),
            ("it's", "'it''s'"),
            ({"a": 1}, '\'{"a": 1}\''),
        ],
    )
    def test_sql_literal(self, value, expected):
        assert sql_literal(value) == expected

    def test_writable_fields_exclude_primary_key(self, blog_manifest: Manifest):
        user = blog_manifest.get_entity("User")
        assert [f.name for f in writable_fields(user)] == ["email", "displayName", "isAdmin"]

    def test_writable_fields_without_key(self, todo_manifest: Manifest):
        assert [f.name for f in writable_fields(todo_manifest.entities[0])] == ["title", "done"]


# ---------------------------------------------------------------------------
# SQLAlchemy models
# ---------------------------------------------------------------------------


class TestSqlAlchemySchema:
    @pytest.mark.asyncio
    async def test_is_valid_python(self, blog_manifest: Manifest):
        code = await generate_sqlalchemy_schema(blog_manifest)
        compile(code, "models.py", "exec")

    @pytest.mark.asyncio
    async def test_one_class_per_entity(self, blog_manifest: Manifest):
        code = await generate_sqlalchemy_schema(blog_manifest)
        assert "class Base(DeclarativeBase):" in code
        assert "class User(Base):\n    __tablename__ = 'user'" in code
        assert "class Post(Base):\n    __tablename__ = 'blog_posts'" in code

    @pytest.mark.asyncio
    async def test_columns(self, blog_manifest: Manifest):
        code = await generate_sqlalchemy_schema(blog_manifest)
        assert "id: Mapped[str] = mapped_column('id', String, primary_key=True)" in code
        assert "email: Mapped[str] = mapped_column('email', Text, nullable=False, unique=True)" in code
        assert "displayName: Mapped[Optional[str]] = mapped_column('displayName', Text, nullable=True)" in code
        assert "server_default=text('0')" in code
        assert "publishedAt: Mapped[Optional[str]]" in code
        assert "extra: Mapped[Optional[Any]] = mapped_column('extra', JSON, nullable=True)" in code

    @pytest.mark.asyncio
    async def test_relations_are_not_columns(self, blog_manifest: Manifest):
        code = await generate_sqlalchemy_schema(blog_manifest)
        assert "posts:" not in code
        assert "author:" not in code

    @pytest.mark.asyncio
    async def test_timestamps_on_every_model(self, blog_manifest: Manifest):
        code = await generate_sqlalchemy_schema(blog_manifest)
        assert code.count('mapped_column("created_at", Text') == 2
        assert code.count('mapped_column("updated_at", Text') == 2

    @pytest.mark.asyncio
    async def test_synthetic_primary_key(self, todo_manifest: Manifest):
        code = await generate_sqlalchemy_schema(todo_manifest)
        assert 'id: Mapped[str] = mapped_column("id", String, primary_key=True)' in code
        assert "server_default=text('1')" in code

    @pytest.mark.asyncio
    async def test_banner(self, blog_manifest: Manifest):
        code = await generate_sqlalchemy_schema(blog_manifest)
        assert "Generated from the 'Blog' manifest (blog v1.0.0)." in code


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------


class TestPydanticSchemas:
    @pytest.mark.asyncio
    async def test_is_valid_python(self, blog_manifest: Manifest):
        code = await generate_pydantic_schemas(blog_manifest)
        compile(code, "schemas.py", "exec")

    @pytest.mark.asyncio
    async def test_three_classes_per_entity(self, blog_manifest: Manifest):
        code = await generate_pydantic_schemas(blog_manifest)
        for name in ("User", "Post"):
            assert f"class {name}Schema(BaseModel):" in code
            assert f"class Create{name}Schema(BaseModel):" in code
            assert f"class Update{name}Schema(BaseModel):" in code

    @pytest.mark.asyncio
    async def test_read_schema_fields(self, blog_manifest: Manifest):
        code = await generate_pydantic_schemas(blog_manifest)
        read = code.split("class UserSchema(BaseModel):")[1].split("class CreateUserSchema")[0]
        assert "    id: str\n" in read
        assert "    email: str\n" in read
        assert "    displayName: Optional[str] = None\n" in read
        assert "    isAdmin: Optional[bool] = False\n" in read

    @pytest.mark.asyncio
    async def test_create_schema_omits_primary_key(self, blog_manifest: Manifest):
        code = await generate_pydantic_schemas(blog_manifest)
        create = code.split("class CreateUserSchema(BaseModel):")[1].split("class UpdateUserSchema")[0]
        assert "    id:" not in create
        assert "    email: str\n" in create

    @pytest.mark.asyncio
    async def test_update_schema_is_partial(self, blog_manifest: Manifest):
        code = await generate_pydantic_schemas(blog_manifest)
        update = code.split("class UpdatePostSchema(BaseModel):")[1]
        assert "    title: Optional[str] = None\n" in update
        assert "    publishedAt: Optional[datetime] = None\n" in update


# ---------------------------------------------------------------------------
# Declared key and timestamp fields
# ---------------------------------------------------------------------------


def _item_manifest(fields: list[dict]) -> Manifest:
    return validate_manifest(
        {"id": "inv", "name": "Inventory", "version": "1", "entities": [{"name": "Item", "fields": fields}]}
    )


class TestDeclaredColumns:
    @pytest.mark.asyncio
    async def test_numeric_id_is_client_supplied_key(self):
        manifest = _item_manifest([{"name": "id", "kind": "number"}, {"name": "label", "kind": "string"}])
        item = manifest.entities[0]
        assert key_field(item).name == "id"
        assert not needs_synthetic_key(item)
        assert [f.name for f in writable_fields(item)] == ["id", "label"]

        code = await generate_sqlalchemy_schema(manifest)
        compile(code, "models.py", "exec")
        assert code.count("    id: Mapped[") == 1
        assert "id: Mapped[float] = mapped_column('id', Float, primary_key=True)" in code

        schemas = await generate_pydantic_schemas(manifest)
        create = schemas.split("class CreateItemSchema(BaseModel):")[1].split("class UpdateItemSchema")[0]
        assert "    id: Optional[float] = None" in create

    @pytest.mark.asyncio
    async def test_declared_timestamps_are_kept_once(self):
        manifest = _item_manifest(
            [
                {"name": "id", "kind": "id"},
                {"name": "created_at", "kind": "date"},
                {"name": "updated_at", "kind": "date"},
            ]
        )
        assert auto_timestamp_columns(manifest.entities[0]) == []

        code = await generate_sqlalchemy_schema(manifest)
        compile(code, "models.py", "exec")
        assert code.count("    created_at: Mapped[") == 1
        assert code.count("    updated_at: Mapped[") == 1
        assert "CURRENT_TIMESTAMP" not in code
