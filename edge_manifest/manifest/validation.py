"""Minimal structural validation combinators.

A schema is built by composing small validators (``string()``, ``object_()``,
``union()``, ...) and run with :func:`safe_parse`.  Validation never stops at
the first problem: every validator appends path-tagged :class:`Issue` objects
to a shared :class:`ParseContext`, so one top-level call reports every
malformed value in the input tree.

Quick usage::

    from edge_manifest.manifest import validation as v

    schema = v.object_({"name": v.pipe(v.string(), v.min_length(1))})
    result = v.safe_parse(schema, {"name": ""})
    if not result.success:
        for issue in result.issues:
            print(issue.path, issue.message)
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union


PathKey = Union[str, int]


# ---------------------------------------------------------------------------
# Sentinel for absent values
# ---------------------------------------------------------------------------


class _Missing:
    """Marker for a value that is not present at all (as opposed to ``None``)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


# ---------------------------------------------------------------------------
# Issues and results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Issue:
    """A single validation complaint located by its path in the input tree."""

    message: str
    path: tuple[PathKey, ...] = ()


@dataclass
class ParseContext:
    """Mutable state threaded by reference through one validation walk."""

    path: list[PathKey] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    def add_issue(self, message: str, path: Sequence[PathKey] | None = None) -> None:
        """Record an issue at *path* (defaults to the current path)."""
        location = self.path if path is None else path
        self.issues.append(Issue(message=message, path=tuple(location)))

    def fork(self) -> ParseContext:
        """Return a context at the same path with an empty issue list."""
        return ParseContext(path=list(self.path), issues=[])


@dataclass(frozen=True)
class ParseResult:
    """Outcome of a single validator call."""

    ok: bool
    value: Any = None


_FAILED = ParseResult(ok=False)


@dataclass(frozen=True)
class SafeParseSuccess:
    output: Any
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class SafeParseFailure:
    issues: list[Issue]
    success: bool = field(default=False, init=False)


ValidationResult = Union[SafeParseSuccess, SafeParseFailure]


# ---------------------------------------------------------------------------
# Schema base classes
# ---------------------------------------------------------------------------


class Schema:
    """Base class for every validator."""

    #: ``object_`` skips absent keys whose schema is optional.
    is_optional: bool = False

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        raise NotImplementedError


class PipeAction:
    """A refinement applied to an already-validated value inside :func:`pipe`."""

    def _apply(self, value: Any, ctx: ParseContext) -> ParseResult:
        raise NotImplementedError


def safe_parse(schema: Schema, value: Any) -> ValidationResult:
    """Validate *value* against *schema* with a fresh context."""
    ctx = ParseContext()
    result = schema._parse(value, ctx)
    if result.ok:
        return SafeParseSuccess(output=result.value)
    return SafeParseFailure(issues=list(ctx.issues))


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# ---------------------------------------------------------------------------
# Primitive validators
# ---------------------------------------------------------------------------


class _StringSchema(Schema):
    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, str):
            ctx.add_issue("Expected a string")
            return _FAILED
        return ParseResult(ok=True, value=value)


class _BooleanSchema(Schema):
    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not isinstance(value, bool):
            ctx.add_issue("Expected a boolean")
            return _FAILED
        return ParseResult(ok=True, value=value)


class _UnknownSchema(Schema):
    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        return ParseResult(ok=True, value=value)


class _LiteralSchema(Schema):
    def __init__(self, expected: Any) -> None:
        self.expected = expected

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        # ``True == 1`` must not pass for a literal ``1``.
        if type(value) is not type(self.expected) or value != self.expected:
            ctx.add_issue(f"Expected {json.dumps(self.expected, ensure_ascii=False)}")
            return _FAILED
        return ParseResult(ok=True, value=self.expected)


def string() -> Schema:
    return _StringSchema()


def boolean() -> Schema:
    return _BooleanSchema()


def unknown() -> Schema:
    """Accept any value unchanged."""
    return _UnknownSchema()


def literal(expected: Any) -> Schema:
    """Accept only a value equal to (and of the same type as) *expected*."""
    return _LiteralSchema(expected)


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class _UnionSchema(Schema):
    def __init__(self, schemas: Sequence[Schema]) -> None:
        self.schemas = tuple(schemas)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        # Heuristic: the alternative that produced the most issues is taken
        # to be the closest match.  Ties keep the earlier alternative.
        best_issues: list[Issue] | None = None

        for schema in self.schemas:
            fork = ctx.fork()
            result = schema._parse(value, fork)
            if result.ok:
                return ParseResult(ok=True, value=result.value)
            if best_issues is None or len(fork.issues) > len(best_issues):
                best_issues = fork.issues

        if best_issues:
            ctx.issues.extend(best_issues)
        else:
            ctx.add_issue("Value does not match any union variant")
        return _FAILED


class _OptionalSchema(Schema):
    is_optional = True

    def __init__(self, schema: Schema) -> None:
        self.schema = schema

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        if value is MISSING:
            return ParseResult(ok=True, value=MISSING)
        return self.schema._parse(value, ctx)


class _ArraySchema(Schema):
    def __init__(self, item_schema: Schema) -> None:
        self.item_schema = item_schema

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not _is_array(value):
            ctx.add_issue("Expected an array")
            return _FAILED

        start = len(ctx.issues)
        out: list[Any] = []
        for index, item in enumerate(value):
            ctx.path.append(index)
            result = self.item_schema._parse(item, ctx)
            ctx.path.pop()
            if result.ok:
                out.append(result.value)

        if len(ctx.issues) > start:
            return _FAILED
        return ParseResult(ok=True, value=out)


class _RecordSchema(Schema):
    def __init__(self, key_schema: Schema, value_schema: Schema) -> None:
        self.key_schema = key_schema
        self.value_schema = value_schema

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not _is_mapping(value):
            ctx.add_issue("Expected an object")
            return _FAILED

        start = len(ctx.issues)
        out: dict[Any, Any] = {}
        for key, item in value.items():
            ctx.path.append(key)
            key_result = self.key_schema._parse(key, ctx)
            value_result = self.value_schema._parse(item, ctx)
            ctx.path.pop()
            if key_result.ok and value_result.ok:
                out[key_result.value] = value_result.value

        if len(ctx.issues) > start:
            return _FAILED
        return ParseResult(ok=True, value=out)


class _ObjectSchema(Schema):
    def __init__(self, shape: Mapping[str, Schema]) -> None:
        self.shape = dict(shape)

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        if not _is_mapping(value):
            ctx.add_issue("Expected an object")
            return _FAILED

        start = len(ctx.issues)
        out: dict[str, Any] = {}
        for key, schema in self.shape.items():
            if key not in value:
                if not schema.is_optional:
                    ctx.add_issue("Missing required property", [*ctx.path, key])
                continue

            ctx.path.append(key)
            result = schema._parse(value[key], ctx)
            ctx.path.pop()
            if result.ok:
                out[key] = result.value

        if len(ctx.issues) > start:
            return _FAILED
        return ParseResult(ok=True, value=out)


class _PipeSchema(Schema):
    def __init__(self, schema: Schema, actions: Sequence[PipeAction]) -> None:
        self.schema = schema
        self.actions = tuple(actions)
        self.is_optional = schema.is_optional

    def _parse(self, value: Any, ctx: ParseContext) -> ParseResult:
        base = self.schema._parse(value, ctx)
        if not base.ok:
            return _FAILED

        current = base.value
        for action in self.actions:
            step = action._apply(current, ctx)
            if not step.ok:
                return _FAILED
            current = step.value
        return ParseResult(ok=True, value=current)


def union(schemas: Sequence[Schema]) -> Schema:
    """Accept the first alternative of *schemas* that validates."""
    return _UnionSchema(schemas)


def optional(schema: Schema) -> Schema:
    """Allow the value to be absent; present values still go through *schema*."""
    return _OptionalSchema(schema)


def array(item_schema: Schema) -> Schema:
    return _ArraySchema(item_schema)


def record(key_schema: Schema, value_schema: Schema) -> Schema:
    """A mapping with arbitrary keys; every key and value is validated."""
    return _RecordSchema(key_schema, value_schema)


def object_(shape: Mapping[str, Schema]) -> Schema:
    """A mapping with declared keys.  Unknown keys are ignored and dropped."""
    return _ObjectSchema(shape)


def pipe(schema: Schema, *actions: PipeAction) -> Schema:
    """Run *schema*, then each refinement in order until one fails."""
    return _PipeSchema(schema, actions)


# ---------------------------------------------------------------------------
# Refinements
# ---------------------------------------------------------------------------


class _MinLength(PipeAction):
    def __init__(self, minimum: int, message: str) -> None:
        self.minimum = minimum
        self.message = message

    def _apply(self, value: Any, ctx: ParseContext) -> ParseResult:
        if len(value) < self.minimum:
            ctx.add_issue(self.message)
            return _FAILED
        return ParseResult(ok=True, value=value)


def min_length(minimum: int, message: str | None = None) -> PipeAction:
    """Require ``len(value) >= minimum`` (strings, lists, mappings)."""
    if message is None:
        message = f"Expected at least {minimum} item(s)"
    return _MinLength(minimum, message)
