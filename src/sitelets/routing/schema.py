"""Schema reflector — structured types into field layouts.

A ``FieldSchema`` says which fields of a type are bound to path segments
(in declared order), which are read from the query string, and which are
themselves structured types whose fields are bound in place.

Types describe themselves through the ``DescribesFields`` capability
(a ``describe_fields()`` classmethod). Plain dataclasses are reflected
once and cached: fields created with ``sitelets.query()`` are query-bound,
all others path-bound.

Resolution rules:

- ``str``, ``int``, ``float``, ``bool`` — leaf fields
- another dataclass or ``DescribesFields`` type — nested, path-bound
- ``X | None`` — only on query fields; absence leaves the field ``None``
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from functools import cache
from typing import Any, Protocol, Union, runtime_checkable

from sitelets.errors import SchemaMismatchError
from sitelets.routing.params import is_supported
from sitelets.routing.pattern import CompiledPattern

# dataclasses.Field metadata keys written by sitelets.query()
QUERY_METADATA_KEY = "sitelets.query"
QUERY_NAME_METADATA_KEY = "sitelets.query_name"

# Class attribute written by sitelets.endpoint()
ENDPOINT_ATTRIBUTE = "__sitelet_endpoint__"


class FieldSource(Enum):
    """Where a field's value comes from."""

    PATH = "path"
    QUERY = "query"


@dataclass(frozen=True, slots=True)
class EndpointInfo:
    """Patterns and method declared on a type with ``@endpoint``."""

    patterns: tuple[CompiledPattern, ...] = ()
    method: str | None = None


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One field of a structured type.

    Leaf fields carry a ``target_type``; nested fields carry a ``schema``.
    """

    name: str
    source: FieldSource = FieldSource.PATH
    target_type: type | None = None
    schema: FieldSchema | None = None
    optional: bool = False
    has_default: bool = False
    query_name: str | None = None

    @property
    def is_nested(self) -> bool:
        return self.schema is not None

    @property
    def key(self) -> str:
        """The query-string key for query fields, the field name otherwise."""
        return self.query_name or self.name


@dataclass(frozen=True, slots=True)
class QueryFieldSpec:
    """A query-bound leaf, addressed from the root type by dotted path."""

    name: str
    path: tuple[str, ...]
    target_type: type
    required: bool


@dataclass(frozen=True, slots=True)
class FieldSchema:
    """Field layout of one structured type."""

    target: type
    fields: tuple[FieldSpec, ...]
    patterns: tuple[CompiledPattern, ...] = ()
    method: str | None = None

    @property
    def path_fields(self) -> tuple[FieldSpec, ...]:
        """Path-bound fields in declared order."""
        return tuple(f for f in self.fields if f.source is FieldSource.PATH)

    @property
    def query_fields(self) -> tuple[QueryFieldSpec, ...]:
        """Query-bound leaves of this type and every nested type."""
        return tuple(self._iter_query_fields(()))

    def _iter_query_fields(self, prefix: tuple[str, ...]) -> Iterator[QueryFieldSpec]:
        for f in self.fields:
            path = (*prefix, f.name)
            if f.schema is not None:
                yield from f.schema._iter_query_fields(path)
            elif f.source is FieldSource.QUERY:
                assert f.target_type is not None
                yield QueryFieldSpec(
                    name=f.key,
                    path=path,
                    target_type=f.target_type,
                    required=not (f.optional or f.has_default),
                )

    def field(self, name: str) -> FieldSpec | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def resolve(self, path: tuple[str, ...]) -> FieldSpec | None:
        """Find the field at dotted *path*, descending into nested schemas."""
        schema: FieldSchema | None = self
        spec: FieldSpec | None = None
        for name in path:
            if schema is None:
                return None
            spec = schema.field(name)
            if spec is None:
                return None
            schema = spec.schema
        return spec

    def leaf_paths(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[str, ...]]:
        """Dotted paths of every path-bound leaf, in declared order."""
        for f in self.path_fields:
            path = (*prefix, f.name)
            if f.schema is not None:
                yield from f.schema.leaf_paths(path)
            else:
                yield path


@runtime_checkable
class DescribesFields(Protocol):
    """Capability of a type that reports its own field layout."""

    @classmethod
    def describe_fields(cls) -> FieldSchema: ...


def endpoint_info(cls: type) -> EndpointInfo:
    """Return the ``@endpoint`` declaration of *cls* (empty if none)."""
    return getattr(cls, ENDPOINT_ATTRIBUTE, None) or EndpointInfo()


@cache
def reflect_schema(cls: type) -> FieldSchema:
    """Return the ``FieldSchema`` of *cls*, computed once per type.

    Raises ``SchemaMismatchError`` if *cls* cannot be bound to a URL.
    """
    schema = _reflect(cls, frozenset())
    _check_query_names(schema)
    return schema


def _reflect(cls: type, seen: frozenset[type]) -> FieldSchema:
    if cls in seen:
        msg = f"{cls.__qualname__} contains itself"
        raise SchemaMismatchError(msg)

    if isinstance(cls, type) and isinstance(cls, DescribesFields):
        schema = cls.describe_fields()
        if not isinstance(schema, FieldSchema):
            msg = f"{cls.__qualname__}.describe_fields() must return a FieldSchema"
            raise SchemaMismatchError(msg)
        return schema

    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        name = getattr(cls, "__qualname__", repr(cls))
        msg = f"{name} is not a dataclass and does not implement describe_fields()"
        raise SchemaMismatchError(msg)

    try:
        hints = typing.get_type_hints(cls)
    except NameError as exc:
        msg = f"cannot resolve annotations of {cls.__qualname__}: {exc}"
        raise SchemaMismatchError(msg) from exc

    fields: list[FieldSpec] = []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        fields.append(_reflect_field(cls, f, hints[f.name], seen | {cls}))

    info = endpoint_info(cls)
    return FieldSchema(
        target=cls,
        fields=tuple(fields),
        patterns=info.patterns,
        method=info.method,
    )


def _reflect_field(
    owner: type,
    f: dataclasses.Field[Any],
    annotation: Any,
    seen: frozenset[type],
) -> FieldSpec:
    where = f"{owner.__qualname__}.{f.name}"
    is_query = bool(f.metadata.get(QUERY_METADATA_KEY, False))
    has_default = (
        f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
    )
    inner, optional = _unwrap_optional(annotation)

    if is_supported(inner):
        if optional and not is_query:
            msg = f"{where}: path fields cannot be optional"
            raise SchemaMismatchError(msg)
        return FieldSpec(
            name=f.name,
            source=FieldSource.QUERY if is_query else FieldSource.PATH,
            target_type=inner,
            optional=optional,
            has_default=has_default,
            query_name=f.metadata.get(QUERY_NAME_METADATA_KEY) if is_query else None,
        )

    if isinstance(inner, type) and (
        dataclasses.is_dataclass(inner) or isinstance(inner, DescribesFields)
    ):
        if is_query:
            msg = f"{where}: query fields must be str, int, float or bool"
            raise SchemaMismatchError(msg)
        if optional:
            msg = f"{where}: nested fields cannot be optional"
            raise SchemaMismatchError(msg)
        return FieldSpec(name=f.name, schema=_reflect(inner, seen), has_default=has_default)

    msg = f"{where}: unsupported field type {annotation!r}"
    raise SchemaMismatchError(msg)


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``X | None`` / ``Optional[X]`` into ``(X, True)``."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def _check_query_names(schema: FieldSchema) -> None:
    seen: dict[str, tuple[str, ...]] = {}
    for q in schema.query_fields:
        if q.name in seen:
            first = ".".join(seen[q.name])
            msg = (
                f"{schema.target.__qualname__}: query key {q.name!r} is used by "
                f"both {first} and {'.'.join(q.path)}"
            )
            raise SchemaMismatchError(msg)
        seen[q.name] = q.path
