"""RouteEntry, MatchResult and pattern-to-schema binding."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from sitelets.errors import SchemaMismatchError
from sitelets.http.query import QueryParams
from sitelets.routing.pattern import CompiledPattern, LiteralSegment, VariableSegment
from sitelets.routing.schema import FieldSchema, FieldSource, FieldSpec


@dataclass(frozen=True, slots=True)
class Slot:
    """A variable segment bound to a leaf field.

    ``path`` addresses the field from the route's root type, so
    ``("name", "first")`` is ``person.name.first``.
    """

    path: tuple[str, ...]
    target_type: type
    variable: str


BoundSegment: TypeAlias = LiteralSegment | Slot


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A registered route. Immutable once created.

    ``bindings[i]`` is ``patterns[i]`` compiled against ``schema``, with
    nested fields expanded in place. Plain path routes have no schema;
    their variables bind to raw strings.
    """

    method: str | None
    patterns: tuple[CompiledPattern, ...]
    bindings: tuple[tuple[BoundSegment, ...], ...]
    schema: FieldSchema | None
    handler: Callable[..., Any]
    name: str | None = None

    @property
    def target(self) -> type | None:
        return self.schema.target if self.schema is not None else None

    def accepts_method(self, method: str) -> bool:
        return self.method is None or self.method == method.upper()


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Result of a successful match."""

    entry: RouteEntry
    pattern: CompiledPattern
    instance: Any
    path_params: dict[str, str] = field(default_factory=dict)
    query: QueryParams = field(default_factory=QueryParams)


def bind_pattern(pattern: CompiledPattern, schema: FieldSchema | None) -> tuple[BoundSegment, ...]:
    """Bind each variable of *pattern* to a leaf field of *schema*.

    Variables naming a nested field expand into that type's own first
    pattern (literals included) or, when it declares none, into its
    path-bound fields in declared order.

    Raises ``SchemaMismatchError`` unless every path-bound leaf of the
    schema is bound exactly once.
    """
    if schema is None:
        return tuple(
            Slot(path=(s.name,), target_type=str, variable=s.name)
            if isinstance(s, VariableSegment)
            else s
            for s in pattern.segments
        )

    bound = tuple(_bind(pattern, schema, ()))

    counts: dict[tuple[str, ...], int] = {}
    for seg in bound:
        if isinstance(seg, Slot):
            counts[seg.path] = counts.get(seg.path, 0) + 1

    owner = schema.target.__qualname__
    for path, count in counts.items():
        if count > 1:
            msg = f"{owner}: field {'.'.join(path)} is bound more than once by {pattern.template!r}"
            raise SchemaMismatchError(msg)

    missing = [".".join(p) for p in schema.leaf_paths() if p not in counts]
    if missing:
        msg = f"{owner}: pattern {pattern.template!r} does not bind {', '.join(missing)}"
        raise SchemaMismatchError(msg)

    return bound


def _bind(
    pattern: CompiledPattern,
    schema: FieldSchema,
    prefix: tuple[str, ...],
) -> Iterator[BoundSegment]:
    for seg in pattern.segments:
        if isinstance(seg, LiteralSegment):
            yield seg
            continue

        spec = schema.resolve(seg.path)
        if spec is None:
            msg = (
                f"{schema.target.__qualname__}: variable {{{seg.name}}} in "
                f"{pattern.template!r} does not name a field"
            )
            raise SchemaMismatchError(msg)
        if spec.source is FieldSource.QUERY:
            msg = (
                f"{schema.target.__qualname__}: variable {{{seg.name}}} names a query field"
            )
            raise SchemaMismatchError(msg)
        yield from _expand(spec, (*prefix, *seg.path))


def _expand(spec: FieldSpec, path: tuple[str, ...]) -> Iterator[BoundSegment]:
    if spec.schema is None:
        assert spec.target_type is not None
        yield Slot(path=path, target_type=spec.target_type, variable=".".join(path))
        return

    nested = spec.schema
    if nested.patterns:
        yield from _bind(nested.patterns[0], nested, path)
        return

    for sub in nested.path_fields:
        yield from _expand(sub, (*path, sub.name))
