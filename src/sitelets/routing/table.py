"""Route table with first-match-wins dispatch.

Entries are registered during setup and frozen by ``compile()``.
Registration order is match priority: for a given request, entries are
tried in the order they were registered and, within an entry, alternate
patterns in the order they were declared. The first candidate whose
literals, type conversions and required query parameters all succeed
wins; every failure short of that falls through silently.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from sitelets.errors import NoRouteMatchedError, SchemaMismatchError
from sitelets.http.query import QueryParams
from sitelets.routing.params import convert_param
from sitelets.routing.pattern import CompiledPattern, LiteralSegment, compile_pattern, split_path
from sitelets.routing.route import BoundSegment, MatchResult, RouteEntry, bind_pattern
from sitelets.routing.schema import FieldSchema, reflect_schema

logger = logging.getLogger("sitelets.routing")


class RouteTable:
    """Ordered, write-once collection of route entries.

    Usage::

        table = RouteTable()
        table.register("GET", ["/person/{name}/{age}"], Person, show_person)
        table.compile()
        result = table.match("GET", "/person/alice/bob/30")
    """

    __slots__ = ("_case_sensitive", "_compiled", "_decode_segments", "_entries", "_keep_blank")

    def __init__(
        self,
        *,
        case_sensitive: bool = True,
        decode_segments: bool = True,
        keep_blank_query_values: bool = True,
    ) -> None:
        self._entries: list[RouteEntry] = []
        self._compiled = False
        self._case_sensitive = case_sensitive
        self._decode_segments = decode_segments
        self._keep_blank = keep_blank_query_values

    # -- Build phase --

    def register(
        self,
        method: str | None,
        patterns: Sequence[str],
        schema_type: type | None,
        handler: Callable[..., Any],
        *,
        name: str | None = None,
    ) -> RouteEntry:
        """Validate and append a route. Must be called before compile().

        When *patterns* is empty the patterns declared on *schema_type*
        with ``@endpoint`` are used. When *method* is ``None`` the
        method declared there applies (``None`` again meaning any).

        Raises ``InvalidPatternError`` or ``SchemaMismatchError`` if the
        route is malformed.
        """
        if self._compiled:
            msg = "Cannot register routes after compilation."
            raise RuntimeError(msg)

        schema: FieldSchema | None = None
        if schema_type is not None:
            schema = reflect_schema(schema_type)

        compiled = self._compile_patterns(patterns, schema)
        if method is None and schema is not None:
            method = schema.method
        bindings = tuple(bind_pattern(p, schema) for p in compiled)

        entry = RouteEntry(
            method=method.upper() if method else None,
            patterns=compiled,
            bindings=bindings,
            schema=schema,
            handler=handler,
            name=name,
        )
        self._entries.append(entry)
        logger.debug(
            "registered %s %s -> %s",
            entry.method or "*",
            " | ".join(p.template for p in compiled),
            getattr(handler, "__qualname__", repr(handler)),
        )
        return entry

    @staticmethod
    def _compile_patterns(
        patterns: Sequence[str], schema: FieldSchema | None
    ) -> tuple[CompiledPattern, ...]:
        if isinstance(patterns, str):
            patterns = [patterns]
        if patterns:
            return tuple(compile_pattern(p) for p in patterns)
        if schema is not None and schema.patterns:
            return schema.patterns
        owner = schema.target.__qualname__ if schema is not None else "route"
        msg = f"{owner}: no URL pattern given and none declared with @endpoint"
        raise SchemaMismatchError(msg)

    def compile(self) -> None:
        """Freeze the table. No more routes can be registered."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    # -- Introspection --

    def all_entries(self) -> tuple[RouteEntry, ...]:
        """Return every entry in registration order."""
        return tuple(self._entries)

    def entries_for(self, target: type) -> tuple[RouteEntry, ...]:
        """Return the entries whose structured type is *target*."""
        return tuple(e for e in self._entries if e.target is target)

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # -- Dispatch phase --

    def match(self, method: str, path: str, query_string: str | bytes = "") -> MatchResult:
        """Find the first entry that fully accepts the request.

        Raises ``NoRouteMatchedError`` if no entry matches.
        """
        segments = split_path(path, decode=self._decode_segments)
        query = QueryParams(query_string, keep_blank_values=self._keep_blank)

        for entry in self._entries:
            if not entry.accepts_method(method):
                continue
            result = self._match_entry(entry, segments, query)
            if result is not None:
                return result

        raise NoRouteMatchedError(method, path)

    def _match_entry(
        self,
        entry: RouteEntry,
        segments: list[str],
        query: QueryParams,
    ) -> MatchResult | None:
        for pattern, binding in zip(entry.patterns, entry.bindings, strict=True):
            if len(binding) != len(segments):
                continue
            captured = self._match_segments(binding, segments)
            if captured is None:
                continue
            values, raw = captured

            if entry.schema is None:
                return MatchResult(
                    entry=entry, pattern=pattern, instance=None, path_params=raw, query=query
                )

            query_values = _bind_query(entry.schema, query)
            if query_values is None:
                logger.debug("%s: required query parameter missing or invalid", pattern.template)
                return None

            instance = build_instance(entry.schema, values | query_values)
            return MatchResult(
                entry=entry, pattern=pattern, instance=instance, path_params=raw, query=query
            )
        return None

    def _match_segments(
        self,
        binding: tuple[BoundSegment, ...],
        segments: list[str],
    ) -> tuple[dict[tuple[str, ...], Any], dict[str, str]] | None:
        """Walk segments positionally; return (converted values, raw captures)."""
        values: dict[tuple[str, ...], Any] = {}
        raw: dict[str, str] = {}
        for spec, part in zip(binding, segments, strict=True):
            if isinstance(spec, LiteralSegment):
                if self._case_sensitive:
                    if spec.text != part:
                        return None
                elif spec.text.lower() != part.lower():
                    return None
                continue

            try:
                values[spec.path] = convert_param(part, spec.target_type)
            except ValueError:
                logger.debug(
                    "{%s}: %r is not a valid %s", spec.variable, part, spec.target_type.__name__
                )
                return None
            raw[spec.variable] = part
        return values, raw


def _bind_query(
    schema: FieldSchema, query: QueryParams
) -> dict[tuple[str, ...], Any] | None:
    values: dict[tuple[str, ...], Any] = {}
    for q in schema.query_fields:
        text = query.get(q.name)
        if text is None:
            if q.required:
                return None
            continue
        try:
            values[q.path] = convert_param(text, q.target_type)
        except ValueError:
            return None
    return values


def build_instance(
    schema: FieldSchema,
    values: dict[tuple[str, ...], Any],
    prefix: tuple[str, ...] = (),
) -> Any:
    """Construct ``schema.target`` (and nested types) from path-keyed values.

    Absent optional fields are left at their default, or ``None`` when
    the field declares no default.
    """
    kwargs: dict[str, Any] = {}
    for f in schema.fields:
        path = (*prefix, f.name)
        if f.schema is not None:
            kwargs[f.name] = build_instance(f.schema, values, path)
        elif path in values:
            kwargs[f.name] = values[path]
        elif not f.has_default:
            kwargs[f.name] = None
    return schema.target(**kwargs)

