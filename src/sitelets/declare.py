"""Declarative endpoint metadata for structured request types.

Usage::

    from dataclasses import dataclass

    from sitelets import endpoint, query

    @endpoint("{first}/{last}")
    @dataclass(frozen=True, slots=True)
    class Name:
        first: str
        last: str

    @endpoint("/person/{name}/{age}", "/person/{age}/{name}")
    @dataclass(frozen=True, slots=True)
    class Person:
        name: Name
        age: int

    @endpoint("qperson/{name}", method="GET")
    @dataclass(frozen=True, slots=True)
    class QueryPerson:
        name: str
        age: int | None = query(default=None)

Patterns are compiled when the decorator runs, so a malformed template
fails at import time. Binding the patterns to the type's fields happens
when the type is registered with a ``SiteletBuilder``.
"""

import dataclasses
from collections.abc import Callable
from typing import Any, TypeVar

from sitelets.routing.pattern import compile_pattern
from sitelets.routing.schema import (
    ENDPOINT_ATTRIBUTE,
    QUERY_METADATA_KEY,
    QUERY_NAME_METADATA_KEY,
    DescribesFields,
    EndpointInfo,
    FieldSchema,
)

__all__ = ["DescribesFields", "FieldSchema", "endpoint", "query"]


T = TypeVar("T", bound=type)


def endpoint(*patterns: str, method: str | None = None) -> Callable[[T], T]:
    """Attach URL patterns (and optionally an HTTP method) to a type.

    Args:
        patterns: One or more alternate URL templates. The first one is
            used for link generation.
        method: HTTP method the endpoint answers. ``None`` accepts any.
    """
    compiled = tuple(compile_pattern(p) for p in patterns)
    info = EndpointInfo(patterns=compiled, method=method.upper() if method else None)

    def decorator(cls: T) -> T:
        setattr(cls, ENDPOINT_ATTRIBUTE, info)
        return cls

    return decorator


def query(
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    name: str | None = None,
) -> Any:
    """Mark a dataclass field as read from the query string.

    A query field is optional when it has a default or is annotated
    ``X | None``; otherwise a request without it does not match.

    Args:
        default: Value used when the parameter is absent.
        default_factory: Zero-argument callable producing that value.
        name: Query-string key, when it differs from the field name.
    """
    metadata: dict[str, Any] = {QUERY_METADATA_KEY: True}
    if name is not None:
        metadata[QUERY_NAME_METADATA_KEY] = name
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
    )
