"""Link builder — structured instances back into URLs.

The inverse of matching: for a registered type, the first alternate
pattern of its first registered entry is filled from the instance's
fields, and set query fields are appended as a query string::

    build_link(entry, Person(name=Name("alice", "bob"), age=30))
    # "/person/alice/bob/30"
"""

from typing import Any
from urllib.parse import quote, urlencode

from sitelets.errors import LinkError
from sitelets.routing.params import format_param
from sitelets.routing.pattern import LiteralSegment
from sitelets.routing.route import RouteEntry


def build_link(entry: RouteEntry, instance: Any) -> str:
    """Serialize *instance* into a path and query string for *entry*.

    Raises ``LinkError`` if a path-bound value is unset or empty, or a
    value has no URL form (a NaN float).

    Links always percent-encode and always emit set query values, empty
    strings included; they parse back under the default ``SiteletConfig``.
    """
    if entry.schema is None and entry.patterns[0].variables:
        msg = f"{entry.patterns[0].template!r} has variables but no structured type"
        raise LinkError(msg)

    parts: list[str] = []
    for seg in entry.bindings[0]:
        if isinstance(seg, LiteralSegment):
            parts.append(quote(seg.text, safe=""))
            continue
        value = _lookup(instance, seg.path)
        if value is None:
            msg = f"cannot link {type(instance).__qualname__}: {seg.variable} is not set"
            raise LinkError(msg)
        text = _format(instance, seg.variable, value, seg.target_type)
        if not text:
            msg = f"cannot link {type(instance).__qualname__}: {seg.variable} is empty"
            raise LinkError(msg)
        parts.append(quote(text, safe=""))

    pairs: list[tuple[str, str]] = []
    query_fields = entry.schema.query_fields if entry.schema is not None else ()
    for q in query_fields:
        value = _lookup(instance, q.path)
        if value is not None:
            pairs.append((q.name, _format(instance, ".".join(q.path), value, q.target_type)))

    link = "/" + "/".join(parts)
    if pairs:
        link += "?" + urlencode(pairs)
    return link


def _format(instance: Any, field: str, value: Any, target_type: type) -> str:
    try:
        return format_param(value, target_type)
    except ValueError as exc:
        msg = f"cannot link {type(instance).__qualname__}: {field}: {exc}"
        raise LinkError(msg) from exc


def _lookup(instance: Any, path: tuple[str, ...]) -> Any:
    value = instance
    for name in path:
        if value is None:
            return None
        value = getattr(value, name)
    return value
