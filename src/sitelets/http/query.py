"""Immutable query string parameters.

Parsed once per request and shared by every route the matcher tries.
Query keys are flat: a nested type's query field ``first`` is read from
``?first=...`` no matter how deep the type sits.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Query string as an immutable ``Mapping[str, str]``.

    Indexing returns the first value of a repeated key; ``get_list``
    returns every value in the order it appeared.
    """

    __slots__ = ("_raw", "_values")

    def __init__(self, query_string: str | bytes = "", *, keep_blank_values: bool = True) -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        raw = query_string.removeprefix("?")
        values: dict[str, list[str]] = {}
        for key, value in parse_qsl(raw, keep_blank_values=keep_blank_values):
            values.setdefault(key, []).append(value)
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_values", values)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "QueryParams is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({dict(self)!r})"

    @property
    def raw(self) -> str:
        """The query string as received, without a leading ``?``."""
        return self._raw

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._values.get(key, ()))
