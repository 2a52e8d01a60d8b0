"""Typed view of the ASGI ``http`` scope.

The server handler is the only consumer; handlers see a ``Context``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias
from urllib.parse import quote

# Raw ASGI 3.0 types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class HTTPScope:
    """The parts of an ``http`` scope that routing needs."""

    method: str
    path: str
    query_string: bytes = b""
    root_path: str = ""
    http_version: str = "1.1"
    raw_path: bytes | None = None

    @classmethod
    def from_scope(cls, scope: Scope) -> HTTPScope:
        return cls(
            method=scope["method"],
            path=scope["path"],
            query_string=scope.get("query_string", b""),
            root_path=scope.get("root_path", ""),
            http_version=scope.get("http_version", "1.1"),
            raw_path=scope.get("raw_path"),
        )

    @property
    def route_path(self) -> str:
        """The still percent-encoded path below ``root_path``.

        ``path`` arrives decoded, so an encoded ``%2F`` inside a segment
        is indistinguishable from a separator there. Routing splits the
        encoded ``raw_path`` instead and decodes each segment itself;
        servers that omit ``raw_path`` get ``path`` re-encoded.
        """
        if self.raw_path:
            encoded = self.raw_path.decode("latin-1")
        else:
            encoded = quote(self.path, safe="/")
        encoded = encoded.partition("?")[0]
        root = quote(self.root_path, safe="/")
        if root and encoded.startswith(root):
            return encoded[len(root) :] or "/"
        return encoded
