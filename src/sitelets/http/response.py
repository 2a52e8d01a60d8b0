"""Responses at the ASGI boundary.

Handlers usually return plain values (``str``, ``dict``, ...) which the
boundary negotiates into a ``Response``. Returning a ``Response`` or a
``Redirect`` directly controls status and headers::

    def show_person(ctx, person):
        return Response(render(person)).with_header("Cache-Control", "no-store")

    def legacy_person(ctx, person):
        return Redirect(ctx.link(person), status=301)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """Immutable HTTP response. ``with_*`` methods return modified copies."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | tuple[tuple[str, str], ...]) -> Response:
        pairs = tuple(headers.items()) if isinstance(headers, Mapping) else tuple(headers)
        return replace(self, headers=(*self.headers, *pairs))

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """First value of header *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((v for k, v in self.headers if k.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """Send the client to *url*, typically a link built with ``ctx.link``."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
