"""Test helpers for sitelets.

``TestClient`` drives an installed sitelet through its ASGI interface
(no server, no sockets) and hands back the same ``Response`` type the
ASGI boundary builds. The assertion helpers check routing properties
directly against the route table.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote, urlencode

from sitelets.errors import NoRouteMatchedError
from sitelets.http.response import Response
from sitelets.routing.route import MatchResult
from sitelets.sitelet import Sitelet

# ---------------------------------------------------------------------------
# Routing assertion helpers
# ---------------------------------------------------------------------------


def assert_round_trips(sitelet: Sitelet, instance: Any, *, method: str = "GET") -> MatchResult:
    """Assert that the link generated for *instance* parses back to it.

    Returns the match so callers can inspect which pattern was used.
    """
    link = sitelet.build_link(instance)
    path, _, query = link.partition("?")
    try:
        result = sitelet.match(method, path, query)
    except NoRouteMatchedError:
        msg = f"{link!r} (generated for {instance!r}) matches no route"
        raise AssertionError(msg) from None
    assert result.instance == instance, (
        f"{link!r} parsed to {result.instance!r}, expected {instance!r}"
    )
    return result


def assert_no_route(sitelet: Sitelet, method: str, path: str, query: str = "") -> None:
    """Assert that no registered route accepts the request."""
    try:
        result = sitelet.match(method, path, query)
    except NoRouteMatchedError:
        return
    msg = f"{method} {path!r} unexpectedly matched {result.pattern.template!r}"
    raise AssertionError(msg)


# ---------------------------------------------------------------------------
# ASGI test client
# ---------------------------------------------------------------------------


def _build_scope(method: str, path: str, query_string: str, headers: dict[str, str]) -> dict:
    # Servers put the decoded path in "path" and the bytes as sent in "raw_path"
    raw_path = quote(path, safe="/%")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": unquote(raw_path),
        "raw_path": raw_path.encode("latin-1"),
        "query_string": query_string.encode("latin-1"),
        "root_path": "",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers.items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class _ResponseRecorder:
    """ASGI ``send`` callable that rebuilds a Response from the messages."""

    __slots__ = ("body", "headers", "status")

    def __init__(self) -> None:
        self.status = 200
        self.headers: list[tuple[bytes, bytes]] = []
        self.body: list[bytes] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            self.body.append(message.get("body", b""))

    def response(self) -> Response:
        content_type = "text/html; charset=utf-8"
        headers: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name = raw_name.decode("latin-1")
            value = raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                headers.append((name, value))
        return Response(
            body=b"".join(self.body),
            status=self.status,
            content_type=content_type,
            headers=tuple(headers),
        )


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for an installed sitelet.

    Usage::

        async with TestClient(sitelet) as client:
            response = await client.get("/person/alice/bob/30")
            assert response.status == 200

            response = await client.visit(Person(Name("alice", "bob"), 30))
    """

    __slots__ = ("sitelet",)

    def __init__(self, sitelet: Sitelet) -> None:
        self.sitelet = sitelet

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(
        self,
        path: str,
        *,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, query=query, headers=headers)

    async def post(
        self,
        path: str,
        *,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, query=query, headers=headers, body=body)

    async def visit(self, instance: Any, *, method: str = "GET") -> Response:
        """Request the URL the sitelet generates for *instance*."""
        return await self.request(method, self.sitelet.build_link(instance))

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        path, _, query_string = path.partition("?")
        if query:
            extra = urlencode(query)
            query_string = f"{query_string}&{extra}" if query_string else extra

        scope = _build_scope(method, path, query_string, headers or {})
        pending = [{"type": "http.request", "body": body or b"", "more_body": False}]

        async def receive() -> dict[str, Any]:
            if pending:
                return pending.pop()
            return {"type": "http.disconnect"}

        recorder = _ResponseRecorder()
        await self.sitelet(scope, receive, recorder)
        return recorder.response()
