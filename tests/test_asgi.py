"""Tests for the ASGI boundary — requests through Sitelet.__call__."""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

import pytest

from sitelets._internal.asgi import HTTPScope
from sitelets.config import SiteletConfig
from sitelets.context import Context
from sitelets.declare import endpoint, query
from sitelets.errors import HTTPError
from sitelets.http.response import Redirect, Response
from sitelets.sitelet import Sitelet, SiteletBuilder
from sitelets.testing import TestClient


@endpoint("/person/{name}/{age}")
@dataclass(frozen=True, slots=True)
class Person:
    name: str
    age: int


@endpoint("/file/{path}")
@dataclass(frozen=True, slots=True)
class File:
    path: str


@endpoint("qperson/{name}", method="GET")
@dataclass(frozen=True, slots=True)
class QueryPerson:
    name: str
    age: int | None = query(default=None)


def _boom(ctx: Context) -> str:
    msg = "kaboom"
    raise ValueError(msg)


def _teapot(ctx: Context) -> str:
    raise HTTPError(status=418, detail="short and stout", headers=(("X-Pot", "tea"),))


def _site(config: SiteletConfig | None = None) -> Sitelet:
    builder = SiteletBuilder(config)
    builder.with_path("/hello", lambda ctx: "Hello World")
    builder.with_endpoint(Person, lambda ctx, p: f"{p.name} is {p.age}")
    builder.with_endpoint(
        QueryPerson,
        lambda ctx, p: f"{p.name} is {p.age}" if p.age is not None else f"{p.name} won't tell",
    )
    builder.with_endpoint(File, lambda ctx, f: f.path)
    builder.with_path("/json", lambda ctx: {"status": "ok"})
    builder.with_path("/bytes", lambda ctx: b"\x00\x01")
    builder.with_path("/created", lambda ctx: ("made", 201))
    builder.with_path("/empty", lambda ctx: None)
    builder.with_path("/go", lambda ctx: Redirect(ctx.link(Person("alice", 30))))
    builder.with_path("/custom", lambda ctx: Response("custom").with_header("X-Custom", "yes"))
    builder.with_path("/boom", _boom)
    builder.with_path("/teapot", _teapot)
    builder.with_path("/weird", lambda ctx: object())
    return builder.install()


@pytest.mark.anyio
class TestRequests:
    async def test_html_string(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/hello")
        assert response.status == 200
        assert response.text == "Hello World"
        assert response.content_type == "text/html; charset=utf-8"

    async def test_typed_route(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/person/alice/30")
        assert response.text == "alice is 30"

    async def test_query(self) -> None:
        async with TestClient(_site()) as client:
            with_age = await client.get("/qperson/alice", query={"age": "5"})
            without_age = await client.get("/qperson/alice")
        assert with_age.text == "alice is 5"
        assert without_age.text == "alice won't tell"

    async def test_no_match_is_404(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/person/alice/old")
        assert response.status == 404
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_method_mismatch_is_404(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.post("/qperson/alice")
        assert response.status == 404

    async def test_json(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/json")
        assert response.content_type == "application/json; charset=utf-8"
        assert response.text == '{"status": "ok"}'

    async def test_bytes(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/bytes")
        assert response.content_type == "application/octet-stream"
        assert response.body_bytes == b"\x00\x01"

    async def test_status_tuple(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/created")
        assert response.status == 201
        assert response.text == "made"

    async def test_none_is_204(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/empty")
        assert response.status == 204
        assert response.body_bytes == b""

    async def test_redirect_to_link(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/go")
        assert response.status == 302
        assert response.header("location") == "/person/alice/30"

    async def test_response_passthrough(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/custom")
        assert response.text == "custom"
        assert ("x-custom", "yes") in response.headers

    async def test_http_error_from_handler(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/teapot")
        assert response.status == 418
        assert response.text == "short and stout"
        assert response.header("x-pot") == "tea"


@pytest.mark.anyio
class TestInternalErrors:
    async def test_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="sitelets.server"):
            async with TestClient(_site()) as client:
                response = await client.get("/boom")
        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "500 GET /boom" in caplog.text

    async def test_debug_shows_traceback(self) -> None:
        async with TestClient(_site(SiteletConfig(debug=True))) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert "ValueError: kaboom" in response.text

    async def test_unconvertible_result_is_500(self) -> None:
        async with TestClient(_site()) as client:
            response = await client.get("/weird")
        assert response.status == 500


@pytest.mark.anyio
class TestLifespan:
    async def test_startup_and_shutdown(self) -> None:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return incoming.pop(0)

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await _site()({"type": "lifespan"}, receive, send)
        assert sent == [
            {"type": "lifespan.startup.complete"},
            {"type": "lifespan.shutdown.complete"},
        ]


class TestHTTPScope:
    def test_from_scope(self) -> None:
        scope = HTTPScope.from_scope(
            {"type": "http", "method": "GET", "path": "/hello", "query_string": b"a=1"}
        )
        assert scope.method == "GET"
        assert scope.query_string == b"a=1"
        assert scope.http_version == "1.1"
        assert scope.route_path == "/hello"

    def test_root_path_stripped(self) -> None:
        scope = HTTPScope.from_scope(
            {"type": "http", "method": "GET", "path": "/app/hello", "root_path": "/app"}
        )
        assert scope.route_path == "/hello"

    def test_root_path_only(self) -> None:
        scope = HTTPScope.from_scope(
            {"type": "http", "method": "GET", "path": "/app", "root_path": "/app"}
        )
        assert scope.route_path == "/"

    def test_raw_path_preferred(self) -> None:
        scope = HTTPScope.from_scope(
            {"type": "http", "method": "GET", "path": "/file/a/b", "raw_path": b"/file/a%2Fb"}
        )
        assert scope.route_path == "/file/a%2Fb"

    def test_raw_path_root_path_stripped(self) -> None:
        scope = HTTPScope.from_scope(
            {
                "type": "http",
                "method": "GET",
                "path": "/app/file/a/b",
                "raw_path": b"/app/file/a%2Fb",
                "root_path": "/app",
            }
        )
        assert scope.route_path == "/file/a%2Fb"

    def test_without_raw_path_requotes(self) -> None:
        scope = HTTPScope.from_scope(
            {"type": "http", "method": "GET", "path": "/file/100%"}
        )
        assert scope.route_path == "/file/100%25"


@pytest.mark.anyio
class TestReservedCharacters:
    @pytest.mark.parametrize("value", ["a/b", "100%", "%2541", "a b", "a?b#c", "x+y"])
    async def test_visit_round_trips(self, value: str) -> None:
        async with TestClient(_site()) as client:
            response = await client.visit(File(value))
        assert response.status == 200
        assert response.text == value

    async def test_server_style_scope(self) -> None:
        site = _site()
        link = site.build_link(File("a/b"))
        assert link == "/file/a%2Fb"
        scope = {
            "type": "http",
            "method": "GET",
            "path": unquote(link),
            "raw_path": link.encode("latin-1"),
            "query_string": b"",
            "headers": [],
        }
        messages: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        await site(scope, receive, send)
        assert messages[0]["status"] == 200
        assert messages[1]["body"] == b"a/b"
