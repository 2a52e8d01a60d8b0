"""Sitelet builder and installed sitelet.

The builder is mutable during setup (route registration). ``install()``
freezes its route table and returns an immutable ``Sitelet``, which is
safe to share between concurrent requests without locking.

Usage::

    sitelet = (
        SiteletBuilder()
        .with_path("/hello", lambda ctx: "Hello World")
        .with_endpoint(Person, show_person)
        .with_endpoint(QueryPerson, show_query_person)
        .install()
    )

    sitelet.dispatch("GET", "/person/alice/bob/30")
    sitelet.build_link(Person(Name("alice", "bob"), 30))
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Self, TypeAlias

from sitelets._internal.asgi import Receive, Scope, Send
from sitelets._internal.invoke import invoke
from sitelets.config import SiteletConfig
from sitelets.context import Context
from sitelets.errors import LinkError
from sitelets.routing.links import build_link
from sitelets.routing.route import MatchResult, RouteEntry
from sitelets.routing.table import RouteTable
from sitelets.server.handler import handle_lifespan, handle_request

Handler: TypeAlias = Callable[..., Any]


class SiteletBuilder:
    """Accumulates routes in registration order.

    Registration validates eagerly: a malformed pattern or a type that
    does not fit its patterns raises here, at startup, never while
    serving a request. Earlier registrations take priority over later
    ones when both could match a request.
    """

    __slots__ = ("_installed", "_table", "config")

    def __init__(self, config: SiteletConfig | None = None) -> None:
        self.config: SiteletConfig = config or SiteletConfig()
        self._table = RouteTable(
            case_sensitive=self.config.case_sensitive,
            decode_segments=self.config.decode_segments,
            keep_blank_query_values=self.config.keep_blank_query_values,
        )
        self._installed = False

    # -- Route registration --

    def register(
        self,
        method: str | None,
        patterns: Sequence[str],
        schema_type: type | None,
        handler: Handler,
        *,
        name: str | None = None,
    ) -> RouteEntry:
        """Register a route and return its entry.

        Args:
            method: HTTP method, or ``None`` to use the type's declared
                method (any method when it declares none).
            patterns: Alternate URL templates. Empty to use the patterns
                declared on *schema_type* with ``@endpoint``.
            schema_type: Structured type the route populates, or ``None``
                for a plain path route.
            handler: ``handler(ctx, instance)``, or ``handler(ctx)`` for
                plain path routes. May be sync or async.
            name: Optional route name, shown by ``sitelets routes``.
        """
        self._check_not_installed()
        return self._table.register(method, patterns, schema_type, handler, name=name)

    def with_endpoint(
        self,
        schema_type: type,
        handler: Handler,
        *,
        method: str | None = None,
        name: str | None = None,
    ) -> Self:
        """Register *schema_type* under its ``@endpoint`` patterns."""
        self.register(method, (), schema_type, handler, name=name)
        return self

    def with_path(
        self,
        path: str,
        handler: Handler,
        *,
        method: str | None = None,
        name: str | None = None,
    ) -> Self:
        """Register a plain path route; the handler receives only ``ctx``."""
        self.register(method, (path,), None, handler, name=name)
        return self

    def route(
        self,
        target: type | str,
        *,
        method: str | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a handler via decorator.

        *target* is either a structured type (registered under its
        ``@endpoint`` patterns) or a plain path string.
        """

        def decorator(func: Handler) -> Handler:
            if isinstance(target, str):
                self.with_path(target, func, method=method, name=name)
            else:
                self.with_endpoint(target, func, method=method, name=name)
            return func

        return decorator

    def install(self) -> Sitelet:
        """Freeze the route table and return the installed sitelet."""
        self._check_not_installed()
        self._table.compile()
        self._installed = True
        return Sitelet(self._table, self.config)

    def _check_not_installed(self) -> None:
        if self._installed:
            msg = "Cannot modify a SiteletBuilder after install()."
            raise RuntimeError(msg)


class Sitelet:
    """An installed, immutable router.

    Also an ASGI 3.0 application: ``http`` scopes are dispatched,
    ``lifespan`` scopes are acknowledged.
    """

    __slots__ = ("_table", "config")

    def __init__(self, table: RouteTable, config: SiteletConfig | None = None) -> None:
        if not table.compiled:
            table.compile()
        self._table = table
        self.config: SiteletConfig = config or SiteletConfig()

    @property
    def routes(self) -> tuple[RouteEntry, ...]:
        """Registered entries in priority order."""
        return self._table.all_entries()

    # -- Dispatch --

    def match(self, method: str, path: str, query: str | bytes = "") -> MatchResult:
        """Return the first route that accepts the request.

        Raises ``NoRouteMatchedError`` if none does.
        """
        return self._table.match(method, path, query)

    def dispatch(self, method: str, path: str, query: str | bytes = "") -> Any:
        """Match the request and invoke the winning handler.

        The handler's result is returned unchanged; an async handler's
        coroutine is returned without being awaited.

        Raises ``NoRouteMatchedError`` if no route accepts the request.
        """
        handler, args = self._prepare(method, path, query)
        return handler(*args)

    async def dispatch_async(self, method: str, path: str, query: str | bytes = "") -> Any:
        """Like :meth:`dispatch`, awaiting the handler's result if needed."""
        handler, args = self._prepare(method, path, query)
        return await invoke(handler, *args)

    def _prepare(
        self, method: str, path: str, query: str | bytes
    ) -> tuple[Handler, tuple[Any, ...]]:
        result = self._table.match(method, path, query)
        ctx = Context(sitelet=self, method=method.upper(), path=path, match=result)
        if result.entry.schema is None:
            return result.entry.handler, (ctx,)
        return result.entry.handler, (ctx, result.instance)

    # -- Links --

    def build_link(self, instance: Any) -> str:
        """Generate the path and query string that dispatches to *instance*.

        Uses the first route registered for ``type(instance)`` and its
        first alternate pattern.

        Raises ``LinkError`` if the type has no route.
        """
        entries = self._table.entries_for(type(instance))
        if not entries:
            msg = f"no route is registered for {type(instance).__qualname__}"
            raise LinkError(msg)
        return build_link(entries[0], instance)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await handle_lifespan(receive, send)
            return
        await handle_request(scope, receive, send, sitelet=self)
