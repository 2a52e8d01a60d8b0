"""ASGI handler — translates ASGI scope/messages to sitelet dispatch.

The only component that touches raw ASGI directly. Parses the scope,
dispatches through the sitelet's route table, and sends the negotiated
response back through ASGI send().
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING

from sitelets._internal.asgi import HTTPScope, Receive, Scope, Send
from sitelets.errors import HTTPError
from sitelets.http.response import Response
from sitelets.server.negotiation import negotiate
from sitelets.server.sender import send_response

if TYPE_CHECKING:
    from sitelets.sitelet import Sitelet

logger = logging.getLogger("sitelets.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    sitelet: Sitelet,
) -> None:
    """Process a single HTTP request."""
    if scope["type"] != "http":
        return

    http = HTTPScope.from_scope(scope)
    path = http.route_path
    query = http.query_string.decode("latin-1")
    config = sitelet.config

    try:
        result = await sitelet.dispatch_async(http.method, path, query)
        response = negotiate(result, content_type=config.content_type)
    except HTTPError as exc:
        response = handle_http_error(exc, http.method, path, debug=config.debug)
    except Exception as exc:
        response = handle_internal_error(exc, http.method, path, debug=config.debug)

    await send_response(response, send)


def handle_http_error(exc: HTTPError, method: str, path: str, *, debug: bool) -> Response:
    """Map an HTTPError (including a routing miss) to a Response."""
    logger.debug("%d %s %s — %s", exc.status, method, path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    resp = Response(body=detail, content_type="text/plain; charset=utf-8").with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, method: str, path: str, *, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", method, path)

    body = "Internal Server Error"
    if debug:
        body = "".join(traceback.format_exception(exc))
    return Response(body=body, status=500, content_type="text/plain; charset=utf-8")


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Run the ASGI lifespan protocol.

    The route table is frozen before the sitelet exists, so startup has
    nothing left to compile; both phases are acknowledged immediately.
    """
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
