"""Response → ASGI ``http.response.start`` / ``http.response.body`` messages."""

from sitelets._internal.asgi import Send
from sitelets.http.response import Response

# 1xx, 204 and 304 responses never carry a message body
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    headers = [(b"content-type", response.content_type.encode("latin-1"))]
    headers.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    )
    headers.append((b"content-length", str(content_length).encode("latin-1")))
    return headers


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as one start message and one body message."""
    if response.status < 200 or response.status in _BODYLESS:
        body = b""
    else:
        body = response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
