"""Handler results → ``Response``.

==================  ============================================
Result              Response
==================  ============================================
``Response``        unchanged
``Redirect``        its status, ``Location`` header, empty body
``str``             200, the configured content type (HTML)
``bytes``           200, ``application/octet-stream``
``dict``/``list``   200, JSON
``(value, int)``    ``value`` negotiated, status overridden
``None``            204, empty body
==================  ============================================
"""

import json
from typing import Any

from sitelets.http.response import Redirect, Response

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def negotiate(value: Any, *, content_type: str = "text/html; charset=utf-8") -> Response:
    """Convert a handler's return value to a Response.

    Raises ``TypeError`` for anything not in the table above.
    """
    match value:
        case Response():
            return value
        case Redirect(url=url, status=status, headers=headers):
            return Response(status=status).with_header("Location", url).with_headers(headers)
        case str():
            return Response(body=value, content_type=content_type)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(body=json.dumps(value, default=str), content_type=JSON_CONTENT_TYPE)
        case (inner, int() as status):
            return negotiate(inner, content_type=content_type).with_status(status)
        case None:
            return Response(status=204)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response; return str, "
                "bytes, dict, list, None, Response or Redirect"
            )
            raise TypeError(msg)
