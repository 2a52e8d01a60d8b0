"""Await-if-needed handler calls.

Handlers may be ``def`` or ``async def``. ``Sitelet.dispatch`` returns
whatever the handler returned; ``dispatch_async`` (and through it the
ASGI boundary and the CLI) goes through :func:`invoke`.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
