"""``sitelets dispatch`` — dispatch one request without a server.

Async handlers are driven with ``anyio.run``.
"""

import argparse
import sys
from functools import partial

import anyio

from sitelets.cli._resolve import resolve_sitelet
from sitelets.errors import NoRouteMatchedError


def run_dispatch(args: argparse.Namespace) -> None:
    """Dispatch ``args.path`` and print the handler's result."""
    try:
        sitelet = resolve_sitelet(args.sitelet)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    path, _, query = args.path.partition("?")
    if args.query:
        query = f"{query}&{args.query}" if query else args.query
    try:
        result = anyio.run(partial(sitelet.dispatch_async, args.method, path, query))
    except NoRouteMatchedError as exc:
        print(f"Error: {exc.detail}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(result)
