"""Sitelets CLI — route listing and dry-run dispatch.

Entry point registered as ``sitelets`` in ``pyproject.toml``::

    [project.scripts]
    sitelets = "sitelets.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``sitelets`` command."""
    parser = argparse.ArgumentParser(
        prog="sitelets",
        description="Sitelets — typed endpoint routing with link generation.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log registration and matching decisions",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- sitelets routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "sitelet",
        help="Import string (e.g. myapp:sitelet)",
    )

    # -- sitelets dispatch -------------------------------------------------
    dispatch_parser = subparsers.add_parser(
        "dispatch", help="Dispatch a request and print the handler result"
    )
    dispatch_parser.add_argument(
        "sitelet",
        help="Import string (e.g. myapp:sitelet)",
    )
    dispatch_parser.add_argument("path", help="Request path, optionally with ?query")
    dispatch_parser.add_argument("--method", default="GET", help="HTTP method (default GET)")
    dispatch_parser.add_argument("--query", default="", help="Query string, e.g. age=5")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from sitelets.cli._routes import run_routes

        run_routes(args)
    elif args.command == "dispatch":
        from sitelets.cli._dispatch import run_dispatch

        run_dispatch(args)
