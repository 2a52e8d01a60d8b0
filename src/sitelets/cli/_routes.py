"""``sitelets routes`` — list registered routes.

Prints one row per route in priority order: METHOD, PATTERN (alternates
separated by ``|``), TARGET type and HANDLER.
"""

import argparse
import sys

from sitelets.cli._resolve import resolve_sitelet
from sitelets.routing.route import RouteEntry


def format_routes(entries: tuple[RouteEntry, ...]) -> str:
    """Format route entries as a column-aligned table."""
    rows: list[tuple[str, str, str, str]] = []
    for entry in entries:
        handler_name = getattr(entry.handler, "__qualname__", repr(entry.handler))
        if entry.name:
            handler_name = f"{handler_name} ({entry.name})"
        target = entry.target.__qualname__ if entry.target is not None else "-"
        patterns = " | ".join(p.template for p in entry.patterns)
        rows.append((entry.method or "*", patterns, target, handler_name))

    headers = ("METHOD", "PATTERN", "TARGET", "HANDLER")
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers[:3])]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"

    lines = [fmt.format(*headers)]
    lines.append("-" * min(sum(widths) + 6 + max(len(r[3]) for r in rows), 80))
    lines.extend(fmt.format(*row) for row in rows)
    return "\n".join(lines)


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a sitelet."""
    try:
        sitelet = resolve_sitelet(args.sitelet)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    entries = sitelet.routes
    if not entries:
        print("No routes registered.")
        return

    print(format_routes(entries))
