"""Per-dispatch context handed to handlers.

Handlers receive a ``Context`` as their first argument::

    def show_person(ctx: Context, person: Person) -> str:
        return f'<a href="{ctx.link(person)}">{person.name.first}</a>'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sitelets.http.query import QueryParams
from sitelets.routing.route import MatchResult, RouteEntry

if TYPE_CHECKING:
    from sitelets.sitelet import Sitelet


@dataclass(frozen=True, slots=True)
class Context:
    """What a handler knows about the request it is serving."""

    sitelet: Sitelet
    method: str
    path: str
    match: MatchResult

    @property
    def route(self) -> RouteEntry:
        return self.match.entry

    @property
    def query(self) -> QueryParams:
        return self.match.query

    @property
    def path_params(self) -> dict[str, str]:
        """Raw captured segments keyed by variable name."""
        return self.match.path_params

    def link(self, instance: Any) -> str:
        """Generate the URL of a structured instance on this sitelet."""
        return self.sitelet.build_link(instance)
