"""People — the classic sitelet demo.

A plain path route, a nested structured type reachable through two
alternate patterns, and a type read mostly from the query string.

Run with any ASGI server, or without one::

    sitelets routes app:sitelet
    sitelets dispatch app:sitelet /person/alice/bob/30
    sitelets dispatch app:sitelet "/qperson?first=alice&last=bob&age=5"
"""

from dataclasses import dataclass

from sitelets import Context, SiteletBuilder, endpoint, query


@endpoint("{first}/{last}")
@dataclass(frozen=True, slots=True)
class Name:
    first: str
    last: str


@endpoint("/person/{name}/{age}", "/person/{age}/{name}")
@dataclass(frozen=True, slots=True)
class Person:
    name: Name
    age: int


@dataclass(frozen=True, slots=True)
class QueryName:
    first: str = query()
    last: str = query()


# {name} expands to no path segments: every QueryName field is query-bound
@endpoint("qperson/{name}", method="GET")
@dataclass(frozen=True, slots=True)
class QueryPerson:
    name: QueryName
    age: int | None = query(default=None)


builder = SiteletBuilder()


@builder.route("/hello", name="hello")
def hello(ctx: Context) -> str:
    return "Hello World from Python"


@builder.route(Person)
def show_person(ctx: Context, person: Person) -> str:
    return f"<p>{person.name.first} {person.name.last} is {person.age} years old.</p>"


@builder.route(QueryPerson)
def show_query_person(ctx: Context, person: QueryPerson) -> str:
    if person.age is not None:
        return f"<p>{person.name.first} {person.name.last} is {person.age} years old.</p>"
    return f"<p>{person.name.first} {person.name.last} won't tell their age.</p>"


@builder.route("/people/{first}/{last}", name="links")
async def people_links(ctx: Context) -> dict[str, str]:
    name = Name(ctx.path_params["first"], ctx.path_params["last"])
    return {
        "person": ctx.link(Person(name, 42)),
        "query_person": ctx.link(QueryPerson(QueryName(name.first, name.last))),
    }


sitelet = builder.install()
