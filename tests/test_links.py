"""Tests for sitelets.routing.links — instances back into URLs."""

from dataclasses import dataclass

import pytest

from sitelets.declare import endpoint, query
from sitelets.errors import LinkError
from sitelets.routing.links import build_link
from sitelets.routing.table import RouteTable


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


@endpoint("qperson/{name}")
@dataclass(frozen=True, slots=True)
class QueryPerson:
    name: str
    age: int | None = query(default=None)


@endpoint("/files/{path}/{public}")
@dataclass(frozen=True, slots=True)
class File:
    path: str
    public: bool
    size: float = query(default=0.0, name="min-size")


def _handler(*args: object) -> None:
    return None


def _entry(cls: type, patterns: list[str] | None = None):
    table = RouteTable()
    entry = table.register(None, patterns or [], cls, _handler)
    table.compile()
    return table, entry


class TestBuildLink:
    def test_nested(self) -> None:
        _, entry = _entry(Person)
        assert build_link(entry, Person(Name("alice", "bob"), 30)) == "/person/alice/bob/30"

    def test_uses_first_alternate(self) -> None:
        _, entry = _entry(Person, ["/p/{age}/{name}", "/person/{name}/{age}"])
        assert build_link(entry, Person(Name("alice", "bob"), 30)) == "/p/30/alice/bob"

    def test_query_present(self) -> None:
        _, entry = _entry(QueryPerson)
        assert build_link(entry, QueryPerson("alice", 5)) == "/qperson/alice?age=5"

    def test_optional_query_omitted(self) -> None:
        _, entry = _entry(QueryPerson)
        assert build_link(entry, QueryPerson("alice")) == "/qperson/alice"

    def test_percent_encodes_segments(self) -> None:
        _, entry = _entry(File)
        link = build_link(entry, File("a b/c", True, 1.5))
        assert link == "/files/a%20b%2Fc/true?min-size=1.5"

    def test_bool_in_int_field(self) -> None:
        _, entry = _entry(Person)
        assert build_link(entry, Person(Name("a", "b"), True)) == "/person/a/b/1"

    def test_infinite_query_value(self) -> None:
        _, entry = _entry(File)
        assert build_link(entry, File("a", True, float("inf"))) == "/files/a/true?min-size=inf"

    def test_plain_route_without_variables(self) -> None:
        table = RouteTable()
        entry = table.register(None, ["/hello"], None, _handler)
        assert build_link(entry, None) == "/hello"

    def test_root_pattern(self) -> None:
        table = RouteTable()
        entry = table.register(None, ["/"], None, _handler)
        assert build_link(entry, None) == "/"


class TestBuildLinkErrors:
    def test_plain_route_with_variables(self) -> None:
        table = RouteTable()
        entry = table.register(None, ["/greet/{who}"], None, _handler)
        with pytest.raises(LinkError):
            build_link(entry, None)

    def test_empty_path_value(self) -> None:
        _, entry = _entry(QueryPerson)
        with pytest.raises(LinkError) as exc_info:
            build_link(entry, QueryPerson(""))
        assert "name is empty" in str(exc_info.value)

    def test_unset_path_value(self) -> None:
        _, entry = _entry(Person)
        with pytest.raises(LinkError) as exc_info:
            build_link(entry, Person(Name(None, "bob"), 30))  # type: ignore[arg-type]
        assert "name.first is not set" in str(exc_info.value)

    def test_nan_query_value(self) -> None:
        _, entry = _entry(File)
        with pytest.raises(LinkError) as exc_info:
            build_link(entry, File("a", True, float("nan")))
        assert "size: NaN has no URL form" in str(exc_info.value)


class TestRoundTrip:
    @pytest.mark.parametrize(
        ("cls", "instance"),
        [
            (Person, Person(Name("alice", "bob"), 30)),
            (Person, Person(Name("30", "x"), -1)),
            (QueryPerson, QueryPerson("alice", 5)),
            (QueryPerson, QueryPerson("al ice")),
            (File, File("dir/name.txt", False, 2.25)),
            (File, File("100%", True, float("inf"))),
            (File, File("%2541", True, float("-inf"))),
            (Person, Person(Name("a", "b"), True)),
        ],
    )
    def test_match_reproduces_instance(self, cls: type, instance: object) -> None:
        table, entry = _entry(cls)
        path, _, query_string = build_link(entry, instance).partition("?")
        assert table.match("GET", path, query_string).instance == instance
