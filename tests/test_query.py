"""Tests for sitelets.http.query — immutable QueryParams."""

import pytest

from sitelets.http.query import QueryParams


class TestQueryParams:
    def test_getitem(self) -> None:
        q = QueryParams("age=5&name=alice")
        assert q["age"] == "5"
        assert q["name"] == "alice"

    def test_bytes(self) -> None:
        assert QueryParams(b"age=5")["age"] == "5"

    def test_leading_question_mark(self) -> None:
        assert QueryParams("?age=5")["age"] == "5"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            QueryParams("a=1")["missing"]

    def test_contains_len_iter(self) -> None:
        q = QueryParams("a=1&b=2")
        assert "a" in q
        assert "c" not in q
        assert len(q) == 2
        assert set(q) == {"a", "b"}

    def test_get_first_value(self) -> None:
        q = QueryParams("tag=a&tag=b")
        assert q.get("tag") == "a"
        assert q.get("missing") is None
        assert q.get("missing", "fallback") == "fallback"

    def test_get_list(self) -> None:
        q = QueryParams("tag=a&tag=b")
        assert q.get_list("tag") == ["a", "b"]
        assert q.get_list("missing") == []

    def test_decoding(self) -> None:
        assert QueryParams("name=al%20ice&x=a+b")["name"] == "al ice"
        assert QueryParams("x=a+b")["x"] == "a b"

    def test_blank_values_kept(self) -> None:
        q = QueryParams("age=")
        assert q["age"] == ""

    def test_blank_values_dropped(self) -> None:
        q = QueryParams("age=", keep_blank_values=False)
        assert "age" not in q

    def test_raw(self) -> None:
        assert QueryParams("?a=1&b=2").raw == "a=1&b=2"

    def test_empty(self) -> None:
        q = QueryParams()
        assert len(q) == 0
        assert q.raw == ""

    def test_immutable(self) -> None:
        q = QueryParams("a=1")
        with pytest.raises(AttributeError):
            q.extra = "x"  # type: ignore[attr-defined]

    def test_repr(self) -> None:
        assert repr(QueryParams("a=1")) == "QueryParams({'a': '1'})"
