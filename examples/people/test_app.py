"""Tests for the people example."""

import pytest

from sitelets.testing import TestClient


@pytest.mark.anyio
class TestPeopleSite:
    """Verify every route in the people example through the ASGI pipeline."""

    async def test_hello(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/hello")
            assert response.status == 200
            assert response.text == "Hello World from Python"

    async def test_person(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/person/alice/bob/30")
            assert response.status == 200
            assert response.text == "<p>alice bob is 30 years old.</p>"

    async def test_person_alternate_pattern(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/person/30/alice/bob")
            assert response.text == "<p>alice bob is 30 years old.</p>"

    async def test_person_bad_age_is_404(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/person/alice/bob/old")
            assert response.status == 404

    async def test_query_person_with_age(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/qperson?first=alice&last=bob&age=5")
            assert response.text == "<p>alice bob is 5 years old.</p>"

    async def test_query_person_without_age(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/qperson", query={"first": "alice", "last": "bob"})
            assert response.text == "<p>alice bob won't tell their age.</p>"

    async def test_query_person_missing_name_is_404(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/qperson?first=alice")
            assert response.status == 404

    async def test_query_person_is_get_only(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.post("/qperson?first=alice&last=bob")
            assert response.status == 404

    async def test_links(self, example_sitelet) -> None:
        async with TestClient(example_sitelet) as client:
            response = await client.get("/people/alice/bob")
            assert response.status == 200
            assert "application/json" in response.content_type
            assert '"/person/alice/bob/42"' in response.text
            assert '"/qperson?first=alice&last=bob"' in response.text
