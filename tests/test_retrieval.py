import asyncio

import httpx
import pytest

from vibe_rank.retrieval import (
    RetrievalClient,
    ServiceError,
    build_http_client,
    parse_candidate,
    parse_search_page,
)
from vibe_rank.search_cache import SearchCache


def _client(handler, **kw):
    http = build_http_client("http://retrieval.test", transport=httpx.MockTransport(handler))
    return RetrievalClient(base_url="http://retrieval.test", http_client=http, cache=SearchCache(), **kw)


def test_parse_candidate_accepts_image_id_and_keeps_payload():
    cand = parse_candidate({"imageId": 42, "score": "0.7", "url": "https://x/img.png"})
    assert cand.id == "42"
    assert cand.score == 0.7
    assert cand.payload == {"url": "https://x/img.png"}

    assert parse_candidate({"score": 0.3}) is None
    assert parse_candidate({"id": "a", "score": "n/a"}) is None


def test_parse_search_page_skips_malformed_rows():
    page = parse_search_page({"images": [{"id": "a", "score": 0.5}, {"nope": 1}], "hasMore": True})
    assert [c.id for c in page.items] == ["a"]
    assert page.has_more is True

    with pytest.raises(ServiceError):
        parse_search_page(["not", "an", "object"])


def test_search_sends_query_and_category():
    seen = {}

    def handler(request):
        seen.update(dict(request.url.params))
        return httpx.Response(200, json={"items": [{"id": "a", "score": 0.9}], "hasMore": False})

    client = _client(handler)
    page = asyncio.run(client.search("warm", "logo", offset=0, limit=10))

    assert seen == {"q": "warm", "category": "logo", "offset": "0", "limit": "10"}
    assert [c.id for c in page.items] == ["a"]


def test_search_uses_cache():
    hits = []

    def handler(request):
        hits.append(request.url)
        return httpx.Response(200, json={"items": [{"id": "a", "score": 0.9}]})

    client = _client(handler)

    async def scenario():
        await client.search("Warm ", "all")
        await client.search("warm", "all")

    asyncio.run(scenario())
    assert len(hits) == 1


def test_search_raises_service_error_on_http_failure():
    client = _client(lambda request: httpx.Response(503, json={"error": "down"}))
    with pytest.raises(ServiceError):
        asyncio.run(client.search("warm"))

    def broken(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ServiceError):
        asyncio.run(_client(broken).search("warm"))


def test_search_all_walks_pages():
    def handler(request):
        offset = int(request.url.params["offset"])
        if offset == 0:
            return httpx.Response(200, json={"items": [{"id": "a", "score": 0.9}, {"id": "b", "score": 0.8}], "hasMore": True})
        return httpx.Response(200, json={"items": [{"id": "c", "score": 0.7}], "hasMore": False})

    client = _client(handler, page_size=2)
    items = asyncio.run(client.search_all("warm"))
    assert [c.id for c in items] == ["a", "b", "c"]


def test_search_all_stops_at_max_pages_and_keeps_partial_results():
    def endless(request):
        offset = int(request.url.params["offset"])
        return httpx.Response(200, json={"items": [{"id": f"i{offset}", "score": 0.5}], "hasMore": True})

    client = _client(endless, page_size=1, max_pages=3)
    assert len(asyncio.run(client.search_all("warm"))) == 3

    def second_page_fails(request):
        if request.url.params["offset"] == "0":
            return httpx.Response(200, json={"items": [{"id": "a", "score": 0.5}], "hasMore": True})
        return httpx.Response(500)

    client = _client(second_page_fails, page_size=1)
    assert [c.id for c in asyncio.run(client.search_all("warm"))] == ["a"]
