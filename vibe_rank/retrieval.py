from __future__ import annotations
"""
Async client for the retrieval service (embedding search over the gallery).

The service answers ``GET /api/search?q=&category=&offset=&limit=`` with
``{"images": [...], "hasMore": bool}`` (``items`` is accepted too). Each
result needs an id (``id`` or ``imageId``) and a ``score``; every other
field is kept as opaque display payload.

This client adds:
- a shared ``httpx.AsyncClient`` with timeouts and capped redirects
- a TTL page cache in front of the network
- ``search_all`` to walk pages while the service reports more
"""

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from .config import (
    DEFAULT_CATEGORY,
    HTTP_CONNECT_TIMEOUT,
    HTTP_MAX_REDIRECTS,
    HTTP_READ_TIMEOUT,
    HTTP_USER_AGENT,
    RETRIEVAL_BASE_URL,
    RETRIEVAL_SEARCH_PATH,
    SEARCH_MAX_PAGES,
    SEARCH_PAGE_SIZE,
    Candidate,
    SearchPage,
)
from .search_cache import SearchCache


class ServiceError(RuntimeError):
    """An upstream service call failed or answered with something unusable."""


def build_http_client(base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        headers={"User-Agent": HTTP_USER_AGENT},
        follow_redirects=True,
        timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
        max_redirects=HTTP_MAX_REDIRECTS,
        transport=transport,
    )


def parse_candidate(raw: Dict[str, Any]) -> Optional[Candidate]:
    """Turn one raw result dict into a Candidate, or None if it has no id/score."""
    if not isinstance(raw, dict):
        return None
    item_id = raw.get("id", raw.get("imageId"))
    score = raw.get("score", raw.get("baseScore"))
    if item_id is None or score is None:
        return None
    try:
        score = float(score)
    except (TypeError, ValueError):
        return None
    payload = {k: v for k, v in raw.items() if k not in ("id", "imageId", "score")}
    return Candidate(id=str(item_id), score=score, payload=payload)


def parse_search_page(body: Any) -> SearchPage:
    if not isinstance(body, dict):
        raise ServiceError(f"Search response is not an object: {type(body).__name__}")
    raw_items = body.get("items")
    if raw_items is None:
        raw_items = body.get("images", [])
    if not isinstance(raw_items, list):
        raise ServiceError("Search response 'items' is not a list")

    items: List[Candidate] = []
    skipped = 0
    for raw in raw_items:
        cand = parse_candidate(raw)
        if cand is None:
            skipped += 1
            continue
        items.append(cand)
    if skipped:
        logger.warning("Skipped {} malformed search results", skipped)

    has_more = bool(body.get("hasMore", body.get("has_more", False)))
    return SearchPage(items=items, has_more=has_more)


class RetrievalClient:
    """
    Thin async wrapper around the retrieval service.
    """

    def __init__(
        self,
        base_url: str = RETRIEVAL_BASE_URL,
        cache: Optional[SearchCache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        page_size: int = SEARCH_PAGE_SIZE,
        max_pages: int = SEARCH_MAX_PAGES,
    ) -> None:
        self.base_url = base_url
        self.cache = cache if cache is not None else SearchCache()
        self.page_size = page_size
        self.max_pages = max_pages
        self._client = http_client

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_http_client(self.base_url)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search(
        self,
        query: str,
        category: str = DEFAULT_CATEGORY,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> SearchPage:
        """
        Fetch one page of results. Raises ServiceError on any upstream problem.
        """
        limit = self.page_size if limit is None else limit
        cached = self.cache.get(query, category, limit, offset)
        if cached is not None:
            logger.debug("Search cache hit for '{}' [{}] offset={}", query, category, offset)
            return cached

        params = {"q": query, "category": category or DEFAULT_CATEGORY, "offset": offset, "limit": limit}
        try:
            r = await self._http().get(RETRIEVAL_SEARCH_PATH, params=params)
        except httpx.HTTPError as e:
            raise ServiceError(f"Search request failed for '{query}': {e}") from e

        if r.status_code >= 400:
            raise ServiceError(f"Search HTTP {r.status_code} for '{query}'")
        try:
            body = r.json()
        except ValueError as e:
            raise ServiceError(f"Search response for '{query}' is not JSON") from e

        page = parse_search_page(body)
        self.cache.put(query, category, limit, offset, page)
        return page

    async def search_all(self, query: str, category: str = DEFAULT_CATEGORY) -> List[Candidate]:
        """
        Walk pages while ``has_more`` holds, up to ``max_pages``.

        A failure on a later page keeps the pages already fetched; a failure
        on the first page propagates.
        """
        items: List[Candidate] = []
        offset = 0
        for page_no in range(max(1, self.max_pages)):
            try:
                page = await self.search(query, category, offset=offset, limit=self.page_size)
            except ServiceError:
                if page_no == 0:
                    raise
                logger.warning("Stopping pagination for '{}' after {} pages", query, page_no)
                break
            items.extend(page.items)
            if not page.has_more or not page.items:
                break
            offset += len(page.items)
        logger.info("Retrieved {} candidates for '{}' [{}]", len(items), query, category)
        return items
