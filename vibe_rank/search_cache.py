from __future__ import annotations

"""
In-memory TTL cache for retrieval pages.

Keyed by (normalised query, category, limit, offset). Entries expire after
``SEARCH_RESULT_TTL_SECONDS``; once the cache grows past ``max_entries`` only
the most recently stored entries are kept.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from loguru import logger

from .config import DEFAULT_CATEGORY, SEARCH_CACHE_MAX_ENTRIES, SEARCH_RESULT_TTL_SECONDS, SearchPage
from .normalize import concept_key

CacheKey = Tuple[str, str, int, int]


def cache_key(query: str, category: Optional[str], limit: int, offset: int) -> CacheKey:
    return (concept_key(query), (category or DEFAULT_CATEGORY).lower(), int(limit), int(offset))


class SearchCache:
    def __init__(
        self,
        ttl_seconds: float = SEARCH_RESULT_TTL_SECONDS,
        max_entries: int = SEARCH_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, SearchPage]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, query: str, category: Optional[str], limit: int, offset: int) -> Optional[SearchPage]:
        key = cache_key(query, category, limit, offset)
        hit = self._entries.get(key)
        if hit is None:
            return None
        stored_at, page = hit
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return page

    def put(self, query: str, category: Optional[str], limit: int, offset: int, page: SearchPage) -> None:
        key = cache_key(query, category, limit, offset)
        self._entries[key] = (self._clock(), page)
        if len(self._entries) > self.max_entries:
            self._evict()

    def clear(self) -> None:
        self._entries.clear()

    def _evict(self) -> None:
        newest = sorted(self._entries.items(), key=lambda kv: kv[1][0], reverse=True)
        self._entries = dict(newest[: self.max_entries])
        logger.debug("Search cache trimmed to {} entries", len(self._entries))
