from __future__ import annotations

"""
Concept metadata: which labels sit at the other end of a concept's spectrum.

Two interchangeable sources share the ``lookup_opposites(label)`` coroutine:

* ConceptMetadataClient
    Asks the concept service (``GET /api/concepts?q=<label>``) and returns the
    ``opposites`` of the concept whose id or label matches exactly. Those
    are concept ids; each one is looked up again for its display label.

* StaticOpposites
    Serves the built-in ``CONCEPT_OPPOSITES`` table, no I/O.

Only the first usable opposite is ever used for an axis (``first_opposite``).
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Sequence

import httpx
from loguru import logger

from .config import CONCEPTS_BASE_URL, CONCEPTS_LOOKUP_PATH
from .constants import CONCEPT_OPPOSITES
from .normalize import concept_key, normalize_label
from .retrieval import ServiceError, build_http_client


def clean_opposites(raw: Iterable[object], concept: str = "") -> List[str]:
    """Drop blanks, self-references and duplicates; keep order."""
    own = concept_key(concept)
    out: List[str] = []
    seen = set()
    for value in raw or []:
        label = normalize_label(str(value)) if value is not None else ""
        key = label.lower()
        if not label or key == own or key in seen:
            continue
        seen.add(key)
        out.append(label)
    return out


def first_opposite(opposites: Sequence[str]) -> Optional[str]:
    for label in opposites:
        label = normalize_label(label)
        if label:
            return label
    return None


def are_opposites(a: str, b: str, table: Optional[Dict[str, List[str]]] = None) -> bool:
    """True if either concept lists the other as an opposite."""
    table = CONCEPT_OPPOSITES if table is None else table
    ka, kb = concept_key(a), concept_key(b)
    return kb in table.get(ka, []) or ka in table.get(kb, [])


class StaticOpposites:
    def __init__(self, table: Optional[Dict[str, List[str]]] = None) -> None:
        self.table = CONCEPT_OPPOSITES if table is None else table

    async def lookup_opposites(self, concept: str) -> List[str]:
        return clean_opposites(self.table.get(concept_key(concept), []), concept)


class ConceptMetadataClient:
    def __init__(
        self,
        base_url: str = CONCEPTS_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self._client = http_client

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_http_client(self.base_url)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _fetch_concepts(self, query: str) -> List[dict]:
        try:
            r = await self._http().get(CONCEPTS_LOOKUP_PATH, params={"q": query})
        except httpx.HTTPError as e:
            raise ServiceError(f"Concept lookup failed for '{query}': {e}") from e
        if r.status_code >= 400:
            raise ServiceError(f"Concept lookup HTTP {r.status_code} for '{query}'")
        try:
            body = r.json()
        except ValueError as e:
            raise ServiceError(f"Concept lookup for '{query}' is not JSON") from e

        concepts = body.get("concepts", []) if isinstance(body, dict) else []
        return [entry for entry in concepts if isinstance(entry, dict)]

    async def resolve_label(self, concept_id: str) -> str:
        """
        Display label for a concept id. Falls back to the id itself when the
        service has no matching entry or the lookup fails.
        """
        key = concept_key(concept_id)
        try:
            entries = await self._fetch_concepts(key)
        except ServiceError as e:
            logger.warning("Label lookup failed for opposite '{}': {}", concept_id, e)
            return concept_id
        for entry in entries:
            if concept_key(str(entry.get("id", ""))) == key:
                label = normalize_label(str(entry.get("label") or ""))
                return label or concept_id
        return concept_id

    async def lookup_opposites(self, concept: str) -> List[str]:
        """
        Ordered opposite labels for ``concept``; empty when the concept is
        unknown or has none. Raises ServiceError when the concept itself
        cannot be looked up.

        The service stores opposites as concept ids, so each id is looked up
        again and replaced by that concept's label.
        """
        key = concept_key(concept)
        if not key:
            return []

        concepts = await self._fetch_concepts(key)
        for entry in concepts:
            ids = {concept_key(str(entry.get("id", ""))), concept_key(str(entry.get("label", "")))}
            if key not in ids:
                continue
            opposite_ids = clean_opposites(entry.get("opposites") or [], concept)
            labels = await asyncio.gather(*(self.resolve_label(oid) for oid in opposite_ids))
            return clean_opposites(labels, concept)

        logger.info("No concept entry matched '{}' ({} candidates)", concept, len(concepts))
        return []
