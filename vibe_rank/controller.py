from __future__ import annotations

"""
Gallery controller: the single owner of query and axis state.

Every slider move, axis add/remove and candidate arrival funnels into
``recompute(axis_id)``, which re-derives that axis's ordering from its
current state and then rebuilds the displayed ordering:

  no axes  -> main query results (score order)
  one axis -> that axis's ordering
  2+ axes  -> positional fusion of the per-axis orderings

Axis orderings are stored as tuples so the fuser only ever reads frozen
snapshots. Listeners registered with ``subscribe`` get the new ordering
after each rebuild.
"""

import asyncio
import itertools
from typing import Callable, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from .axis import UPSTREAM_ERRORS, AxisResolver
from .concepts import ConceptMetadataClient, StaticOpposites
from .config import (
    DEFAULT_CATEGORY,
    REVEAL_PAGE_SIZE,
    USE_STATIC_OPPOSITES,
    AxisView,
    Candidate,
)
from .dedup import dedup_merge, sort_by_score
from .fusion import fuse_orderings
from .normalize import concept_key, normalize_label
from .pipeline_types import Axis
from .retrieval import RetrievalClient
from .stops import resolve_stop

Listener = Callable[[List[Candidate]], None]


class GalleryController:
    def __init__(
        self,
        retrieval=None,
        concepts=None,
        reveal_page_size: int = REVEAL_PAGE_SIZE,
    ) -> None:
        self.retrieval = retrieval if retrieval is not None else RetrievalClient()
        if concepts is None:
            concepts = StaticOpposites() if USE_STATIC_OPPOSITES else ConceptMetadataClient()
        self.concepts = concepts
        self.reveal_page_size = reveal_page_size

        self._axes: Dict[str, AxisResolver] = {}
        self._axis_orderings: Dict[str, Tuple[Candidate, ...]] = {}
        self._axis_ids = itertools.count(1)

        self._query = ""
        self._category = DEFAULT_CATEGORY
        self._query_generation = 0
        self._query_results: Tuple[Candidate, ...] = ()

        self._ordered: Tuple[Candidate, ...] = ()
        self._revealed = reveal_page_size
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def category(self) -> str:
        return self._category

    @property
    def ordered_items(self) -> List[Candidate]:
        return list(self._ordered)

    @property
    def visible_items(self) -> List[Candidate]:
        return list(self._ordered[: self._revealed])

    @property
    def revealed(self) -> int:
        return min(self._revealed, len(self._ordered))

    @property
    def axis_ids(self) -> List[str]:
        return list(self._axes)

    def axis(self, axis_id: str) -> Axis:
        return self._axes[axis_id].axis

    def axis_ordering(self, axis_id: str) -> List[Candidate]:
        if axis_id not in self._axes:
            raise KeyError(axis_id)
        return list(self._axis_orderings.get(axis_id, ()))

    def axis_view(self, axis_id: str) -> AxisView:
        resolver = self._axes[axis_id]
        axis = resolver.axis
        stop = resolve_stop(axis.position, axis.polarity)
        return AxisView(
            axis_id=axis.axis_id,
            concept_label=axis.concept_label,
            opposite_label=axis.opposite_label,
            position=axis.position,
            polarity=axis.polarity.value,
            phase=resolver.phase.value,
            side=stop.side.value,
            stop=stop.number,
            concept_count=len(axis.concept_candidates),
            opposite_count=len(axis.opposite_candidates),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reveal_more(self, count: Optional[int] = None) -> List[Candidate]:
        step = self.reveal_page_size if count is None else max(0, int(count))
        self._revealed = min(self._revealed + step, max(len(self._ordered), self.reveal_page_size))
        return self.visible_items

    def _reset_reveal(self) -> None:
        self._revealed = self.reveal_page_size

    # ------------------------------------------------------------------
    # Main query
    # ------------------------------------------------------------------

    async def set_query(self, query: str, category: Optional[str] = None) -> List[Candidate]:
        """
        Run a new main search. A response that comes back after a newer
        ``set_query`` call is discarded.
        """
        self._query_generation += 1
        generation = self._query_generation
        self._query = normalize_label(query)
        self._reset_reveal()

        category = (category or self._category or DEFAULT_CATEGORY).lower()
        reload_axes: List[AxisResolver] = []
        if category != self._category:
            self._category = category
            reload_axes = list(self._axes.values())

        tasks = [self._fetch_query(generation, self._query, category)]
        tasks.extend(resolver.load(category) for resolver in reload_axes)
        await asyncio.gather(*tasks)
        return self.ordered_items

    async def _fetch_query(self, generation: int, query: str, category: str) -> None:
        results: Optional[List[Candidate]]
        if not query:
            results = []
        else:
            logger.info("Searching '{}' [{}]", query, category)
            try:
                results = await self.retrieval.search_all(query, category)
            except UPSTREAM_ERRORS as e:
                logger.warning("Main search failed for '{}': {}", query, e)
                results = None

        if generation != self._query_generation:
            logger.debug("Dropping stale results for '{}'", query)
            return
        if results is not None:
            self._query_results = tuple(sort_by_score(dedup_merge(results)))
        self._rebuild()

    # ------------------------------------------------------------------
    # Axes
    # ------------------------------------------------------------------

    async def add_axis(self, concept_label: str) -> str:
        """
        Add an axis for ``concept_label`` and load its candidates.
        The axis is visible (with an empty ordering) before loading finishes.
        A concept that already has a live axis returns that axis's id.
        """
        label = normalize_label(concept_label)
        if not label:
            raise ValueError("Concept label must be non-empty")

        key = concept_key(label)
        for existing_id, existing in self._axes.items():
            if concept_key(existing.axis.concept_label) == key:
                logger.info("Concept '{}' already on axis {}", label, existing_id)
                return existing_id

        axis_id = f"axis-{next(self._axis_ids)}"
        resolver = AxisResolver(
            Axis(axis_id=axis_id, concept_label=label),
            retrieval=self.retrieval,
            concepts=self.concepts,
            on_change=self.recompute,
        )
        self._axes[axis_id] = resolver
        self._reset_reveal()
        logger.info("Added axis {} for '{}'", axis_id, label)
        self.recompute(axis_id)

        await resolver.load(self._category)
        return axis_id

    def remove_axis(self, axis_id: str) -> None:
        resolver = self._axes.pop(axis_id)
        resolver.destroy()
        self._axis_orderings.pop(axis_id, None)
        self._reset_reveal()
        logger.info("Removed axis {} ('{}')", axis_id, resolver.axis.concept_label)
        self._rebuild()

    def set_axis_position(self, axis_id: str, position: float) -> float:
        """Move an axis slider. Pure recompute, no network."""
        resolver = self._axes[axis_id]
        clamped = resolver.set_position(position)
        self.recompute(axis_id)
        return clamped

    def recompute(self, axis_id: str) -> None:
        resolver = self._axes.get(axis_id)
        if resolver is None or resolver.destroyed:
            return
        ordering = tuple(resolver.ordering())
        self._axis_orderings[axis_id] = ordering

        stop = resolve_stop(resolver.axis.position, resolver.axis.polarity)
        logger.debug(
            "Recomputed axis {}: side={} stop={} items={}",
            axis_id, stop.side.value, stop.number, len(ordering),
        )
        self._rebuild()

    def _rebuild(self) -> None:
        if not self._axes:
            ordered: List[Candidate] = list(self._query_results)
        else:
            ordered = fuse_orderings([self._axis_orderings.get(a, ()) for a in self._axes])
        self._ordered = tuple(ordered)

        snapshot = list(self._ordered)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning("Ordering listener {} failed: {}", listener, e)

    async def aclose(self) -> None:
        for client in (self.retrieval, self.concepts):
            close = getattr(client, "aclose", None)
            if close is None:
                continue
            try:
                await close()
            except httpx.HTTPError as e:
                logger.warning("Error closing client: {}", e)
