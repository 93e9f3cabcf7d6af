from __future__ import annotations

"""
One concept axis: its candidate sets, its slider and its ordering.

``order_axis`` is the pure part: dedup, tier, resolve the stop, rotate.
``AxisResolver`` owns the network side of an axis (concept search, opposite
lookup, opposite search) and reports every arrival through ``on_change`` so
the owner can recompute. Responses that arrive after the axis was reloaded
or destroyed carry an old generation and are dropped.
"""

import asyncio
from typing import Callable, List, Optional

import httpx
from loguru import logger

from .concepts import first_opposite
from .config import DEFAULT_CATEGORY, Candidate
from .dedup import dedup_merge, sort_by_score
from .pipeline_types import Axis, AxisPhase, Polarity, Side
from .retrieval import ServiceError
from .rotation import rotate_tiers
from .stops import clamp_position, resolve_stop
from .tiers import partition_tiers

UPSTREAM_ERRORS = (ServiceError, httpx.HTTPError, asyncio.TimeoutError)


def order_axis(axis: Axis) -> List[Candidate]:
    """
    Ordering for one axis from its current position and candidate sets.

    Depends only on the current values held by ``axis``, never on how they
    got there, so it can be re-run on every change.
    """
    concept = sort_by_score(dedup_merge(axis.concept_candidates))
    stop = resolve_stop(axis.position, axis.polarity)

    if stop.side == Side.CONCEPT:
        ordered = rotate_tiers(partition_tiers(concept), stop.number, Side.CONCEPT)
    else:
        opposite = sort_by_score(dedup_merge(axis.opposite_candidates))
        if opposite:
            ordered = rotate_tiers(partition_tiers(opposite), stop.number, Side.OPPOSITE)
        else:
            # opposite not loaded (or none): keep the slider moving over concept tiers
            ordered = rotate_tiers(partition_tiers(concept), stop.number, Side.OPPOSITE)

    if not ordered:
        return concept
    return ordered


class AxisResolver:
    """
    Lifecycle of a single axis:

        idle -> fetching_concept -> concept_ready -> fetching_opposite -> ready

    The opposite lookup runs alongside the concept search; opposite
    candidates are fetched as soon as a label is known, not when the slider
    first crosses the midpoint. Upstream failures are logged and leave the
    axis with whatever data it already had.
    """

    def __init__(
        self,
        axis: Axis,
        retrieval,
        concepts,
        on_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.axis = axis
        self.retrieval = retrieval
        self.concepts = concepts
        self.phase = AxisPhase.IDLE
        self._on_change = on_change
        self._generation = 0
        self._opposite_pending = False

    @property
    def axis_id(self) -> str:
        return self.axis.axis_id

    @property
    def destroyed(self) -> bool:
        return self.phase == AxisPhase.DESTROYED

    def ordering(self) -> List[Candidate]:
        return order_axis(self.axis)

    def set_position(self, position: float) -> float:
        self.axis.position = clamp_position(position, self.axis.polarity)
        return self.axis.position

    def destroy(self) -> None:
        self._generation += 1
        self.phase = AxisPhase.DESTROYED
        self.axis.concept_candidates = []
        self.axis.opposite_candidates = []

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self.destroyed

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.axis_id)

    async def load(self, category: str = DEFAULT_CATEGORY) -> None:
        """Fetch (or re-fetch for a new category) everything this axis needs."""
        if self.destroyed:
            return
        self._generation += 1
        generation = self._generation
        self.phase = AxisPhase.FETCHING_CONCEPT
        self._opposite_pending = False
        logger.info("Loading axis {} ('{}') [{}]", self.axis_id, self.axis.concept_label, category)

        await asyncio.gather(
            self._load_concept(generation, category),
            self._load_opposite(generation, category),
        )

        if self._is_current(generation):
            self.phase = AxisPhase.READY
            self._changed()

    async def _load_concept(self, generation: int, category: str) -> None:
        try:
            items = await self.retrieval.search_all(self.axis.concept_label, category)
        except UPSTREAM_ERRORS as e:
            logger.warning("Concept search failed for axis {}: {}", self.axis_id, e)
            items = None

        if not self._is_current(generation):
            logger.debug("Dropping stale concept results for axis {}", self.axis_id)
            return

        if items is not None:
            self.axis.concept_candidates = dedup_merge(items)
        if self.phase == AxisPhase.FETCHING_CONCEPT:
            self.phase = AxisPhase.FETCHING_OPPOSITE if self._opposite_pending else AxisPhase.CONCEPT_READY
        self._changed()

    async def _load_opposite(self, generation: int, category: str) -> None:
        label = await self._resolve_opposite_label(generation)
        if label is None or not self._is_current(generation):
            return

        # concept_ready -> fetching_opposite now, or when the concept side lands
        self._opposite_pending = True
        if self.phase == AxisPhase.CONCEPT_READY:
            self.phase = AxisPhase.FETCHING_OPPOSITE
        try:
            items = await self.retrieval.search_all(label, category)
        except UPSTREAM_ERRORS as e:
            logger.warning("Opposite search '{}' failed for axis {}: {}", label, self.axis_id, e)
            return
        finally:
            if self._is_current(generation):
                self._opposite_pending = False

        if not self._is_current(generation):
            logger.debug("Dropping stale opposite results for axis {}", self.axis_id)
            return
        self.axis.opposite_candidates = dedup_merge(items)
        logger.info("Axis {} opposite '{}' has {} candidates", self.axis_id, label, len(items))
        self._changed()

    async def _resolve_opposite_label(self, generation: int) -> Optional[str]:
        try:
            opposites = await self.concepts.lookup_opposites(self.axis.concept_label)
        except UPSTREAM_ERRORS as e:
            logger.warning("Opposite lookup failed for axis {}: {}", self.axis_id, e)
            # keep a label learned on an earlier load, if any
            return self.axis.opposite_label

        if not self._is_current(generation):
            return None

        label = first_opposite(opposites)
        if label is None:
            logger.info("Axis {} ('{}') has no opposite; pinning to concept side",
                        self.axis_id, self.axis.concept_label)
            self.axis.polarity = Polarity.SINGLE
            self.axis.opposite_label = None
            self.axis.opposite_candidates = []
            self.axis.position = clamp_position(self.axis.position, Polarity.SINGLE)
            self._changed()
            return None

        self.axis.opposite_label = label
        self.axis.polarity = Polarity.DUAL
        return label
