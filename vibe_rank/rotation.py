from __future__ import annotations

"""
Tier rotation: turns a side's tier set plus a stop into one flat ordering.

Each stop presents the tiers as a cyclic rotation, so moving the slider by a
single stop moves exactly one tier from the front of the list to the back
(or back to the front) and leaves the relative order of everything else
alone. That keeps the grid from reshuffling wholesale while a slider is
being dragged.

    concept side   stop 10 -> offset 0  [t1 .. t10]
                   stop 6  -> offset 4  [t5 .. t10, t1 .. t4]
    opposite side  stop 1  -> offset 0  [t1 .. t10]
                   stop 5  -> offset 4  [t5 .. t10, t1 .. t4]
"""

from typing import List

from .config import Candidate, STOP_COUNT, TIER_COUNT
from .pipeline_types import Side, TierSet
from .tiers import flatten_tiers


def rotation_offset(stop: int, side: Side) -> int:
    """Number of leading tiers pushed to the back for ``stop`` on ``side``."""
    if not 1 <= stop <= STOP_COUNT:
        raise ValueError(f"Stop must be in [1, {STOP_COUNT}], got {stop}")
    if side == Side.CONCEPT:
        offset = STOP_COUNT - stop
    else:
        offset = stop - 1
    return offset % TIER_COUNT


def rotated_tier_order(tiers: TierSet, stop: int, side: Side) -> TierSet:
    if len(tiers) != TIER_COUNT:
        raise ValueError(f"Expected {TIER_COUNT} tiers, got {len(tiers)}")
    k = rotation_offset(stop, side)
    return list(tiers[k:]) + list(tiers[:k])


def rotate_tiers(tiers: TierSet, stop: int, side: Side) -> List[Candidate]:
    """
    Flatten ``tiers`` in the rotated order for ``stop``.

    Pure: the same ``(tiers, stop, side)`` always gives the same list. An
    empty result is possible (all tiers empty); callers decide the fallback.
    """
    return flatten_tiers(rotated_tier_order(tiers, stop, side))
