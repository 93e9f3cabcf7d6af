from __future__ import annotations

"""
Percentile tiering for one side of an axis.

A score-sorted candidate list is cut into ``TIER_COUNT`` buckets of
``ceil(n / TIER_COUNT)`` items each; tier 1 holds the best matches and the
last tier takes whatever is left (possibly nothing). Short lists simply
leave the trailing buckets empty.
"""

from math import ceil
from typing import Iterable, List

from .config import Candidate, TIER_COUNT
from .dedup import sort_by_score
from .pipeline_types import TierSet


def tier_size(n: int, tier_count: int = TIER_COUNT) -> int:
    if n <= 0:
        return 0
    return int(ceil(n / float(tier_count)))


def partition_tiers(candidates: Iterable[Candidate], tier_count: int = TIER_COUNT) -> TierSet:
    """
    Split candidates into exactly ``tier_count`` buckets, best scores first.

    Input is expected deduplicated and sorted; it is re-sorted (stable) anyway
    so an unsorted list cannot produce out-of-order tiers.
    """
    ordered = sort_by_score(candidates)
    size = tier_size(len(ordered), tier_count)

    tiers: TierSet = []
    for t in range(tier_count - 1):
        tiers.append(ordered[t * size:(t + 1) * size])
    tiers.append(ordered[(tier_count - 1) * size:])
    return tiers


def flatten_tiers(tiers: TierSet) -> List[Candidate]:
    out: List[Candidate] = []
    for tier in tiers:
        out.extend(tier)
    return out
