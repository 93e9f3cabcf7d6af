from __future__ import annotations

"""
Multi-axis fusion.

Each active axis contributes a reciprocal-rank score ``1 / (rank + 1)`` to
every item it lists. Scores are summed per item across axes and the result
is sorted by:

  1. summed positional score (desc)
  2. number of axes the item appears in (desc)
  3. last-seen raw relevance score (desc)

A single strong placement keeps an item visible, while items that rank
well on several axes at once still come out on top.
"""

from typing import Dict, List, Sequence

from loguru import logger

from .config import Candidate
from .pipeline_types import FusedItem


def positional_score(rank: int) -> float:
    return 1.0 / (rank + 1)


def accumulate(orderings: Sequence[Sequence[Candidate]]) -> Dict[str, FusedItem]:
    fused: Dict[str, FusedItem] = {}
    for ordering in orderings:
        seen_here = set()
        for rank, cand in enumerate(ordering):
            if cand.id in seen_here:
                continue
            seen_here.add(cand.id)

            item = fused.get(cand.id)
            if item is None:
                fused[cand.id] = FusedItem(
                    id=cand.id,
                    score=positional_score(rank),
                    axis_count=1,
                    original_score=float(cand.score),
                    candidate=cand,
                )
            else:
                item.score += positional_score(rank)
                item.axis_count += 1
                item.original_score = float(cand.score)
                item.candidate = cand
    return fused


def fuse_orderings(orderings: Sequence[Sequence[Candidate]]) -> List[Candidate]:
    """
    Combine per-axis orderings into one global ordering.

    With zero or one ordering there is nothing to fuse and the input is
    passed through (empty, or that axis's own list).
    """
    if not orderings:
        return []
    if len(orderings) == 1:
        return list(orderings[0])

    fused = accumulate(orderings)
    ranked = sorted(
        fused.values(),
        key=lambda f: (f.score, f.axis_count, f.original_score),
        reverse=True,
    )
    logger.debug("Fused {} axes into {} items", len(orderings), len(ranked))
    return [f.candidate for f in ranked]
