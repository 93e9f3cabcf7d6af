from __future__ import annotations

from typing import Dict, Iterable, List

from .config import Candidate


def dedup_merge(candidates: Iterable[Candidate]) -> List[Candidate]:
    """
    Collapse a candidate list to one entry per id, keeping the max score.

    The same image often comes back once per matching source category; only
    its best score should count. First-seen order is kept for the surviving
    entries, so running this on its own output changes nothing.
    """
    best: Dict[str, Candidate] = {}
    for cand in candidates:
        current = best.get(cand.id)
        if current is None or cand.score > current.score:
            best[cand.id] = cand
    return list(best.values())


def sort_by_score(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Stable descending sort on score."""
    return sorted(candidates, key=lambda c: c.score, reverse=True)
