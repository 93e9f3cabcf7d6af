"""Typed containers shared across ranking modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import Candidate, DEFAULT_AXIS_POSITION

# ten score-ordered buckets, tier 1 first
TierSet = List[List[Candidate]]


class Side(str, Enum):
    CONCEPT = "concept"
    OPPOSITE = "opposite"


class Polarity(str, Enum):
    DUAL = "dual"        # has (or may still get) an opposite
    SINGLE = "single"    # no opposite exists, pinned to the concept half


class AxisPhase(str, Enum):
    IDLE = "idle"
    FETCHING_CONCEPT = "fetching_concept"
    CONCEPT_READY = "concept_ready"
    FETCHING_OPPOSITE = "fetching_opposite"
    READY = "ready"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class Stop:
    """Discretised slider position."""

    side: Side
    number: int


@dataclass
class Axis:
    """State of one active concept filter."""

    axis_id: str
    concept_label: str
    opposite_label: Optional[str] = None
    position: float = DEFAULT_AXIS_POSITION
    polarity: Polarity = Polarity.DUAL
    concept_candidates: List[Candidate] = field(default_factory=list)
    opposite_candidates: List[Candidate] = field(default_factory=list)


@dataclass
class FusedItem:
    """Cross-axis accumulator used only while fusing orderings."""

    id: str
    score: float
    axis_count: int
    original_score: float
    candidate: Candidate
