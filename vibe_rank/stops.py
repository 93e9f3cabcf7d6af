from __future__ import annotations

import math

from .config import FIRST_CONCEPT_STOP, POSITION_MIDPOINT, STOP_COUNT
from .pipeline_types import Polarity, Side, Stop


def clamp_position(position: float, polarity: Polarity = Polarity.DUAL) -> float:
    """
    Clamp a raw slider value into the range the axis allows.
    Single-pole axes live on the concept half only.
    """
    try:
        pos = float(position)
    except (TypeError, ValueError):
        pos = 1.0
    if math.isnan(pos):
        pos = 1.0
    low = POSITION_MIDPOINT if polarity == Polarity.SINGLE else 0.0
    return min(1.0, max(low, pos))


def stop_for_position(position: float) -> int:
    """
    Map a position in [0, 1] to a stop in [1, STOP_COUNT].
    1.0 is its own stop (the top one) rather than an eleventh bucket.
    """
    pos = min(1.0, max(0.0, float(position)))
    if pos >= 1.0:
        return STOP_COUNT
    stop = int(math.floor(pos * STOP_COUNT)) + 1
    return min(STOP_COUNT, max(1, stop))


def resolve_stop(position: float, polarity: Polarity = Polarity.DUAL) -> Stop:
    """
    Resolve ``(side, stop)`` for an axis position.

    Dual axes: stops 1-5 are the opposite side and 6-10 the concept side, so
    the midpoint itself (stop 6) already counts as concept.
    Single axes: the concept half [0.5, 1] is stretched over all ten stops and
    the side is always concept.
    """
    if polarity == Polarity.SINGLE:
        pos = clamp_position(position, Polarity.SINGLE)
        remapped = (pos - POSITION_MIDPOINT) / (1.0 - POSITION_MIDPOINT)
        return Stop(side=Side.CONCEPT, number=stop_for_position(remapped))

    number = stop_for_position(clamp_position(position, Polarity.DUAL))
    side = Side.CONCEPT if number >= FIRST_CONCEPT_STOP else Side.OPPOSITE
    return Stop(side=side, number=number)
