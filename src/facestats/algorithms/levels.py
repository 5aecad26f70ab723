"""
Quantile level classifier for the glyph (Chernoff face) view.

The latest observation of a series is placed into one of three coarse
levels relative to the series' own quartiles:

    last <= q1        -> LOW
    q1 < last <= q3   -> MID
    last > q3         -> HIGH

The low/mid boundary is inclusive at q1 and the mid/high split is against q3,
so the middle half of the historical spread (including q2) is MID.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from facestats.algorithms.descriptive_stats import quantile_triple


class Level(Enum):
    """Coarse quantile level of the latest observation."""
    LOW = "low"
    MID = "mid"
    HIGH = "high"


# Glyph shape drawn for each level.
LEVEL_SHAPES: dict[Level, str] = {
    Level.LOW: "square",
    Level.MID: "circle",
    Level.HIGH: "triangle",
}


@dataclass(frozen=True)
class LevelResult:
    level: Level
    q1: float
    q2: float
    q3: float
    last_value: float

    @property
    def shape(self) -> str:
        return level_to_shape(self.level)


def level_for_value(value: float, q1: float, q3: float) -> Level:
    """Level of value given the quartiles q1 <= q3."""
    if value <= q1:
        return Level.LOW
    if value <= q3:
        return Level.MID
    return Level.HIGH


def classify_level(series: Sequence[float]) -> Optional[LevelResult]:
    """Classify the last element of series (original order) against its quartiles.

    Args:
        series: Finite values in original row order.

    Returns:
        LevelResult, or None for an empty series.
    """
    if len(series) == 0:
        return None
    q = quantile_triple(np.sort(np.asarray(series, dtype=float)))
    last_value = float(series[-1])
    return LevelResult(
        level=level_for_value(last_value, q.q1, q.q3),
        q1=q.q1,
        q2=q.q2,
        q3=q.q3,
        last_value=last_value,
    )


def level_to_shape(level: Level) -> str:
    """'square' | 'circle' | 'triangle' for LOW | MID | HIGH."""
    return LEVEL_SHAPES[level]
