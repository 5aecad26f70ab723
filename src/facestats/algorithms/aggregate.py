"""
Aggregate-by-attribute driver.

Applies the per-series algorithms independently to each attribute column of
a dataset given as row records (mapping of column key -> cell value).

Assumptions (documented):
  1. Attribute names are passed in explicitly; which columns are attributes
     is presentation policy (see facestats.dataset.conventions.attribute_keys).
  2. Series extraction keeps only finite real numbers and preserves row order.
     Missing keys, None, strings, booleans, NaN, +/-inf and ints beyond float
     range are dropped, not imputed, so the count can differ between attributes.
  3. No attribute's result depends on any other attribute.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Iterable, Mapping, Optional, Sequence

from facestats.algorithms.descriptive_stats import StatisticsSummary, compute_stats
from facestats.algorithms.levels import LevelResult, classify_level
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

Row = Mapping[str, Any]


def is_finite_number(value: Any) -> bool:
    """True for int/float/numpy real numbers that are finite (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def extract_series(rows: Sequence[Row], attribute: str) -> list[float]:
    """Finite numeric values of one attribute, in row order."""
    return [float(row[attribute]) for row in rows if is_finite_number(row.get(attribute))]


def aggregate_stats(
    rows: Sequence[Row],
    attribute_names: Iterable[str],
) -> dict[str, Optional[StatisticsSummary]]:
    """Compute a StatisticsSummary for each attribute.

    Args:
        rows: Row records.
        attribute_names: Attributes to summarize, in output order.

    Returns:
        Mapping attribute -> summary; None where the attribute has no finite values.
    """
    result: dict[str, Optional[StatisticsSummary]] = {}
    for attr in attribute_names:
        result[attr] = compute_stats(extract_series(rows, attr))
    logger.debug("aggregate_stats: rows=%d attributes=%d", len(rows), len(result))
    return result


def classify_levels(
    rows: Sequence[Row],
    attribute_names: Iterable[str],
) -> dict[str, LevelResult]:
    """Classify the latest value of each attribute.

    Attributes without any finite value are omitted from the result.
    """
    result: dict[str, LevelResult] = {}
    for attr in attribute_names:
        level = classify_level(extract_series(rows, attr))
        if level is None:
            logger.debug("classify_levels: no finite values for %r", attr)
            continue
        result[attr] = level
    logger.debug("classify_levels: rows=%d classified=%d", len(rows), len(result))
    return result
