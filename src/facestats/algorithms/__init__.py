"""Statistics engine used by all explorer views.

Pure numpy/python functions with no UI dependency: linear-interpolation
quantiles, bucketed mode, descriptive summaries, the quantile level
classifier, and the per-attribute aggregation driver.
"""

from facestats.algorithms.aggregate import (
    aggregate_stats,
    classify_levels,
    extract_series,
    is_finite_number,
)
from facestats.algorithms.descriptive_stats import (
    QuantileTriple,
    StatisticsSummary,
    compute_mode,
    compute_stats,
    quantile,
    quantile_triple,
)
from facestats.algorithms.levels import Level, LevelResult, classify_level, level_to_shape

__all__ = [
    "Level",
    "LevelResult",
    "QuantileTriple",
    "StatisticsSummary",
    "aggregate_stats",
    "classify_level",
    "classify_levels",
    "compute_mode",
    "compute_stats",
    "extract_series",
    "is_finite_number",
    "level_to_shape",
    "quantile",
    "quantile_triple",
]
