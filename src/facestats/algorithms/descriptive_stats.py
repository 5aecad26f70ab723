"""
Descriptive statistics for one numeric series: pure numpy/python.

Used by every view that shows statistics (statistics table, faces); views never
compute statistics themselves.

Conventions (documented):
  1. Quantiles use linear interpolation between order statistics:
     pos = (n-1)*p, interpolate between sorted[floor(pos)] and sorted[ceil(pos)].
  2. Variance is the Bessel-corrected sample variance (n-1); for n == 1 it is 0.
  3. A statistic that is undefined for the sample size or shape is None, never
     NaN or inf. An empty series has no summary at all (None).
  4. The mode buckets values at 3 decimals; ties go to the bucket seen first.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional, Sequence

import numpy as np

# Decimal places used to bucket values for the mode.
MODE_DECIMALS = 3

_MODE_QUANTUM = Decimal(1).scaleb(-MODE_DECIMALS)
_FIXED_POINT_LIMIT = 1e21
# 22 integer digits + MODE_DECIMALS always fit
_MODE_PRECISION = 40

# Summary fields in display order (statistics table column order).
SUMMARY_FIELDS = [
    "count", "mean", "median", "mode", "std_dev",
    "q1", "q2", "q3", "min", "max", "range", "skewness", "kurtosis",
]


@dataclass(frozen=True)
class QuantileTriple:
    """Lower quartile, median and upper quartile of a series (q1 <= q2 <= q3)."""

    q1: float
    q2: float
    q3: float


@dataclass(frozen=True)
class StatisticsSummary:
    """Descriptive statistics of one attribute.

    Attributes:
        count: Number of finite values the summary was computed from.
        mean: Arithmetic mean.
        median: 0.5 quantile (same value as q2).
        mode: Most frequent value after rounding to MODE_DECIMALS.
        std_dev: Sample standard deviation (0.0 when count == 1).
        q1, q2, q3: 0.25 / 0.5 / 0.75 quantiles (linear interpolation).
        min, max, range: Extremes and max - min.
        skewness: Adjusted Fisher-Pearson coefficient; None unless count > 2 and std_dev != 0.
        kurtosis: Sample excess kurtosis; None unless count > 3 and std_dev != 0.
    """

    count: int
    mean: float
    median: float
    mode: float
    std_dev: float
    q1: float
    q2: float
    q3: float
    min: float
    max: float
    range: float
    skewness: Optional[float]
    kurtosis: Optional[float]

    @property
    def quantiles(self) -> QuantileTriple:
        return QuantileTriple(self.q1, self.q2, self.q3)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict keyed by SUMMARY_FIELDS."""
        return asdict(self)


# -----------------------------------------------------------------------------
# Quantile
# -----------------------------------------------------------------------------


def quantile(sorted_values: Sequence[float], p: float) -> Optional[float]:
    """
    Linear-interpolation quantile of an ascending series.

    The caller sorts; this function does not check the order.

    Args:
        sorted_values: Values sorted ascending.
        p: Probability in [0, 1].

    Returns:
        The quantile, or None when sorted_values is empty.
    """
    n = len(sorted_values)
    if n == 0:
        return None
    if n == 1:
        return float(sorted_values[0])

    pos = (n - 1) * p
    lower_index = math.floor(pos)
    upper_index = math.ceil(pos)
    if lower_index == upper_index:
        return float(sorted_values[lower_index])

    lower = float(sorted_values[lower_index])
    upper = float(sorted_values[upper_index])
    return lower + (upper - lower) * (pos - lower_index)


def quantile_triple(sorted_values: Sequence[float]) -> Optional[QuantileTriple]:
    """q1/q2/q3 of an ascending series, or None when it is empty."""
    if len(sorted_values) == 0:
        return None
    return QuantileTriple(
        q1=quantile(sorted_values, 0.25),
        q2=quantile(sorted_values, 0.5),
        q3=quantile(sorted_values, 0.75),
    )


# -----------------------------------------------------------------------------
# Mode
# -----------------------------------------------------------------------------


def mode_bucket(value: float) -> float:
    """Round value to MODE_DECIMALS, ties away from zero.

    Rounds the exact binary value (Decimal(value)): 0.0625 is an exact tie and
    buckets to 0.063, -0.0625 to -0.063. Values with magnitude >= 1e21 are
    returned unchanged, as fixed-point formatting leaves them in exponent form.
    """
    v = float(value)
    if abs(v) >= _FIXED_POINT_LIMIT:
        return v
    with localcontext() as ctx:
        ctx.prec = _MODE_PRECISION
        return float(Decimal(v).quantize(_MODE_QUANTUM, rounding=ROUND_HALF_UP))


def compute_mode(series: Sequence[float]) -> Optional[float]:
    """
    Most frequent bucketed value of series.

    A strict tie resolves to the bucket that was inserted first, i.e. the tied
    value that appears first in series. -0.0 and 0.0 share one bucket.

    Returns:
        The bucket value, or None for an empty series.
    """
    if len(series) == 0:
        return None

    freq: dict[float, int] = {}
    for v in series:
        key = mode_bucket(v)
        freq[key] = freq.get(key, 0) + 1

    best_value: Optional[float] = None
    best_count = 0
    for value, count in freq.items():
        if count > best_count:
            best_count = count
            best_value = value
    return best_value


# -----------------------------------------------------------------------------
# Summary
# -----------------------------------------------------------------------------


def _finite_or_none(x: float) -> Optional[float]:
    return x if math.isfinite(x) else None


def compute_stats(series: Sequence[float]) -> Optional[StatisticsSummary]:
    """
    Compute the StatisticsSummary of a series of finite numbers.

    Args:
        series: Finite values in original row order (see aggregate.extract_series).

    Returns:
        StatisticsSummary, or None when series is empty.
    """
    n = len(series)
    if n == 0:
        return None

    x = np.asarray(series, dtype=float)
    sorted_x = np.sort(x)
    mean = float(np.sum(x)) / n

    q = quantile_triple(sorted_x)
    min_ = float(sorted_x[0])
    max_ = float(sorted_x[-1])

    # central moments relative to the mean, over the unsorted series
    d = x - mean
    d2 = d * d
    m2 = float(np.sum(d2))
    m3 = float(np.sum(d2 * d))
    m4 = float(np.sum(d2 * d2))

    variance = m2 / (n - 1) if n > 1 else 0.0
    std_dev = math.sqrt(variance)
    spread_ok = std_dev != 0 and math.isfinite(std_dev)

    skewness: Optional[float] = None
    if n > 2 and spread_ok:
        skewness = _finite_or_none((n * m3) / ((n - 1) * (n - 2) * std_dev ** 3))

    kurtosis: Optional[float] = None
    if n > 3 and spread_ok:
        g2 = (
            (n * (n + 1)) / ((n - 1) * (n - 2) * (n - 3)) * (m4 / std_dev ** 4)
            - (3 * (n - 1) * (n - 1)) / ((n - 2) * (n - 3))
        )
        kurtosis = _finite_or_none(g2)

    return StatisticsSummary(
        count=n,
        mean=mean,
        median=q.q2,
        mode=compute_mode(series),
        std_dev=std_dev,
        q1=q.q1,
        q2=q.q2,
        q3=q.q3,
        min=min_,
        max=max_,
        range=max_ - min_,
        skewness=skewness,
        kurtosis=kurtosis,
    )
