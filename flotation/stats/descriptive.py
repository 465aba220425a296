"""Descriptive statistics for a single process variable.

Every function takes an ordered sequence of numbers that the caller has
already stripped of missing values. Nothing here validates sample size:
empty input yields ``nan`` and too-small samples for the higher moments
(skewness needs n >= 3, kurtosis n >= 4) propagate ``nan`` or ``inf``.
Inputs are never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

OUTLIER_IQR_FACTOR = 1.5


@dataclass(frozen=True)
class OutlierReport:
    """IQR-fence outlier summary.

    Attributes:
        count: Number of values strictly outside the fences.
        lower_bound: ``Q1 - factor * IQR``.
        upper_bound: ``Q3 + factor * IQR``.
        values: The outlying values in their original input order.
    """

    count: int
    lower_bound: float
    upper_bound: float
    values: Tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HistogramBins:
    """Equal-width histogram of one variable."""

    edges: Tuple[float, ...]
    counts: Tuple[int, ...]
    labels: Tuple[str, ...]


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float).ravel()


def finite_or_none(value) -> Optional[float]:
    """Return ``value`` as a float, or ``None`` when missing or non-finite."""
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def mean(values: Sequence[float]) -> float:
    """Return the arithmetic mean, or ``nan`` for empty input."""
    arr = _as_array(values)
    if arr.size == 0:
        return math.nan
    return float(np.mean(arr))


def variance(values: Sequence[float]) -> float:
    """Return the population variance (divide by n), or ``nan`` when empty."""
    arr = _as_array(values)
    if arr.size == 0:
        return math.nan
    return float(np.var(arr, ddof=0))


def std_dev(values: Sequence[float]) -> float:
    """Return the population standard deviation."""
    return float(np.sqrt(variance(values)))


def _standardized(arr: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return (arr - mean(arr)) / std_dev(arr)


def skewness(values: Sequence[float]) -> float:
    """Adjusted Fisher-Pearson standardized moment coefficient.

    ``(n / ((n - 1)(n - 2))) * sum(((x - mean) / sd) ** 3)`` with the
    population standard deviation. Undefined for n < 3; the division by zero
    is left to propagate as ``nan``/``inf``.
    """
    arr = _as_array(values)
    if arr.size == 0:
        return math.nan
    n = np.float64(arr.size)
    z = _standardized(arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(n / ((n - 1) * (n - 2)) * np.sum(z**3))


def kurtosis(values: Sequence[float]) -> float:
    """Sample excess kurtosis.

    ``(n(n + 1) / ((n - 1)(n - 2)(n - 3))) * sum(z ** 4)
    - 3(n - 1)^2 / ((n - 2)(n - 3))`` with ``z`` standardized by the
    population standard deviation. Undefined for n < 4.
    """
    arr = _as_array(values)
    if arr.size == 0:
        return math.nan
    n = np.float64(arr.size)
    z = _standardized(arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = (n * (n + 1)) / ((n - 1) * (n - 2) * (n - 3))
        correction = (3 * (n - 1) ** 2) / ((n - 2) * (n - 3))
        return float(scale * np.sum(z**4) - correction)


def percentile(values: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile of a sorted copy of ``values``.

    The fractional rank is ``(p / 100) * (n - 1)``; the result blends the
    neighbouring order statistics at ``floor`` and ``ceil`` of that rank.

    Args:
        values: Numbers to summarise. Not modified.
        p: Percentile in ``[0, 100]``.

    Returns:
        float: Interpolated value, or ``nan`` for empty input.

    Raises:
        ValueError: If ``p`` is outside ``[0, 100]``.
    """
    p = float(p)
    if not 0.0 <= p <= 100.0:
        raise ValueError(f"Percentile must be within [0, 100], got {p!r}")

    ordered = np.sort(_as_array(values))
    if ordered.size == 0:
        return math.nan

    index = (p / 100.0) * (ordered.size - 1)
    lower = int(math.floor(index))
    upper = int(math.ceil(index))
    weight = index - lower
    return float(ordered[lower] * (1.0 - weight) + ordered[upper] * weight)


def detect_outliers(
    values: Sequence[float], factor: float = OUTLIER_IQR_FACTOR
) -> OutlierReport:
    """Flag values outside the Tukey fences ``[Q1 - k*IQR, Q3 + k*IQR]``.

    Args:
        values: Numbers to screen, in their original order.
        factor: Fence multiplier ``k``. Defaults to ``1.5``.

    Returns:
        OutlierReport: Count, fences and the outlying values themselves.
    """
    arr = _as_array(values)
    q1 = percentile(arr, 25)
    q3 = percentile(arr, 75)
    iqr = q3 - q1
    lower_bound = q1 - factor * iqr
    upper_bound = q3 + factor * iqr

    outliers = arr[(arr < lower_bound) | (arr > upper_bound)]
    return OutlierReport(
        count=int(outliers.size),
        lower_bound=float(lower_bound),
        upper_bound=float(upper_bound),
        values=tuple(float(v) for v in outliers),
    )


def histogram(values: Sequence[float], bins: int = 20) -> HistogramBins:
    """Count values in ``bins`` equal-width bins spanning ``[min, max]``.

    The last bin is closed on the right so the maximum is counted. A
    constant sample has zero-width bins and falls entirely in the last one.
    Labels are the bin start values to two decimals.
    """
    if int(bins) < 1:
        raise ValueError("bins must be a positive integer.")
    arr = _as_array(values)
    if arr.size == 0:
        return HistogramBins(edges=(), counts=(), labels=())

    lo, hi = float(arr.min()), float(arr.max())
    if lo == hi:
        # Zero-width bins: only the closed last bin can hold the values.
        counts = [0] * int(bins)
        counts[-1] = int(arr.size)
        return HistogramBins(
            edges=(lo,) * (int(bins) + 1),
            counts=tuple(counts),
            labels=(f"{lo:.2f}",) * int(bins),
        )

    counts, edges = np.histogram(arr, bins=int(bins), range=(arr.min(), arr.max()))
    return HistogramBins(
        edges=tuple(float(e) for e in edges),
        counts=tuple(int(c) for c in counts),
        labels=tuple(f"{e:.2f}" for e in edges[:-1]),
    )
