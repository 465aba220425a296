"""
Flotation dashboard analysis.

This module is the boundary between the Dataset View and the rendering and
export layers. It computes:
- descriptive statistics for one variable (mean, population spread,
  skewness, excess kurtosis, quartiles, IQR outliers),
- the Pearson correlation matrix over the six process variables,
- the linear-trend forecast of iron and silica grades (see ``forecast``),
- headline KPIs (mean/min/max grades and pH, record count, date span).

Values that cannot be computed (empty input, too few samples for a moment,
zero variance) are returned as ``None`` so callers must decide how to show
them; ``reporting.format_number`` renders them as ``"-"``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from .data_processing import as_dataset, column_values
from .forecast import Forecast, NoDataError, compute_forecast
from .schema import (
    ADVANCED_STAT_VARIABLES,
    CORRELATION_VARIABLES,
    DATE_COLUMN,
    KPI_VARIABLES,
    SHORT_NAMES,
    VariableLike,
    as_variable,
    column_name,
)
from .stats.correlation import CorrelationMatrix, build_correlation_matrix
from .stats.descriptive import (
    OUTLIER_IQR_FACTOR,
    OutlierReport,
    detect_outliers,
    finite_or_none,
    kurtosis,
    mean,
    percentile,
    skewness,
    std_dev,
    variance,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DescriptiveStats",
    "Forecast",
    "KpiSummary",
    "NoDataError",
    "VariableSummary",
    "calculate_advanced_statistics",
    "compute_correlation_matrix",
    "compute_descriptive_stats",
    "compute_forecast",
    "compute_kpis",
    "print_statistics",
]


@dataclass(frozen=True)
class DescriptiveStats:
    """Summary of one variable's non-missing values."""

    n: int
    mean: Optional[float]
    std_dev: Optional[float]
    variance: Optional[float]
    skewness: Optional[float]
    kurtosis: Optional[float]
    percentile_25: Optional[float]
    percentile_50: Optional[float]
    percentile_75: Optional[float]
    outliers: OutlierReport

    @property
    def outlier_percentage(self) -> Optional[float]:
        if self.n == 0:
            return None
        return 100.0 * self.outliers.count / self.n

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class VariableSummary:
    """Headline mean/min/max for one variable."""

    n: int
    mean: Optional[float]
    minimum: Optional[float]
    maximum: Optional[float]


@dataclass(frozen=True)
class KpiSummary:
    total_records: int
    date_range_days: Optional[int]
    variables: Dict[str, VariableSummary]


def compute_descriptive_stats(
    values: Sequence[float], outlier_factor: float = OUTLIER_IQR_FACTOR
) -> DescriptiveStats:
    """Compute the full descriptive summary of ``values``.

    Args:
        values (Sequence[float]): One variable's values with missing entries
            already removed.
        outlier_factor (float, optional): IQR fence multiplier. Defaults to
            ``1.5``.

    Returns:
        DescriptiveStats: Moments, quartiles and the outlier report. Entries
        that are not computable for this sample size are ``None``.
    """
    arr = np.asarray(values, dtype=float).ravel()
    return DescriptiveStats(
        n=int(arr.size),
        mean=finite_or_none(mean(arr)),
        std_dev=finite_or_none(std_dev(arr)),
        variance=finite_or_none(variance(arr)),
        skewness=finite_or_none(skewness(arr)),
        kurtosis=finite_or_none(kurtosis(arr)),
        percentile_25=finite_or_none(percentile(arr, 25)),
        percentile_50=finite_or_none(percentile(arr, 50)),
        percentile_75=finite_or_none(percentile(arr, 75)),
        outliers=detect_outliers(arr, factor=outlier_factor),
    )


def compute_correlation_matrix(
    dataset,
    variables: Sequence[VariableLike] = CORRELATION_VARIABLES,
    pairing: str = "independent",
) -> CorrelationMatrix:
    """Build the Pearson correlation matrix for ``variables``.

    With the default ``"independent"`` pairing each variable is filtered to
    its own non-missing values before correlating, so cells for variables
    with different missingness are computed on samples that are not
    aligned by record. Pass ``pairing="pairwise"`` to correlate only records
    where both variables are present.
    """
    dataset = as_dataset(dataset)
    labels = [column_name(v) for v in variables]
    return build_correlation_matrix(dataset, labels, pairing=pairing, stacklevel=3)


def calculate_advanced_statistics(
    dataset,
    variables: Sequence[VariableLike] = ADVANCED_STAT_VARIABLES,
    outlier_factor: float = OUTLIER_IQR_FACTOR,
) -> Dict[str, DescriptiveStats]:
    """Descriptive statistics per variable, skipping variables with no data."""
    dataset = as_dataset(dataset)
    results: Dict[str, DescriptiveStats] = {}
    for variable in variables:
        values = column_values(dataset, variable)
        if values.size == 0:
            logger.warning("No values for %s; statistics skipped", column_name(variable))
            continue
        results[column_name(variable)] = compute_descriptive_stats(
            values, outlier_factor=outlier_factor
        )
    return results


def compute_kpis(
    dataset, variables: Sequence[VariableLike] = KPI_VARIABLES
) -> KpiSummary:
    """Headline KPIs for the current view.

    Returns:
        KpiSummary: Record count, the inclusive number of calendar days
        between the first and last date, and mean/min/max per variable.
    """
    dataset = as_dataset(dataset)
    summaries: Dict[str, VariableSummary] = {}
    for variable in variables:
        values = column_values(dataset, variable)
        if values.size:
            summaries[column_name(variable)] = VariableSummary(
                n=int(values.size),
                mean=finite_or_none(mean(values)),
                minimum=float(np.min(values)),
                maximum=float(np.max(values)),
            )
        else:
            summaries[column_name(variable)] = VariableSummary(0, None, None, None)

    dates = pd.to_datetime(dataset[DATE_COLUMN], errors="coerce").dropna()
    date_range_days = None
    if not dates.empty:
        date_range_days = int((dates.max() - dates.min()).days) + 1

    return KpiSummary(
        total_records=int(len(dataset)),
        date_range_days=date_range_days,
        variables=summaries,
    )


def print_statistics(
    stats: Dict[str, DescriptiveStats],
    correlation: Optional[CorrelationMatrix] = None,
    forecast: Optional[Forecast] = None,
):
    print("\nDescriptive statistics by variable:")
    if not stats:
        print("  (no data)")
    for col, s in stats.items():
        name = SHORT_NAMES.get(as_variable(col), col)
        if s.mean is None:
            print(f" - {name}: not computable (n={s.n})")
            continue
        print(
            f" - {name}: mean = {s.mean:.3f}, sd = {s.std_dev:.3f}, "
            f"median = {s.percentile_50:.3f}, outliers = {s.outliers.count} (n={s.n})"
        )

    if correlation is not None:
        print("\nCorrelation matrix:")
        print(correlation.to_frame().round(3).to_string())

    if forecast is not None:
        print(f"\nForecast ({forecast.horizon_days} days):")
        for col, sf in forecast.series.items():
            name = SHORT_NAMES.get(as_variable(col), col)
            slope = "n/a" if sf.slope is None else f"{sf.slope:+.4f}"
            r2 = "n/a" if sf.r2 is None else f"{sf.r2:.4f}"
            print(f" - {name}: trend {slope} per day, R2 = {r2}")
