"""
Statistical engines for flotation process analysis.

This subpackage provides the numerical routines behind the dashboard. All
functions operate on arrays, primitive types and DataFrames; none of them
read global state, so calls with different inputs are independent.

Modules:
    descriptive:
        Mean, population variance and standard deviation, adjusted skewness,
        excess kurtosis, interpolated percentiles, IQR outlier fences and
        histogram binning for a single variable.

    correlation:
        Raw-sum Pearson correlation and the pairwise correlation matrix with
        independent or pairwise sample selection.

    regression:
        Closed-form least-squares line, prediction, R^2 and trailing moving
        averages.

Design Principle:
    This subpackage has no dependencies on plotting/ or I/O modules.
    Numeric degeneracies propagate as ``nan``/``inf`` instead of raising.
"""

from .correlation import CorrelationMatrix, build_correlation_matrix, pearson
from .descriptive import (
    HistogramBins,
    OutlierReport,
    detect_outliers,
    finite_or_none,
    histogram,
    kurtosis,
    mean,
    percentile,
    skewness,
    std_dev,
    variance,
)
from .regression import (
    RegressionModel,
    calculate_r2,
    linear_regression,
    moving_average,
    predict,
)

__all__ = [
    "CorrelationMatrix",
    "build_correlation_matrix",
    "pearson",
    "HistogramBins",
    "OutlierReport",
    "detect_outliers",
    "finite_or_none",
    "histogram",
    "kurtosis",
    "mean",
    "percentile",
    "skewness",
    "std_dev",
    "variance",
    "RegressionModel",
    "calculate_r2",
    "linear_regression",
    "moving_average",
    "predict",
]
