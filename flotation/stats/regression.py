"""Provide regression utilities used by the trend and forecast engine.

This module supports:
- closed-form ordinary least-squares straight-line fits,
- prediction and in-sample goodness of fit (R^2), and
- trailing moving averages used to smooth displayed trends.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class RegressionModel:
    """Fitted straight line ``y = slope * x + intercept``."""

    slope: float
    intercept: float

    def predict(self, x):
        """Evaluate the line at ``x`` (scalar or array)."""
        return predict(self, x)


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionModel:
    """Fit an ordinary least-squares straight line from raw sums.

    Args:
        x (Sequence[float]): Independent variable, for example day offsets
            ``0..n-1``.
        y (Sequence[float]): Dependent variable of the same length. If the
            lengths differ only the first ``min(len(x), len(y))`` pairs are
            used.

    Returns:
        RegressionModel: ``slope = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2)`` and
        ``intercept = (Sy - slope*Sx) / n``.

    Note:
        At least two distinct ``x`` values are needed. Otherwise the slope
        denominator is zero and both coefficients come back as ``nan``;
        no exception is raised.

    References:
        Ordinary least squares linear regression.
    """
    x_arr = np.asarray(x, dtype=float).ravel()
    y_arr = np.asarray(y, dtype=float).ravel()
    n = min(x_arr.size, y_arr.size)
    x_arr = x_arr[:n]
    y_arr = y_arr[:n]

    nf = np.float64(n)
    sum_x = np.sum(x_arr)
    sum_y = np.sum(y_arr)
    sum_xy = np.sum(x_arr * y_arr)
    sum_x2 = np.sum(x_arr * x_arr)

    with np.errstate(divide="ignore", invalid="ignore"):
        slope = (nf * sum_xy - sum_x * sum_y) / (nf * sum_x2 - sum_x * sum_x)
        intercept = (sum_y - slope * sum_x) / nf

    return RegressionModel(slope=float(slope), intercept=float(intercept))


def predict(model: RegressionModel, x):
    """Evaluate ``model`` at ``x``; returns a float for scalar input."""
    with np.errstate(invalid="ignore", over="ignore"):
        y = model.slope * np.asarray(x, dtype=float) + model.intercept
    if np.ndim(y) == 0:
        return float(y)
    return y


def calculate_r2(y: Sequence[float], model: RegressionModel) -> float:
    """Coefficient of determination of ``model`` on the series ``y``.

    The model is re-evaluated at the positional offsets ``0..n-1``, which is
    the axis the forecast engine fits on.

    Returns:
        float: ``1 - SS_res / SS_tot``. ``nan`` for empty input; a constant
        series has ``SS_tot == 0`` and yields ``nan`` or ``-inf``.
    """
    y_arr = np.asarray(y, dtype=float).ravel()
    n = y_arr.size
    if n == 0:
        return math.nan

    y_mean = float(np.mean(y_arr))
    y_hat = predict(model, np.arange(n, dtype=float))
    ss_total = float(np.sum((y_arr - y_mean) ** 2))
    ss_residual = float(np.sum((y_arr - y_hat) ** 2))
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(1.0 - np.float64(ss_residual) / np.float64(ss_total))


def moving_average(values: Sequence[float], window: int = 7) -> List[Optional[float]]:
    """Trailing simple moving average.

    Position ``i`` holds the mean of ``values[i - window + 1 : i + 1]``;
    the first ``window - 1`` positions are ``None`` because the window is
    not yet full.

    Raises:
        ValueError: If ``window`` is not a positive integer.
    """
    if int(window) != window or window < 1:
        raise ValueError(f"window must be a positive integer, got {window!r}")
    series = pd.Series(np.asarray(values, dtype=float).ravel())
    rolled = series.rolling(window=int(window), min_periods=int(window)).mean()
    return [None if pd.isna(v) else float(v) for v in rolled]
