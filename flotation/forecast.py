"""
Linear-trend forecasting of daily iron and silica concentrate grades.

Each forecast variable is reduced to its Daily Aggregate Series, fitted with
an ordinary least-squares line over positional day offsets ``0..n-1`` and
projected forward at offsets ``n..n+h-1``. A trailing moving average is
returned alongside for smoothed display only; the projection continues
from the regression line, never from the moving average.

Future calendar dates always step one calendar day past the last date in
the view. Offsets, by contrast, skip dates that had no measurements, so the
two axes need not line up one-to-one when the history has gaps.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .data_processing import as_dataset, daily_aggregate_series, historical_dates
from .schema import FORECAST_VARIABLES, Variable, VariableLike, column_name
from .stats.descriptive import finite_or_none
from .stats.regression import (
    RegressionModel,
    calculate_r2,
    linear_regression,
    moving_average,
    predict,
)

logger = logging.getLogger(__name__)

DEFAULT_MOVING_AVERAGE_WINDOW = 7


class NoDataError(ValueError):
    """Raised when there is no historical data to forecast from."""


@dataclass(frozen=True)
class SeriesForecast:
    """Forecast for one variable.

    Attributes:
        variable: Column label of the forecast variable.
        dates: Dates of the Daily Aggregate Series (surviving dates only).
        values: Daily means aligned with ``dates``.
        moving_average: Trailing moving average of ``values``; leading
            entries are ``None`` until the window fills.
        forecast: Projected values at offsets ``len(values) + i``.
        model: Fitted regression line.
        r2: In-sample R^2, or ``None`` when not computable.
    """

    variable: str
    dates: Tuple[str, ...]
    values: Tuple[float, ...]
    moving_average: Tuple[Optional[float], ...]
    forecast: Tuple[float, ...]
    model: RegressionModel
    r2: Optional[float]

    @property
    def slope(self) -> Optional[float]:
        """Fitted trend per day offset, or ``None`` when not computable."""
        return finite_or_none(self.model.slope)


@dataclass(frozen=True)
class Forecast:
    """Combined forecast result for the dashboard.

    ``historical_dates`` lists every distinct date in the view, including
    dates on which a forecast variable had no measurements; per-variable
    dates are available on each :class:`SeriesForecast`.
    """

    historical_dates: Tuple[str, ...]
    future_dates: Tuple[str, ...]
    series: Dict[str, SeriesForecast]

    def __getitem__(self, variable: VariableLike) -> SeriesForecast:
        return self.series[column_name(variable)]

    @property
    def horizon_days(self) -> int:
        return len(self.future_dates)

    @property
    def historical_iron(self) -> Tuple[float, ...]:
        return self[Variable.IRON_CONCENTRATE].values

    @property
    def historical_silica(self) -> Tuple[float, ...]:
        return self[Variable.SILICA_CONCENTRATE].values

    @property
    def iron_ma(self) -> Tuple[Optional[float], ...]:
        return self[Variable.IRON_CONCENTRATE].moving_average

    @property
    def silica_ma(self) -> Tuple[Optional[float], ...]:
        return self[Variable.SILICA_CONCENTRATE].moving_average

    @property
    def iron_forecast(self) -> Tuple[float, ...]:
        return self[Variable.IRON_CONCENTRATE].forecast

    @property
    def silica_forecast(self) -> Tuple[float, ...]:
        return self[Variable.SILICA_CONCENTRATE].forecast

    @property
    def iron_r2(self) -> Optional[float]:
        return self[Variable.IRON_CONCENTRATE].r2

    @property
    def silica_r2(self) -> Optional[float]:
        return self[Variable.SILICA_CONCENTRATE].r2

    @property
    def iron_slope(self) -> Optional[float]:
        return self[Variable.IRON_CONCENTRATE].slope

    @property
    def silica_slope(self) -> Optional[float]:
        return self[Variable.SILICA_CONCENTRATE].slope


def _validate_horizon(horizon_days) -> int:
    if (
        isinstance(horizon_days, bool)
        or not isinstance(horizon_days, numbers.Integral)
        or horizon_days < 1
    ):
        raise ValueError(
            f"horizon_days must be a positive integer, got {horizon_days!r}"
        )
    return int(horizon_days)


def future_dates(last_date: str, horizon_days: int) -> Tuple[str, ...]:
    """Return the ``horizon_days`` calendar days following ``last_date``."""
    horizon_days = _validate_horizon(horizon_days)
    start = pd.Timestamp(last_date).normalize() + pd.Timedelta(days=1)
    days = pd.date_range(start=start, periods=horizon_days, freq="D")
    return tuple(days.strftime("%Y-%m-%d"))


def forecast_series(
    series: pd.Series,
    horizon_days: int,
    window: int = DEFAULT_MOVING_AVERAGE_WINDOW,
) -> SeriesForecast:
    """Fit and project one Daily Aggregate Series.

    Args:
        series (pandas.Series): Daily means indexed by ISO date, ascending.
        horizon_days (int): Number of future points to project.
        window (int, optional): Moving-average window. Defaults to ``7``.

    Returns:
        SeriesForecast: History, smoothing, projection and fit quality.

    Raises:
        NoDataError: If ``series`` is empty.
        ValueError: If ``horizon_days`` or ``window`` is not a positive
            integer.

    Note:
        A single-point series has an undefined slope; its forecast and R^2
        come back as ``nan``/``None`` rather than raising.
    """
    horizon_days = _validate_horizon(horizon_days)
    name = str(series.name) if series.name is not None else "series"
    if series.empty:
        raise NoDataError(f"No data available to forecast {name!r}.")

    values = series.to_numpy(dtype=float)
    n = values.size
    offsets = np.arange(n, dtype=float)

    model = linear_regression(offsets, values)
    projected = predict(model, np.arange(n, n + horizon_days, dtype=float))

    return SeriesForecast(
        variable=name,
        dates=tuple(str(d) for d in series.index),
        values=tuple(float(v) for v in values),
        moving_average=tuple(moving_average(values, window)),
        forecast=tuple(float(v) for v in projected),
        model=model,
        r2=finite_or_none(calculate_r2(values, model)),
    )


def compute_forecast(
    dataset,
    horizon_days: int,
    window: int = DEFAULT_MOVING_AVERAGE_WINDOW,
    variables: Sequence[VariableLike] = FORECAST_VARIABLES,
) -> Forecast:
    """Project each forecast variable ``horizon_days`` days ahead.

    Args:
        dataset: Dataset View (DataFrame or iterable of records).
        horizon_days (int): Positive number of future days.
        window (int, optional): Moving-average window. Defaults to ``7``.
        variables (Sequence, optional): Variables to forecast. Defaults to
            iron and silica concentrate.

    Returns:
        Forecast: Per-variable results plus the shared date axes.

    Raises:
        NoDataError: If the view is empty or any variable has no
            measurements at all.
        ValueError: If ``horizon_days`` is not a positive integer.
    """
    horizon_days = _validate_horizon(horizon_days)
    dataset = as_dataset(dataset)
    dates = historical_dates(dataset)
    if not dates:
        raise NoDataError("No data available for forecasting.")

    series: Dict[str, SeriesForecast] = {}
    for variable in variables:
        col = column_name(variable)
        daily = daily_aggregate_series(dataset, col)
        series[col] = forecast_series(daily, horizon_days, window=window)
        logger.info(
            "Forecast %s: %d daily points, slope=%s, R2=%s",
            col,
            len(daily),
            series[col].slope,
            series[col].r2,
        )

    return Forecast(
        historical_dates=tuple(dates),
        future_dates=future_dates(dates[-1], horizon_days),
        series=series,
    )
