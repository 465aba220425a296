"""Render the historical series, moving averages and linear projections."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np

from ..forecast import Forecast
from ..schema import Variable
from .style import (
    FORECAST_COLORS,
    STYLE,
    color_for,
    finalize_and_save,
    set_global_style,
    thin_date_ticks,
)


def _as_float(values) -> np.ndarray:
    return np.array([np.nan if v is None else v for v in values], dtype=float)


def plot_forecast(forecast: Forecast, output_dir: str = "output") -> str:
    """Plot each forecast variable's history, smoothing and projection.

    Historical points sit on their own dates; projected points sit on the
    forecast's future dates, drawn dashed. The moving average is shown for
    the history only.

    Args:
        forecast (Forecast): Result of ``flotation.forecast.compute_forecast``.
        output_dir (str, optional): Directory for the figure bundle.

    Returns:
        str: Path to ``forecast.png``.
    """
    if not forecast.series:
        raise ValueError("forecast has no series; nothing to plot")

    set_global_style()
    axis_dates = list(forecast.historical_dates) + list(forecast.future_dates)
    position = {d: i for i, d in enumerate(axis_dates)}
    future_x = np.array([position[d] for d in forecast.future_dates], dtype=float)

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_WIDE)
    for col, sf in forecast.series.items():
        x_hist = np.array([position[d] for d in sf.dates], dtype=float)
        color = color_for(col)
        ax.plot(x_hist, sf.values, color=color, marker="o", markersize=2, label=f"{col} (actual)")
        ax.plot(
            x_hist,
            _as_float(sf.moving_average),
            color=color,
            linewidth=STYLE.LINEWIDTH_THIN,
            alpha=0.6,
            label=f"{col} (moving average)",
        )
        forecast_color = FORECAST_COLORS.get(Variable(col), color)
        ax.plot(
            future_x,
            sf.forecast,
            color=forecast_color,
            linestyle="--",
            linewidth=STYLE.LINEWIDTH_FORECAST,
            marker="o",
            label=f"{col} (forecast)",
        )

    if len(forecast.historical_dates):
        ax.axvline(len(forecast.historical_dates) - 0.5, color="#888888", linestyle=":")
    thin_date_ticks(ax, axis_dates)
    ax.set_ylabel("Concentrate grade / %")
    ax.set_title(f"{forecast.horizon_days}-day linear trend forecast")
    ax.legend(loc="best", ncol=2)
    return finalize_and_save(fig, output_dir, "forecast")
