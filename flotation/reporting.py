"""Format analysis results into display strings and report tables.

This module is used after numerical analysis. It never recomputes
statistics; it only turns result objects into strings and DataFrames, and
renders every value that is not computable as ``"-"``.
"""

from __future__ import annotations

import math
import numbers
from typing import Dict, Optional

import pandas as pd

from .analysis import DescriptiveStats, KpiSummary
from .forecast import Forecast
from .schema import SHORT_NAMES, Variable, as_variable
from .stats.correlation import CorrelationMatrix

PLACEHOLDER = "-"


def format_number(value, decimals: int = 2) -> str:
    """Format a number to fixed decimals, or ``"-"`` when not computable.

    Args:
        value: Number, ``None`` or ``nan``. Non-numeric values are returned
            via ``str``.
        decimals (int, optional): Decimal places. Defaults to ``2``.

    Returns:
        str: Display string.
    """
    if value is None:
        return PLACEHOLDER
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if not math.isfinite(float(value)):
            return PLACEHOLDER
        return f"{float(value):.{decimals}f}"
    return str(value)


def format_trend(slope: Optional[float], decimals: int = 4) -> str:
    """Format a per-day trend with an explicit sign and a ``%`` suffix."""
    text = format_number(slope, decimals)
    if text == PLACEHOLDER:
        return text
    sign = "+" if float(slope) > 0 else ""
    return f"{sign}{text}%"


def _display_name(column: str) -> str:
    try:
        return SHORT_NAMES[as_variable(column)]
    except ValueError:
        return column


def statistics_table(stats: Dict[str, DescriptiveStats], decimals: int = 3) -> pd.DataFrame:
    """One row per variable with formatted descriptive statistics."""
    rows = []
    for col, s in stats.items():
        pct = s.outlier_percentage
        rows.append(
            {
                "Variable": _display_name(col),
                "n": s.n,
                "Mean": format_number(s.mean, decimals),
                "Std Dev": format_number(s.std_dev, decimals),
                "Variance": format_number(s.variance, decimals),
                "Skewness": format_number(s.skewness, decimals),
                "Kurtosis": format_number(s.kurtosis, decimals),
                "25th Percentile": format_number(s.percentile_25, decimals),
                "Median": format_number(s.percentile_50, decimals),
                "75th Percentile": format_number(s.percentile_75, decimals),
                "Outliers (IQR)": (
                    f"{s.outliers.count} ({format_number(pct, 1)}%)"
                    if pct is not None
                    else PLACEHOLDER
                ),
            }
        )
    return pd.DataFrame.from_records(
        rows,
        columns=[
            "Variable",
            "n",
            "Mean",
            "Std Dev",
            "Variance",
            "Skewness",
            "Kurtosis",
            "25th Percentile",
            "Median",
            "75th Percentile",
            "Outliers (IQR)",
        ],
    )


def correlation_table(correlation: CorrelationMatrix, decimals: int = 3) -> pd.DataFrame:
    """Labelled correlation matrix rounded for display."""
    return correlation.to_frame().round(decimals)


def forecast_table(forecast: Forecast) -> pd.DataFrame:
    """Future dates with iron and silica projections formatted to 2 decimals."""
    iron = forecast[Variable.IRON_CONCENTRATE].forecast
    silica = forecast[Variable.SILICA_CONCENTRATE].forecast
    return pd.DataFrame(
        {
            "Date": list(forecast.future_dates),
            "Iron Forecast (%)": [format_number(v) for v in iron],
            "Silica Forecast (%)": [format_number(v) for v in silica],
        }
    )


def forecast_metrics(forecast: Forecast) -> pd.DataFrame:
    """R^2 and daily trend per forecast variable."""
    rows = []
    for col, sf in forecast.series.items():
        rows.append(
            {
                "Variable": _display_name(col),
                "R2": format_number(sf.r2, 4),
                "Trend per day": format_trend(sf.slope),
            }
        )
    return pd.DataFrame.from_records(rows, columns=["Variable", "R2", "Trend per day"])


def kpi_table(kpis: KpiSummary) -> pd.DataFrame:
    """Mean/min/max per KPI variable plus record count and date span."""
    rows = []
    for col, summary in kpis.variables.items():
        rows.append(
            {
                "Variable": _display_name(col),
                "Average": format_number(summary.mean),
                "Min": format_number(summary.minimum),
                "Max": format_number(summary.maximum),
            }
        )
    table = pd.DataFrame.from_records(rows, columns=["Variable", "Average", "Min", "Max"])
    table.attrs["total_records"] = kpis.total_records
    table.attrs["date_range_days"] = kpis.date_range_days
    return table
