"""
A Python package for analysing iron ore flotation process data.

Computes descriptive statistics, Pearson correlations and linear-trend
forecasts of concentrate grades from a tabular plant dataset.

Modules:
    - data_processing: Loads, normalises, filters and aggregates the dataset.
    - analysis: Descriptive statistics, correlation matrix and KPI facade.
    - forecast: Least-squares trend projection of iron and silica grades.
    - reporting: Display formatting and report tables.
    - output: CSV/JSON export of the dataset and results.
    - plotting: Dashboard figures.
"""

__version__ = "1.0.0"

from .analysis import (
    calculate_advanced_statistics,
    compute_correlation_matrix,
    compute_descriptive_stats,
    compute_kpis,
    print_statistics,
)
from .data_processing import (
    daily_aggregate_series,
    filter_by_date_range,
    load_dataset,
    search_records,
)
from .forecast import NoDataError, compute_forecast
from .output import export_dataset, save_forecast_to_csv, save_statistics_to_csv
from .schema import CORRELATION_VARIABLES, Record, Variable

__all__ = [
    # Data processing
    "load_dataset",
    "filter_by_date_range",
    "search_records",
    "daily_aggregate_series",
    # Analysis
    "compute_descriptive_stats",
    "compute_correlation_matrix",
    "compute_forecast",
    "compute_kpis",
    "calculate_advanced_statistics",
    "print_statistics",
    "NoDataError",
    # Output
    "export_dataset",
    "save_forecast_to_csv",
    "save_statistics_to_csv",
    # Schema
    "Record",
    "Variable",
    "CORRELATION_VARIABLES",
]
