"""Write the Dataset View and analysis results to CSV and JSON files.

This module is the export boundary between in-memory analysis and files a
user downloads. Files are only written when one of these functions is
called explicitly; nothing is cached between runs.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Tuple

from .analysis import DescriptiveStats
from .data_processing import as_dataset
from .forecast import Forecast
from .reporting import correlation_table, forecast_table, statistics_table
from .schema import REQUIRED_COLUMNS
from .stats.correlation import CorrelationMatrix

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json")


def export_dataset(dataset, output_dir: str = "output", fmt: str = "csv") -> str:
    """Export every column of the current view.

    Args:
        dataset: Dataset View (DataFrame or iterable of records).
        output_dir (str): Destination directory.
        fmt (str): ``"csv"`` or ``"json"``.

    Returns:
        str: Path to ``mining_data.csv`` or ``mining_data.json``.

    Raises:
        ValueError: If ``fmt`` is not a supported export format.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format {fmt!r}. Expected one of {EXPORT_FORMATS}.")
    frame = as_dataset(dataset)
    os.makedirs(output_dir, exist_ok=True)

    path = os.path.join(output_dir, f"mining_data.{fmt}")
    if fmt == "csv":
        frame.to_csv(path, index=False)
    else:
        frame.to_json(path, orient="records", indent=2)
    logger.info("Exported %d records to %s", len(frame), path)
    return path


def export_table_data(dataset, output_dir: str = "output") -> str:
    """Export the date and the six process variables to ``table_export.csv``."""
    frame = as_dataset(dataset)
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "table_export.csv")
    frame[list(REQUIRED_COLUMNS)].to_csv(path, index=False)
    logger.info("Exported table view to %s", path)
    return path


def save_forecast_to_csv(forecast: Forecast, output_dir: str = "output") -> str:
    """Save projected iron and silica grades to ``forecast_data.csv``."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "forecast_data.csv")
    forecast_table(forecast).to_csv(path, index=False)
    logger.info("Saved %d forecast rows to %s", forecast.horizon_days, path)
    return path


def save_statistics_to_csv(
    stats: Dict[str, DescriptiveStats],
    correlation: CorrelationMatrix,
    output_dir: str = "output",
) -> Tuple[str, str]:
    """Save descriptive statistics and the correlation matrix.

    Returns:
        tuple[str, str]: Paths to ``descriptive_statistics.csv`` and
        ``correlation_matrix.csv``.
    """
    os.makedirs(output_dir, exist_ok=True)
    stats_path = os.path.join(output_dir, "descriptive_statistics.csv")
    corr_path = os.path.join(output_dir, "correlation_matrix.csv")

    statistics_table(stats).to_csv(stats_path, index=False)
    correlation_table(correlation).to_csv(corr_path, index_label="Variable")

    logger.info("Saved descriptive statistics to %s", stats_path)
    logger.info("Saved correlation matrix to %s", corr_path)
    return stats_path, corr_path
