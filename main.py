#!/usr/bin/env python3
"""
Main script for running flotation process analysis.
"""

# Pipeline overview (README-style):
# 1) Load the plant CSV, coerce the six process variables and normalise dates.
# 2) Apply the optional date range and free-text search to get the view.
# 3) Compute KPIs and descriptive statistics for iron, silica and pH.
# 4) Build the Pearson correlation matrix over all six variables.
# 5) Fit linear trends to daily iron and silica grades and project forward.
# 6) Export tables and dashboard figures.

import argparse
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("flotation_analysis.log", mode="w"),
    ],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flotation.analysis import (
    calculate_advanced_statistics,
    compute_correlation_matrix,
    compute_kpis,
    print_statistics,
)
from flotation.config import DEFAULT_CONFIG, PAIRING_MODES, AnalysisConfig
from flotation.data_processing import (
    column_values,
    daily_aggregate_series,
    filter_by_date_range,
    load_dataset,
    search_records,
)
from flotation.forecast import NoDataError, compute_forecast
from flotation.output import (
    export_table_data,
    save_forecast_to_csv,
    save_statistics_to_csv,
)
from flotation.plotting import (
    plot_correlation_heatmap,
    plot_daily_trend,
    plot_distributions,
    plot_forecast,
    plot_ph_vs_silica,
)
from flotation.reporting import kpi_table
from flotation.schema import ADVANCED_STAT_VARIABLES, FORECAST_VARIABLES
from flotation.stats.descriptive import histogram


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Flotation process analytics")
    parser.add_argument("csv", help="Path to the plant dataset CSV")
    parser.add_argument(
        "--horizon",
        type=int,
        default=DEFAULT_CONFIG.forecast_horizon_days,
        help="Forecast days",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=DEFAULT_CONFIG.moving_average_window,
        help="Moving-average window",
    )
    parser.add_argument(
        "--pairing", choices=PAIRING_MODES, default=DEFAULT_CONFIG.correlation_pairing
    )
    parser.add_argument("--output-dir", default=DEFAULT_CONFIG.output_dir)
    parser.add_argument("--date-from", default=None)
    parser.add_argument("--date-to", default=None)
    parser.add_argument("--search", default=None)
    parser.add_argument("--decimal", default=".", help="CSV decimal separator")
    parser.add_argument("--sep", default=",", help="CSV field delimiter")
    parser.add_argument("--no-plots", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    """Main execution function with per-step timing logs."""

    args = parse_args(argv)
    config = AnalysisConfig(
        forecast_horizon_days=args.horizon,
        moving_average_window=args.window,
        correlation_pairing=args.pairing,
        output_dir=args.output_dir,
        date_from=args.date_from,
        date_to=args.date_to,
        search=args.search,
    )

    start_time = time.time()
    logging.info("Initializing flotation analysis pipeline")

    step_start = time.time()
    dataset = load_dataset(args.csv, decimal=args.decimal, sep=args.sep)
    if config.date_from or config.date_to:
        dataset = filter_by_date_range(dataset, config.date_from, config.date_to)
    if config.search:
        dataset = search_records(dataset, config.search)
    logging.info(
        "Dataset loading and filtering completed in %.2f seconds",
        time.time() - step_start,
    )

    if dataset.empty:
        logging.error("No records left after filtering. Terminating execution.")
        return 1
    logging.info("Analysing %d records", len(dataset))

    kpis = compute_kpis(dataset)
    logging.info(
        "KPIs: %d records spanning %s days", kpis.total_records, kpis.date_range_days
    )
    print(kpi_table(kpis).to_string(index=False))

    step_start = time.time()
    stats = calculate_advanced_statistics(
        dataset, outlier_factor=config.outlier_iqr_factor
    )
    correlation = compute_correlation_matrix(dataset, pairing=config.correlation_pairing)
    logging.info(
        "Statistics and correlation completed in %.2f seconds",
        time.time() - step_start,
    )

    forecast = None
    step_start = time.time()
    try:
        forecast = compute_forecast(
            dataset,
            config.forecast_horizon_days,
            window=config.moving_average_window,
        )
    except NoDataError as exc:
        logging.warning("Forecast skipped: %s", exc)
    logging.info("Forecast step completed in %.2f seconds", time.time() - step_start)

    print_statistics(stats, correlation, forecast)

    output_dir = config.output_dir
    os.makedirs(output_dir, exist_ok=True)
    logging.info("Output directory ensured: %s", output_dir)

    generated = list(save_statistics_to_csv(stats, correlation, output_dir))
    generated.append(export_table_data(dataset, output_dir))
    if forecast is not None:
        generated.append(save_forecast_to_csv(forecast, output_dir))

    if not args.no_plots:
        step_start = time.time()
        daily = {
            v.value: daily_aggregate_series(dataset, v) for v in FORECAST_VARIABLES
        }
        hists = {
            v.value: histogram(column_values(dataset, v), bins=config.histogram_bins)
            for v in ADVANCED_STAT_VARIABLES
        }
        for plot in (
            lambda: plot_daily_trend(daily, output_dir),
            lambda: plot_ph_vs_silica(dataset, output_dir),
            lambda: plot_distributions(hists, output_dir),
            lambda: plot_correlation_heatmap(correlation, output_dir),
        ):
            try:
                generated.append(plot())
            except ValueError as exc:
                logging.warning("Figure skipped: %s", exc)
        if forecast is not None:
            generated.append(plot_forecast(forecast, output_dir))
        logging.info("Figures rendered in %.2f seconds", time.time() - step_start)

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Analysis pipeline completed successfully")
    logging.info("Generated output files:")
    for path in generated:
        logging.info("  - %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
