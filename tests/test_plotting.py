import os

import numpy as np
import pandas as pd
import pytest

from flotation.analysis import compute_correlation_matrix
from flotation.data_processing import column_values, daily_aggregate_series
from flotation.forecast import compute_forecast
from flotation.plotting import (
    plot_correlation_heatmap,
    plot_daily_trend,
    plot_distributions,
    plot_forecast,
    plot_ph_vs_silica,
)
from flotation.plotting.style import sanitize_filename, save_figure
from flotation.schema import ADVANCED_STAT_VARIABLES, FORECAST_VARIABLES, Variable
from flotation.stats.descriptive import histogram


def _assert_bundle(png_path):
    assert png_path.endswith(".png")
    for ext in ("png", "pdf", "svg"):
        assert os.path.exists(os.path.splitext(png_path)[0] + f".{ext}")


def test_daily_trend_figure(dataset, tmp_path):
    daily = {v.value: daily_aggregate_series(dataset, v) for v in FORECAST_VARIABLES}
    path = plot_daily_trend(daily, output_dir=str(tmp_path))
    assert os.path.basename(path) == "daily_trend.png"
    _assert_bundle(path)


def test_daily_trend_requires_data(tmp_path):
    empty = {Variable.IRON_CONCENTRATE.value: pd.Series([], dtype=float)}
    with pytest.raises(ValueError, match="nothing to plot"):
        plot_daily_trend(empty, output_dir=str(tmp_path))


def test_ph_vs_silica_scatter(dataset, tmp_path):
    path = plot_ph_vs_silica(dataset, output_dir=str(tmp_path))
    _assert_bundle(path)


def test_ph_vs_silica_without_pairs_raises(dataset, tmp_path):
    dataset[Variable.ORE_PULP_PH.value] = np.nan
    with pytest.raises(ValueError):
        plot_ph_vs_silica(dataset, output_dir=str(tmp_path))
    with pytest.raises(KeyError):
        plot_ph_vs_silica(
            dataset.drop(columns=[Variable.SILICA_CONCENTRATE.value]), output_dir=str(tmp_path)
        )


def test_distributions_figure(dataset, tmp_path):
    hists = {
        v.value: histogram(column_values(dataset, v), bins=10) for v in ADVANCED_STAT_VARIABLES
    }
    path = plot_distributions(hists, output_dir=str(tmp_path))
    assert os.path.basename(path) == "distributions.png"
    _assert_bundle(path)


def test_correlation_heatmap(dataset, tmp_path):
    path = plot_correlation_heatmap(compute_correlation_matrix(dataset), output_dir=str(tmp_path))
    _assert_bundle(path)


def test_forecast_figure_with_gap(dataset, tmp_path):
    dataset.loc[dataset["date"] == "2017-03-13", Variable.IRON_CONCENTRATE.value] = np.nan
    forecast = compute_forecast(dataset, horizon_days=5)
    path = plot_forecast(forecast, output_dir=str(tmp_path))
    assert os.path.basename(path) == "forecast.png"
    _assert_bundle(path)


def test_save_figure_rejects_unknown_extension(tmp_path):
    import matplotlib.pyplot as plt

    fig, _ = plt.subplots()
    try:
        with pytest.raises(ValueError, match="Unsupported extension"):
            save_figure(fig, tmp_path / "bad", formats=("bmp",))
    finally:
        plt.close(fig)


def test_sanitize_filename():
    assert sanitize_filename("  % Iron Concentrate ") == "Iron_Concentrate"
    assert sanitize_filename("///") == "figure"
