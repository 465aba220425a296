import logging

import numpy as np
import pytest

from flotation.analysis import (
    calculate_advanced_statistics,
    compute_correlation_matrix,
    compute_descriptive_stats,
    compute_kpis,
    print_statistics,
)
from flotation.config import AnalysisConfig
from flotation.forecast import compute_forecast
from flotation.schema import DATE_COLUMN, Record, Variable

IRON = Variable.IRON_CONCENTRATE.value
SILICA = Variable.SILICA_CONCENTRATE.value
PH = Variable.ORE_PULP_PH.value


def _two_records():
    return [
        Record(date="2020-01-01", iron_concentrate=65.0, silica_concentrate=2.0, ore_pulp_ph=10.0),
        Record(date="2020-01-02", iron_concentrate=66.0, silica_concentrate=1.8, ore_pulp_ph=10.1),
    ]


def test_two_record_statistics_end_to_end():
    stats = calculate_advanced_statistics(_two_records())
    iron = stats[IRON]

    assert iron.n == 2
    assert iron.mean == pytest.approx(65.5)
    assert iron.std_dev == pytest.approx(0.5)
    assert iron.variance == pytest.approx(0.25)
    assert iron.percentile_50 == pytest.approx(65.5)
    assert iron.percentile_25 == pytest.approx(65.25)
    assert iron.percentile_75 == pytest.approx(65.75)
    assert iron.outliers.count == 0
    assert iron.skewness is None
    assert iron.kurtosis is None


def test_two_record_forecast_end_to_end():
    forecast = compute_forecast(_two_records(), horizon_days=1)
    assert forecast.future_dates == ("2020-01-03",)
    assert forecast.iron_forecast[0] == pytest.approx(67.0)


def test_empty_values_are_not_computable():
    stats = compute_descriptive_stats([])
    assert stats.n == 0
    assert stats.mean is None
    assert stats.std_dev is None
    assert stats.percentile_50 is None
    assert stats.outliers.count == 0
    assert stats.outlier_percentage is None


def test_outlier_percentage_and_dict_form():
    stats = compute_descriptive_stats([10, 12, 11, 13, 12, 11, 100, 12])
    assert stats.outliers.count == 1
    assert stats.outlier_percentage == pytest.approx(12.5)
    as_dict = stats.to_dict()
    assert as_dict["n"] == 8
    assert as_dict["outliers"]["count"] == 1


def test_custom_outlier_factor_widens_fences():
    values = [10, 12, 11, 13, 12, 11, 16]
    assert compute_descriptive_stats(values).outliers.count == 1
    assert compute_descriptive_stats(values, outlier_factor=3.0).outliers.count == 0


def test_variable_without_values_is_skipped(dataset, caplog):
    dataset[PH] = np.nan
    with caplog.at_level(logging.WARNING):
        stats = calculate_advanced_statistics(dataset)

    assert set(stats) == {IRON, SILICA}
    assert "statistics skipped" in caplog.text


def test_correlation_matrix_covers_six_variables(dataset):
    corr = compute_correlation_matrix(dataset)
    assert len(corr.variables) == 6
    assert corr.variables[0] == IRON
    assert corr.value(PH, PH) == pytest.approx(1.0)


def test_misalignment_warning_points_at_caller(dataset):
    dataset.loc[0, IRON] = np.nan
    with pytest.warns(UserWarning, match="missingness") as record:
        compute_correlation_matrix(dataset, [IRON, SILICA])
    assert record[0].filename == __file__


def test_correlation_matrix_pairing_is_forwarded(dataset):
    corr = compute_correlation_matrix(dataset, [IRON, SILICA], pairing="pairwise")
    assert corr.pairing == "pairwise"
    assert corr.variables == (IRON, SILICA)


def test_kpis_summarise_view(dataset):
    kpis = compute_kpis(dataset)

    assert kpis.total_records == 30
    assert kpis.date_range_days == 10
    iron = kpis.variables[IRON]
    assert iron.n == 30
    assert iron.minimum <= iron.mean <= iron.maximum
    assert iron.maximum == pytest.approx(dataset[IRON].max())


def test_kpis_with_missing_variable_and_empty_view(dataset):
    dataset[SILICA] = np.nan
    kpis = compute_kpis(dataset)
    assert kpis.variables[SILICA].mean is None
    assert kpis.variables[SILICA].n == 0

    empty = compute_kpis(dataset.iloc[0:0])
    assert empty.total_records == 0
    assert empty.date_range_days is None


def test_kpi_date_span_is_inclusive():
    kpis = compute_kpis([Record(date="2017-03-10", iron_concentrate=65.0)])
    assert kpis.date_range_days == 1
    assert kpis.variables[IRON].minimum == kpis.variables[IRON].maximum == 65.0


def test_print_statistics_writes_summary(dataset, capsys):
    stats = calculate_advanced_statistics(dataset)
    corr = compute_correlation_matrix(dataset)
    forecast = compute_forecast(dataset, horizon_days=3)
    print_statistics(stats, corr, forecast)

    out = capsys.readouterr().out
    assert "Iron Concentrate" in out
    assert "pH Level" in out
    assert "Correlation matrix" in out
    assert "Forecast (3 days)" in out


def test_analysis_config_validation():
    config = AnalysisConfig()
    assert config.forecast_horizon_days == 7
    assert config.correlation_pairing == "independent"
    with pytest.raises(ValueError):
        AnalysisConfig(forecast_horizon_days=0)
    with pytest.raises(ValueError):
        AnalysisConfig(moving_average_window=0)
    with pytest.raises(ValueError, match="pairing"):
        AnalysisConfig(correlation_pairing="listwise")


def test_dataset_fixture_dates_are_iso_strings(dataset):
    assert dataset[DATE_COLUMN].iloc[0] == "2017-03-10"
