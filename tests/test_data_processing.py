import logging

import numpy as np
import pandas as pd
import pytest

from flotation.data_processing import (
    column_values,
    daily_aggregate_series,
    filter_by_date_range,
    historical_dates,
    load_dataset,
    normalize_dataset,
    records_to_frame,
    search_records,
)
from flotation.schema import DATE_COLUMN, REQUIRED_COLUMNS, Record, Variable, as_variable

IRON = Variable.IRON_CONCENTRATE.value
SILICA = Variable.SILICA_CONCENTRATE.value
PH = Variable.ORE_PULP_PH.value


def _raw_frame():
    return pd.DataFrame(
        {
            DATE_COLUMN: [
                "2017-03-10 01:00:00",
                "2017-03-10 02:00:00",
                "2017-03-11 01:00:00",
                "not a date",
                "2017-03-12 05:00:00",
            ],
            IRON: ["65.5", "66.5", "abc", "64.0", None],
            SILICA: [2.0, 1.5, 2.5, 3.0, 1.0],
            PH: [9.8, 9.9, 10.0, 10.1, 10.2],
            Variable.ORE_PULP_DENSITY.value: [1.7] * 5,
            Variable.STARCH_FLOW.value: [3000.0] * 5,
            Variable.AMINA_FLOW.value: [500.0] * 5,
            "Flotation Column 01 Air Flow": [250.0] * 5,
        }
    )


def test_normalize_dataset_coerces_values_and_dates(caplog):
    with caplog.at_level(logging.WARNING):
        view = normalize_dataset(_raw_frame())

    assert list(view.columns) == list(REQUIRED_COLUMNS)
    assert list(view[DATE_COLUMN]) == ["2017-03-10", "2017-03-10", "2017-03-11", "2017-03-12"]
    assert view[IRON].tolist()[:2] == [65.5, 66.5]
    assert np.isnan(view[IRON].iloc[2])
    assert np.isnan(view[IRON].iloc[3])
    assert "unparseable dates" in caplog.text


def test_normalize_dataset_keeps_rows_with_mixed_date_styles(caplog):
    raw = _raw_frame().iloc[:3].copy()
    raw[DATE_COLUMN] = ["2017-03-10 01:00:00", "2017-03-11", "2017-03-12 00:00:00"]

    with caplog.at_level(logging.WARNING):
        view = normalize_dataset(raw)

    assert list(view[DATE_COLUMN]) == ["2017-03-10", "2017-03-11", "2017-03-12"]
    assert "unparseable dates" not in caplog.text


def test_normalize_dataset_reports_missing_columns():
    raw = _raw_frame().drop(columns=[PH, Variable.AMINA_FLOW.value])
    with pytest.raises(ValueError, match="missing required columns") as excinfo:
        normalize_dataset(raw)
    assert PH in str(excinfo.value)
    assert "Amina Flow" in str(excinfo.value)


def test_load_dataset_reads_european_decimal_format(tmp_path):
    path = tmp_path / "plant.csv"
    _raw_frame().to_csv(path, sep=";", decimal=",", index=False)

    view = load_dataset(str(path), decimal=",", sep=";")
    assert len(view) == 4
    assert view[SILICA].tolist() == [2.0, 1.5, 2.5, 1.0]
    assert view[PH].iloc[0] == pytest.approx(9.8)


def test_records_to_frame_from_records_and_mappings():
    frame = records_to_frame(
        [
            Record(date="2017-03-10", iron_concentrate=65.0, ore_pulp_ph=9.9),
            {DATE_COLUMN: "2017-03-11", IRON: 66.0, SILICA: 1.9},
        ]
    )
    assert list(frame.columns) == list(REQUIRED_COLUMNS)
    assert frame[IRON].tolist() == [65.0, 66.0]
    assert np.isnan(frame[SILICA].iloc[0])
    assert frame[SILICA].iloc[1] == pytest.approx(1.9)


def test_records_to_frame_rejects_other_types():
    with pytest.raises(TypeError, match="Record or mapping"):
        records_to_frame([("2017-03-10", 65.0)])


def test_record_value_lookup():
    record = Record(date="2017-03-10", silica_concentrate=1.2)
    assert record.value(Variable.SILICA_CONCENTRATE) == 1.2
    assert record.value(IRON) is None
    with pytest.raises(ValueError):
        record.value("% Gold Concentrate")
    assert as_variable(PH) is Variable.ORE_PULP_PH


def test_filter_by_date_range_is_inclusive(dataset):
    view = filter_by_date_range(dataset, "2017-03-12", "2017-03-14")
    assert historical_dates(view) == ["2017-03-12", "2017-03-13", "2017-03-14"]
    assert len(view) == 9


def test_filter_by_date_range_open_bounds(dataset):
    assert historical_dates(filter_by_date_range(dataset, date_from="2017-03-18")) == [
        "2017-03-18",
        "2017-03-19",
    ]
    assert historical_dates(filter_by_date_range(dataset, date_to="2017-03-10")) == [
        "2017-03-10"
    ]
    assert len(filter_by_date_range(dataset)) == len(dataset)


def test_filter_by_date_range_rejects_bad_bounds(dataset):
    with pytest.raises(ValueError, match="must not be after"):
        filter_by_date_range(dataset, "2017-03-15", "2017-03-12")
    with pytest.raises(ValueError, match="not a valid date"):
        filter_by_date_range(dataset, date_from="yesterday-ish")


def test_search_matches_values_and_dates():
    view = normalize_dataset(_raw_frame())
    assert len(search_records(view, "65.5")) == 1
    assert len(search_records(view, "2017-03-10")) == 2
    assert len(search_records(view, "  ")) == len(view)
    assert len(search_records(view, "nan")) == 0


def test_search_is_case_insensitive():
    frame = records_to_frame(
        [
            {DATE_COLUMN: "2017-03-10", IRON: 65.0},
            {DATE_COLUMN: "2017-03-11", IRON: 1e-05},
        ]
    )
    assert len(search_records(frame, "E-05")) == 1
    assert len(search_records(frame, "e-05")) == 1


def test_column_values_drops_missing_in_order():
    view = normalize_dataset(_raw_frame())
    np.testing.assert_allclose(column_values(view, Variable.IRON_CONCENTRATE), [65.5, 66.5])
    with pytest.raises(KeyError):
        column_values(view.drop(columns=[PH]), PH)


def test_daily_aggregate_series_averages_and_drops_empty_dates():
    view = normalize_dataset(_raw_frame())
    daily = daily_aggregate_series(view, IRON)

    assert list(daily.index) == ["2017-03-10"]
    assert daily.iloc[0] == pytest.approx(66.0)
    assert daily.name == IRON
    assert daily.index.name == DATE_COLUMN

    silica = daily_aggregate_series(view, SILICA)
    assert list(silica.index) == ["2017-03-10", "2017-03-11", "2017-03-12"]
    np.testing.assert_allclose(silica.to_numpy(), [1.75, 2.5, 1.0])
