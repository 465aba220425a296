"""
Handles CSV parsing, record normalisation, view filtering and daily aggregation.
"""

# Algorithm summary: parse the plant export with pandas, coerce the six
# process variables to floats (unparseable cells become missing), normalise
# timestamps to ISO day strings, then hand the resulting Dataset View to the
# engines. Daily Aggregate Series average each date's non-missing values and
# drop dates that have none, so the series is dense over surviving dates.

import logging
from collections.abc import Mapping

import numpy as np
import pandas as pd

from .schema import (
    CORRELATION_VARIABLES,
    DATE_COLUMN,
    REQUIRED_COLUMNS,
    Record,
    column_name,
)

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = REQUIRED_COLUMNS


def load_dataset(filepath, decimal=".", sep=","):
    """
    Load and normalise a flotation dataset from a CSV file.

    Args:
        filepath (str): Path to the CSV file.
        decimal (str): Decimal separator used in the file. Plant exports
            written with a European locale use ``","``.
        sep (str): Field delimiter, usually ``";"`` alongside ``decimal=","``.

    Returns:
        pd.DataFrame: Normalised Dataset View.
    """
    raw = pd.read_csv(filepath, sep=sep, decimal=decimal)
    logger.info("Loaded %d raw rows from %s", len(raw), filepath)
    return normalize_dataset(raw)


def normalize_dataset(df):
    """Validate columns and coerce a raw table into a Dataset View.

    Numeric columns are coerced with ``errors="coerce"`` so that blanks and
    stray text become ``NaN`` (missing). Timestamps are truncated to day
    granularity and stored as ISO ``YYYY-MM-DD`` strings, which sort
    lexically in chronological order. Rows whose date cannot be parsed are
    dropped because they cannot be placed on the time axis.

    Args:
        df: Raw :class:`pandas.DataFrame` as read from disk.

    Returns:
        pd.DataFrame: A new frame holding only the required columns.

    Raises:
        ValueError: If any required column is absent.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Dataset is missing required columns: {missing}")

    view = df[list(REQUIRED_COLUMNS)].copy()
    for variable in CORRELATION_VARIABLES:
        col = variable.value
        view[col] = pd.to_numeric(view[col], errors="coerce").astype(float)

    # Rows may mix "YYYY-MM-DD" and "YYYY-MM-DD HH:MM:SS", so parse each value.
    parsed = pd.to_datetime(view[DATE_COLUMN], errors="coerce", format="mixed")
    bad_dates = int(parsed.isna().sum())
    if bad_dates:
        logger.warning("Dropping %d rows with unparseable dates", bad_dates)
    view[DATE_COLUMN] = parsed.dt.strftime("%Y-%m-%d")
    view = view[parsed.notna()].reset_index(drop=True)
    return view


def records_to_frame(records):
    """Build a Dataset View from ``Record`` objects or column-keyed mappings."""
    rows = []
    for record in records:
        if isinstance(record, Record):
            rows.append(record.to_row())
        elif isinstance(record, Mapping):
            rows.append(dict(record))
        else:
            raise TypeError(
                f"Expected Record or mapping, got {type(record).__name__}"
            )

    frame = pd.DataFrame.from_records(rows, columns=list(REQUIRED_COLUMNS))
    for variable in CORRELATION_VARIABLES:
        col = variable.value
        frame[col] = pd.to_numeric(frame[col], errors="coerce").astype(float)
    return frame


def as_dataset(view):
    """Return ``view`` as a DataFrame without copying existing frames."""
    if isinstance(view, pd.DataFrame):
        return view
    return records_to_frame(view)


def filter_by_date_range(dataset, date_from=None, date_to=None):
    """Keep records whose date lies in the inclusive ``[date_from, date_to]``.

    Either bound may be ``None`` to leave that side open.

    Raises:
        ValueError: If a bound is not a valid date or ``date_from`` is after
            ``date_to``.
    """
    dataset = as_dataset(dataset)
    start = _parse_bound(date_from, "date_from")
    end = _parse_bound(date_to, "date_to")
    if start is not None and end is not None and start > end:
        raise ValueError(
            f"date_from ({date_from}) must not be after date_to ({date_to})."
        )

    dates = pd.to_datetime(dataset[DATE_COLUMN], errors="coerce")
    mask = dates.notna()
    if start is not None:
        mask &= dates >= start
    if end is not None:
        mask &= dates <= end

    filtered = dataset[mask].reset_index(drop=True)
    logger.info(
        "Date filter [%s, %s] kept %d of %d records",
        date_from,
        date_to,
        len(filtered),
        len(dataset),
    )
    return filtered


def _parse_bound(value, name):
    if value is None:
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        raise ValueError(f"{name} is not a valid date: {value!r}")
    return ts.normalize()


def _search_text(value):
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    if isinstance(value, (float, np.floating)):
        text = repr(float(value))
        return text[:-2] if text.endswith(".0") else text
    return str(value)


def search_records(dataset, term):
    """Return records where any searchable column contains ``term``.

    Matching is a case-insensitive substring test on the display form of
    the date and each process variable; missing values never match. An
    empty term returns the view unchanged.
    """
    dataset = as_dataset(dataset)
    needle = (term or "").strip().lower()
    if not needle or dataset.empty:
        return dataset

    def _matches(row):
        for col in SEARCH_COLUMNS:
            text = _search_text(row[col])
            if text is not None and needle in text.lower():
                return True
        return False

    mask = dataset.apply(_matches, axis=1).astype(bool)
    return dataset[mask].reset_index(drop=True)


def column_values(dataset, variable):
    """Extract one variable's non-missing values in record order.

    Args:
        dataset: Dataset View (DataFrame or iterable of records).
        variable: ``Variable`` member or its column label.

    Returns:
        numpy.ndarray: Float array with missing entries removed.

    Raises:
        KeyError: If the variable's column is absent from the view.
    """
    dataset = as_dataset(dataset)
    col = column_name(variable)
    if col not in dataset.columns:
        raise KeyError(f"Dataset View has no column {col!r}")
    values = pd.to_numeric(dataset[col], errors="coerce").dropna()
    return values.to_numpy(dtype=float)


def historical_dates(dataset):
    """Return the sorted distinct dates present in the view."""
    dataset = as_dataset(dataset)
    dates = dataset[DATE_COLUMN].dropna().astype(str).unique()
    return sorted(dates)


def daily_aggregate_series(dataset, variable):
    """Average a variable per date, dropping dates with no measurements.

    The result is indexed by ISO date string in ascending order. Dates whose
    records are all missing for ``variable`` are absent rather than ``NaN``,
    so positional offsets ``0..n-1`` skip them.

    Returns:
        pd.Series: Daily means named after the variable's column label.
    """
    dataset = as_dataset(dataset)
    col = column_name(variable)
    if col not in dataset.columns:
        raise KeyError(f"Dataset View has no column {col!r}")

    working = pd.DataFrame(
        {
            DATE_COLUMN: dataset[DATE_COLUMN],
            col: pd.to_numeric(dataset[col], errors="coerce"),
        }
    ).dropna(subset=[DATE_COLUMN])
    working[DATE_COLUMN] = working[DATE_COLUMN].astype(str)

    daily = working.groupby(DATE_COLUMN, sort=True)[col].mean().dropna()
    daily.index.name = DATE_COLUMN
    return daily.astype(float)
