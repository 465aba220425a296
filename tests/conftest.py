"""Pytest configuration for repository-relative imports and shared datasets."""

import os
import sys

import matplotlib
import numpy as np
import pandas as pd
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from flotation.schema import DATE_COLUMN, Variable  # noqa: E402


def make_dataset(n_days=10, per_day=3, seed=0, start="2017-03-10"):
    """Synthetic Dataset View with ``per_day`` records on each of ``n_days``.

    Iron rises 0.1 per day and silica falls 0.05 per day on top of noise; the
    other four variables are independent noise around plant-like levels.
    """
    rng = np.random.default_rng(seed)
    days = pd.date_range(start, periods=n_days, freq="D").strftime("%Y-%m-%d")
    dates = np.repeat(np.asarray(days), per_day)
    offsets = np.repeat(np.arange(n_days, dtype=float), per_day)
    size = dates.size
    return pd.DataFrame(
        {
            DATE_COLUMN: dates,
            Variable.IRON_CONCENTRATE.value: 65.0 + 0.1 * offsets + rng.normal(0, 0.2, size),
            Variable.SILICA_CONCENTRATE.value: 2.5 - 0.05 * offsets + rng.normal(0, 0.1, size),
            Variable.ORE_PULP_PH.value: rng.normal(9.8, 0.3, size),
            Variable.ORE_PULP_DENSITY.value: rng.normal(1.68, 0.05, size),
            Variable.STARCH_FLOW.value: rng.normal(3000.0, 400.0, size),
            Variable.AMINA_FLOW.value: rng.normal(490.0, 60.0, size),
        }
    )


@pytest.fixture
def dataset():
    return make_dataset()
