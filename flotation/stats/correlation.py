"""Pearson correlation and the pairwise correlation matrix.

The matrix builder supports two sample-selection modes:

- ``"independent"`` (default): each variable is filtered to its own
  non-missing values and the two sequences are truncated to the shorter
  length before correlating. Rows are therefore not matched by record when
  the variables have different missingness patterns.
- ``"pairwise"``: each cell uses only records where both variables are
  present, which keeps the samples aligned.

Zero-variance inputs give a correlation of ``0.0`` so that the matrix stays
numerically renderable.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import PAIRING_MODES


@dataclass(frozen=True)
class CorrelationMatrix:
    """Square matrix of Pearson coefficients.

    Attributes:
        variables: Ordered column labels indexing rows and columns.
        matrix: ``len(variables) x len(variables)`` float array.
        pairing: Sample-selection mode used to build the matrix.
    """

    variables: Tuple[str, ...]
    matrix: np.ndarray
    pairing: str = "independent"

    def value(self, row: str, col: str) -> float:
        """Return the coefficient for the ``(row, col)`` variable pair."""
        return float(self.matrix[self.variables.index(row), self.variables.index(col)])

    def to_frame(self) -> pd.DataFrame:
        """Return the matrix as a labelled DataFrame."""
        return pd.DataFrame(
            self.matrix, index=list(self.variables), columns=list(self.variables)
        )

    def as_lists(self) -> list:
        return [[float(v) for v in row] for row in self.matrix]


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson product-moment correlation using the raw-sum formula.

    ``r = (n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))`` over the
    first ``n = min(len(x), len(y))`` elements of each sequence.

    Returns:
        float: Coefficient in ``[-1, 1]``; ``0.0`` when ``n == 0`` or either
        truncated sequence has zero variance.
    """
    x_arr = np.asarray(x, dtype=float).ravel()
    y_arr = np.asarray(y, dtype=float).ravel()
    n = min(x_arr.size, y_arr.size)
    if n == 0:
        return 0.0
    x_arr = x_arr[:n]
    y_arr = y_arr[:n]

    # Raw sums cancel badly for constant data; detect it exactly instead.
    if np.ptp(x_arr) == 0 or np.ptp(y_arr) == 0:
        return 0.0

    nf = np.float64(n)
    sum_x = np.sum(x_arr)
    sum_y = np.sum(y_arr)
    sum_xy = np.sum(x_arr * y_arr)
    sum_x2 = np.sum(x_arr * x_arr)
    sum_y2 = np.sum(y_arr * y_arr)

    numerator = nf * sum_xy - sum_x * sum_y
    with np.errstate(invalid="ignore"):
        denominator = np.sqrt((nf * sum_x2 - sum_x * sum_x) * (nf * sum_y2 - sum_y * sum_y))
    if denominator == 0:
        return 0.0
    return float(numerator / denominator)


def build_correlation_matrix(
    dataset: pd.DataFrame,
    variables: Sequence[str],
    pairing: str = "independent",
    stacklevel: int = 2,
) -> CorrelationMatrix:
    """Correlate every ordered pair of ``variables``, diagonal included.

    Args:
        dataset (pandas.DataFrame): Dataset View with one column per variable.
        variables (Sequence[str]): Ordered column labels.
        pairing (str, optional): ``"independent"`` or ``"pairwise"``.
        stacklevel (int, optional): Passed to ``warnings.warn`` so the
            misalignment warning points at the caller's call site.

    Returns:
        CorrelationMatrix: The coefficients and the variable order.

    Raises:
        KeyError: If a variable's column is missing from ``dataset``.
        ValueError: If ``pairing`` is not a known mode.

    Note:
        In ``"independent"`` mode a ``UserWarning`` is emitted when two
        variables differ in missingness, because their cells are then
        computed on samples that are not aligned by record.
    """
    if pairing not in PAIRING_MODES:
        raise ValueError(
            f"Unknown pairing {pairing!r}. Expected one of {PAIRING_MODES}."
        )
    labels = tuple(str(getattr(v, "value", v)) for v in variables)
    missing = [col for col in labels if col not in dataset.columns]
    if missing:
        raise KeyError(f"Dataset View has no columns {missing}")

    numeric = dataset[list(labels)].apply(pd.to_numeric, errors="coerce")
    present = numeric.notna().to_numpy()
    k = len(labels)
    matrix = np.zeros((k, k), dtype=float)

    if pairing == "independent":
        samples = [numeric[col].dropna().to_numpy(dtype=float) for col in labels]
        misaligned = [
            (labels[i], labels[j])
            for i in range(k)
            for j in range(i + 1, k)
            if not np.array_equal(present[:, i], present[:, j])
        ]
        if misaligned:
            warnings.warn(
                "Correlations computed on independently filtered samples; "
                f"{len(misaligned)} variable pair(s) differ in missingness, "
                f"for example {misaligned[0][0]!r} and {misaligned[0][1]!r}.",
                UserWarning,
                stacklevel=stacklevel,
            )
        for i in range(k):
            for j in range(k):
                matrix[i, j] = pearson(samples[i], samples[j])
    else:
        values = numeric.to_numpy(dtype=float)
        for i in range(k):
            for j in range(k):
                both = present[:, i] & present[:, j]
                matrix[i, j] = pearson(values[both, i], values[both, j])

    return CorrelationMatrix(variables=labels, matrix=matrix, pairing=pairing)
