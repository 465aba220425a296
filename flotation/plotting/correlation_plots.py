"""Render the correlation matrix as an annotated heatmap."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np

from ..schema import SHORT_NAMES, Variable
from ..stats.correlation import CorrelationMatrix
from .style import STYLE, finalize_and_save, set_global_style


def _short_label(label: str) -> str:
    try:
        return SHORT_NAMES[Variable(label)]
    except ValueError:
        return label[:15]


def plot_correlation_heatmap(
    correlation: CorrelationMatrix, output_dir: str = "output"
) -> str:
    """Draw a diverging heatmap with each coefficient printed in its cell.

    Args:
        correlation (CorrelationMatrix): Precomputed matrix.
        output_dir (str, optional): Directory for the figure bundle.

    Returns:
        str: Path to ``correlation_heatmap.png``.

    Raises:
        ValueError: If the matrix has no variables.
    """
    if not correlation.variables:
        raise ValueError("correlation matrix is empty; nothing to plot")

    set_global_style()
    matrix = np.asarray(correlation.matrix, dtype=float)
    labels = [_short_label(v) for v in correlation.variables]

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SQUARE)
    image = ax.imshow(matrix, cmap="RdBu_r", vmin=-1.0, vmax=1.0)
    ax.grid(False)
    ax.set_xticks(range(len(labels)))
    ax.set_yticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_yticklabels(labels)

    for i in range(matrix.shape[0]):
        for j in range(matrix.shape[1]):
            value = matrix[i, j]
            ax.text(
                j,
                i,
                f"{value:.2f}",
                ha="center",
                va="center",
                color="white" if abs(value) > 0.7 else "black",
                fontsize=9,
            )

    fig.colorbar(image, ax=ax, fraction=0.046, pad=0.04, label="Pearson r")
    title = "Correlation matrix"
    if correlation.pairing != "independent":
        title += f" ({correlation.pairing} samples)"
    ax.set_title(title)
    return finalize_and_save(fig, output_dir, "correlation_heatmap")
