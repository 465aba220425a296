"""Render overview figures: daily trend, pH-silica scatter and distributions."""

from __future__ import annotations

from typing import Dict

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..schema import SHORT_NAMES, Variable
from ..stats.descriptive import HistogramBins
from .style import (
    SCATTER_COLOR,
    STYLE,
    color_for,
    finalize_and_save,
    set_global_style,
    thin_date_ticks,
)


def plot_daily_trend(
    daily_series: Dict[str, pd.Series], output_dir: str = "output"
) -> str:
    """Plot daily average grades on a shared date axis.

    Args:
        daily_series (dict[str, pandas.Series]): Daily Aggregate Series keyed
            by column label, as returned by
            ``flotation.data_processing.daily_aggregate_series``.
        output_dir (str, optional): Directory for the figure bundle.

    Returns:
        str: Path to ``daily_trend.png``.

    Raises:
        ValueError: If every series is empty.

    Note:
        Dates missing from one series are drawn as gaps on the shared axis.
    """
    non_empty = {k: s for k, s in daily_series.items() if not s.empty}
    if not non_empty:
        raise ValueError("daily_series is empty; nothing to plot")

    set_global_style()
    dates = sorted(set().union(*(s.index for s in non_empty.values())))
    x = np.arange(len(dates))

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_WIDE)
    for col, series in non_empty.items():
        aligned = series.reindex(dates).to_numpy(dtype=float)
        color = color_for(col)
        ax.plot(x, aligned, color=color, label=f"{col} (daily mean)")
        ax.fill_between(x, aligned, np.nanmin(aligned), color=color, alpha=STYLE.ALPHA_FILL)

    thin_date_ticks(ax, dates)
    ax.set_ylabel("Concentrate grade / %")
    ax.set_title("Daily concentrate grade trend")
    ax.legend(loc="best")
    return finalize_and_save(fig, output_dir, "daily_trend")


def plot_ph_vs_silica(dataset: pd.DataFrame, output_dir: str = "output") -> str:
    """Scatter pulp pH against silica concentrate for records with both."""
    ph_col = Variable.ORE_PULP_PH.value
    silica_col = Variable.SILICA_CONCENTRATE.value
    missing = {ph_col, silica_col} - set(dataset.columns)
    if missing:
        raise KeyError(f"Dataset View missing required columns: {missing}")

    pairs = dataset[[ph_col, silica_col]].apply(pd.to_numeric, errors="coerce").dropna()
    if pairs.empty:
        raise ValueError("No records with both pH and silica values; nothing to plot")

    set_global_style()
    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)
    ax.scatter(
        pairs[ph_col],
        pairs[silica_col],
        s=16,
        color=SCATTER_COLOR,
        alpha=STYLE.ALPHA_BAR,
        edgecolors="none",
        label="pH vs Silica Concentrate",
    )
    ax.set_xlabel(ph_col)
    ax.set_ylabel(f"{silica_col}")
    ax.set_title("Pulp pH vs silica concentrate")
    return finalize_and_save(fig, output_dir, "ph_vs_silica")


def plot_distributions(
    histograms: Dict[str, HistogramBins], output_dir: str = "output"
) -> str:
    """Bar-chart histograms side by side, one panel per variable."""
    panels = {k: h for k, h in histograms.items() if h.counts}
    if not panels:
        raise ValueError("histograms are empty; nothing to plot")

    set_global_style()
    fig, axes = plt.subplots(
        1, len(panels), figsize=(5.5 * len(panels), 4.2), squeeze=False
    )
    for ax, (col, hist) in zip(axes[0], panels.items()):
        edges = np.asarray(hist.edges, dtype=float)
        widths = np.diff(edges)
        color = color_for(col)
        ax.bar(
            edges[:-1],
            hist.counts,
            width=widths,
            align="edge",
            color=color,
            alpha=STYLE.ALPHA_BAR,
            edgecolor=color,
            linewidth=1.0,
        )
        try:
            title = SHORT_NAMES[Variable(col)]
        except ValueError:
            title = col
        ax.set_title(title)
        ax.set_xlabel(col)
        ax.set_ylabel("Frequency")

    return finalize_and_save(fig, output_dir, "distributions")
