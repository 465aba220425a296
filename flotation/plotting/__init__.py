"""
Dashboard figures for flotation process analysis.

All plotting functions accept precomputed results and do not perform
statistics themselves. Each one writes a PNG/PDF/SVG bundle and returns the
PNG path.

Modules:
    dashboard_plots:
        Daily grade trend, pulp pH vs silica scatter and per-variable
        histograms.

    correlation_plots:
        Annotated heatmap of the Pearson correlation matrix.

    forecast_plots:
        Historical daily grades with moving averages and the dashed linear
        projection over the forecast horizon.
"""

from .correlation_plots import plot_correlation_heatmap
from .dashboard_plots import plot_daily_trend, plot_distributions, plot_ph_vs_silica
from .forecast_plots import plot_forecast
from .style import set_global_style

__all__ = [
    "plot_correlation_heatmap",
    "plot_daily_trend",
    "plot_distributions",
    "plot_forecast",
    "plot_ph_vs_silica",
    "set_global_style",
]
