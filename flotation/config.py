"""Tunable defaults for the analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PAIRING_MODES = ("independent", "pairwise")


@dataclass(frozen=True)
class AnalysisConfig:
    """Parameters passed explicitly into each engine call.

    Engines never read this object themselves; ``main.py`` and other callers
    unpack it into keyword arguments.

    Attributes:
        forecast_horizon_days: Number of future calendar days to project.
        moving_average_window: Trailing window length for trend smoothing.
        outlier_iqr_factor: Fence multiplier applied to the interquartile range.
        histogram_bins: Number of equal-width bins in distribution figures.
        correlation_pairing: ``"independent"`` or ``"pairwise"`` sample
            selection for correlation cells.
        output_dir: Directory for figures and exported tables.
        date_from: Optional inclusive lower date bound (ISO string).
        date_to: Optional inclusive upper date bound (ISO string).
        search: Optional free-text search term applied after the date filter.
    """

    forecast_horizon_days: int = 7
    moving_average_window: int = 7
    outlier_iqr_factor: float = 1.5
    histogram_bins: int = 20
    correlation_pairing: str = "independent"
    output_dir: str = "output"
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    search: Optional[str] = None

    def __post_init__(self):
        if int(self.forecast_horizon_days) < 1:
            raise ValueError("forecast_horizon_days must be a positive integer.")
        if int(self.moving_average_window) < 1:
            raise ValueError("moving_average_window must be a positive integer.")
        if int(self.histogram_bins) < 1:
            raise ValueError("histogram_bins must be a positive integer.")
        if self.correlation_pairing not in PAIRING_MODES:
            raise ValueError(
                f"Unknown correlation pairing {self.correlation_pairing!r}. "
                f"Expected one of {PAIRING_MODES}."
            )


DEFAULT_CONFIG = AnalysisConfig()
