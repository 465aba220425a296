"""Centralized plotting style, colours and save helpers."""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..schema import Variable

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 11.0
    TITLE_FONTSIZE: float = 13.0
    LABEL_FONTSIZE: float = 11.0
    TICK_FONTSIZE: float = 10.0
    LEGEND_FONTSIZE: float = 10.0
    LINEWIDTH: float = 2.0
    LINEWIDTH_THIN: float = 1.2
    LINEWIDTH_FORECAST: float = 2.5
    MARKERSIZE: float = 4.0
    ALPHA_FILL: float = 0.10
    ALPHA_BAR: float = 0.60
    GRID_ALPHA: float = 0.25
    FIGSIZE_SINGLE: tuple[float, float] = (7.5, 4.2)
    FIGSIZE_WIDE: tuple[float, float] = (11.0, 4.6)
    FIGSIZE_SQUARE: tuple[float, float] = (7.0, 6.0)


STYLE = StyleConfig()

VARIABLE_COLORS = {
    Variable.IRON_CONCENTRATE: "#667eea",
    Variable.SILICA_CONCENTRATE: "#f5576c",
    Variable.ORE_PULP_PH: "#4facfe",
    Variable.ORE_PULP_DENSITY: "#38ef7d",
    Variable.STARCH_FLOW: "#f5a623",
    Variable.AMINA_FLOW: "#9467bd",
}
FORECAST_COLORS = {
    Variable.IRON_CONCENTRATE: "#899dfc",
    Variable.SILICA_CONCENTRATE: "#f98da0",
}
SCATTER_COLOR = "#4facfe"


def color_for(variable) -> str:
    """Return the series colour for a variable, grey for unknown labels."""
    try:
        return VARIABLE_COLORS[Variable(variable)]
    except ValueError:
        return "#555555"


def apply_global_style(font_scale: float = 1.0) -> None:
    """Apply the dashboard Matplotlib style scaled by ``font_scale``."""
    scale = float(font_scale)
    plt.rcParams.update(
        {
            "font.size": STYLE.BASE_FONTSIZE * scale,
            "axes.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "figure.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "axes.labelsize": STYLE.LABEL_FONTSIZE * scale,
            "xtick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "ytick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE * scale,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": STYLE.GRID_ALPHA,
            "grid.linestyle": ":",
            "axes.grid": True,
            "legend.frameon": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "figure.dpi": 120,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style()
        _STYLE_STATE["initialized"] = True


def thin_date_ticks(ax: Axes, labels: Sequence[str], max_ticks: int = 12) -> None:
    """Show at most ``max_ticks`` evenly spaced categorical date labels."""
    n = len(labels)
    if n == 0:
        return
    step = max(1, -(-n // max_ticks))
    positions = list(range(0, n, step))
    ax.set_xticks(positions)
    ax.set_xticklabels([labels[i] for i in positions], rotation=45, ha="right")


def sanitize_filename(name: str) -> str:
    """Normalize a filename component into a stable, filesystem-safe token."""
    text = re.sub(r"\s+", "_", str(name).strip())
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"_+", "_", text).strip("._")
    return text or "figure"


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
) -> Path:
    """Save a figure to multiple formats using one extensionless base path."""
    base = Path(savepath_base)
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        if ext not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported extension '{ext}'. Expected one of {OUTPUT_FORMATS}."
            )
        fig.savefig(
            str(base.with_suffix(f".{ext}")),
            dpi=dpi if ext == "png" else None,
            bbox_inches="tight",
            pad_inches=0.12,
        )
    return base.with_suffix(".png")


def finalize_and_save(fig: Figure, output_dir: str, file_stem: str) -> str:
    """Tighten layout, write the PNG/PDF/SVG bundle, close the figure."""
    os.makedirs(output_dir, exist_ok=True)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        fig.tight_layout()
    png_path = save_figure(fig, Path(output_dir) / sanitize_filename(file_stem))
    plt.close(fig)
    return str(png_path)
