"""
Comparison plots: four-curve overlays of S(t) and H(t).

Kaplan-Meier and Cox curves are drawn as right-continuous steps, the AFT
fit and the true law as smooth lines.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

from survcompare.comparison._common import (
    COX_PH, KAPLAN_MEIER, TRUE_WEIBULL, WEIBULL_AFT,
)
from survcompare.comparison.solution import ComparisonSolution

_STYLES = {
    KAPLAN_MEIER: {"color": "black", "drawstyle": "steps-post", "linewidth": 1.2},
    COX_PH: {"color": "tab:orange", "drawstyle": "steps-post", "linestyle": "--"},
    WEIBULL_AFT: {"color": "tab:blue", "linewidth": 1.5},
    TRUE_WEIBULL: {"color": "tab:red", "linestyle": ":", "linewidth": 2.0},
}


def _overlay(comparison, curves, ax, title, ylabel):
    if ax is None:
        fig, ax = plt.subplots(figsize=(7.0, 4.2), dpi=140)
    else:
        fig = ax.figure

    for method in comparison.methods:
        ax.plot(
            comparison.grid, curves[method],
            label=method, **_STYLES.get(method, {}),
        )

    ax.set_title(title)
    ax.set_xlabel("Time")
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)
    ax.legend()
    return fig, ax


def plot_survival(
    comparison: ComparisonSolution,
    ax=None,
    *,
    title: str = "Survival function",
):
    """Overlay the four survival curves. Returns the Figure."""
    fig, ax = _overlay(comparison, comparison.survival, ax, title, "S(t)")
    ax.set_ylim(-0.02, 1.02)
    return fig


def plot_cumulative_hazard(
    comparison: ComparisonSolution,
    ax=None,
    *,
    title: str = "Cumulative hazard function",
):
    """Overlay the four cumulative hazard curves. Returns the Figure."""
    fig, _ = _overlay(
        comparison, comparison.cumulative_hazard, ax, title, "H(t)",
    )
    return fig


def save_figures(
    comparison: ComparisonSolution,
    output_dir,
    *,
    fmt: str = "png",
    dpi: int = 140,
) -> dict[str, Path]:
    """Write both comparison plots to ``output_dir``.

    Returns
    -------
    dict
        ``{"survival": path, "cumulative_hazard": path}``
    """
    if fmt not in ("png", "pdf", "svg"):
        raise ValueError(f"fmt must be 'png', 'pdf', or 'svg', got {fmt!r}")

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name, plotter in (
        ("survival", plot_survival),
        ("cumulative_hazard", plot_cumulative_hazard),
    ):
        fig = plotter(comparison)
        path = out / f"{name}.{fmt}"
        try:
            fig.tight_layout()
            fig.savefig(path, dpi=dpi)
        finally:
            plt.close(fig)
        paths[name] = path

    return paths
