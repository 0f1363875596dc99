"""
Tests for the comparison plots.
"""

import matplotlib.pyplot as plt
import pytest

from survcompare.comparison import METHODS, compare
from survcompare.comparison.plots import (
    plot_cumulative_hazard, plot_survival, save_figures,
)


@pytest.fixture(scope="module")
def comparison(fits):
    return compare(*fits, n_grid=50)


class TestPlots:

    def test_survival_overlay(self, comparison):
        fig = plot_survival(comparison)
        ax = fig.axes[0]
        labels = [line.get_label() for line in ax.get_lines()]
        assert labels == list(METHODS)
        assert ax.get_ylim() == pytest.approx((-0.02, 1.02))
        assert ax.get_ylabel() == "S(t)"
        plt.close(fig)

    def test_cumulative_hazard_overlay(self, comparison):
        fig = plot_cumulative_hazard(comparison, title="H")
        ax = fig.axes[0]
        assert len(ax.get_lines()) == 4
        assert ax.get_title() == "H"
        assert ax.get_ylabel() == "H(t)"
        plt.close(fig)

    def test_step_drawstyle_for_nonparametric(self, comparison):
        fig = plot_survival(comparison)
        styles = {line.get_label(): line.get_drawstyle()
                  for line in fig.axes[0].get_lines()}
        assert styles["Kaplan-Meier"] == "steps-post"
        assert styles["Cox PH"] == "steps-post"
        assert styles["Weibull AFT"] == "default"
        plt.close(fig)

    def test_existing_axes(self, comparison):
        fig, ax = plt.subplots()
        assert plot_survival(comparison, ax=ax) is fig
        plt.close(fig)


class TestSaveFigures:

    @pytest.mark.parametrize("fmt", ["png", "svg"])
    def test_writes_both(self, comparison, tmp_path, fmt):
        paths = save_figures(comparison, tmp_path / "out", fmt=fmt, dpi=60)
        assert set(paths) == {"survival", "cumulative_hazard"}
        for path in paths.values():
            assert path.suffix == f".{fmt}"
            assert path.stat().st_size > 0

    def test_closes_figures(self, comparison, tmp_path):
        before = len(plt.get_fignums())
        save_figures(comparison, tmp_path, dpi=60)
        assert len(plt.get_fignums()) == before

    def test_bad_format(self, comparison, tmp_path):
        with pytest.raises(ValueError, match="fmt"):
            save_figures(comparison, tmp_path, fmt="gif")
