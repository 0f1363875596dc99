"""
Solution wrapper for curve comparisons.
"""

from __future__ import annotations

import numpy as np

from survcompare.core.result import Result
from survcompare.comparison._common import ComparisonParams


class ComparisonSolution:
    """Four-way comparison of survival estimates.

    Holds the survival and cumulative hazard curves on the shared grid and
    the quantile table; summary() renders the table as text.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[ComparisonParams]) -> None:
        self._result = _result

    @property
    def grid(self):
        return self._result.params.grid

    @property
    def methods(self) -> tuple[str, ...]:
        return self._result.params.methods

    @property
    def survival(self) -> dict:
        """Method name -> S(t) on the grid."""
        return self._result.params.survival

    @property
    def cumulative_hazard(self) -> dict:
        """Method name -> H(t) on the grid."""
        return self._result.params.cumulative_hazard

    @property
    def probs(self):
        return self._result.params.probs

    @property
    def quantiles(self) -> dict:
        """Method name -> quantile times at ``probs``."""
        return self._result.params.quantiles

    @property
    def cox_km_max_abs_diff(self) -> float:
        """Largest |S_cox(t) - S_km(t)| over the KM event times."""
        return self._result.params.cox_km_max_abs_diff

    def quartile_table(self) -> dict[str, tuple[float, ...]]:
        """Method name -> (Q1, median, Q3) (or one entry per prob)."""
        return {
            method: tuple(float(q) for q in self.quantiles[method])
            for method in self.methods
        }

    @property
    def info(self):
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Quantile table, one row per method."""
        headers = [_prob_label(p) for p in self.probs]

        lines = []
        lines.append("Quantiles of the survival time")
        lines.append("")
        lines.append(
            f"  {'':<14s}" + "".join(f"{h:>10s}" for h in headers)
        )
        for method in self.methods:
            row = "".join(
                f"{'NA':>10s}" if np.isnan(q) else f"{q:10.4f}"
                for q in self.quantiles[method]
            )
            lines.append(f"  {method:<14s}{row}")

        lines.append("")
        lines.append(
            f"  max |S_cox - S_km| at event times = "
            f"{self.cox_km_max_abs_diff:.3g}"
        )

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ComparisonSolution(methods={len(self.methods)}, "
            f"grid={len(self.grid)}, probs={list(self.probs)})"
        )


def _prob_label(p: float) -> str:
    if np.isclose(p, 0.25):
        return "Q1"
    if np.isclose(p, 0.5):
        return "Median"
    if np.isclose(p, 0.75):
        return "Q3"
    return f"{100 * p:g}%"
