"""
Comparison of survival estimates against each other and the true law.

Usage:
    from survcompare.comparison import WeibullLaw, compare
    from survcompare.comparison.plots import save_figures

    result = compare(km, cox, aft, WeibullLaw(shape=2.0, scale=1.0))
    print(result.summary())
    save_figures(result, "figures")
"""

from survcompare.comparison._common import METHODS, QUARTILES
from survcompare.comparison._reference import WeibullLaw
from survcompare.comparison.solvers import compare, default_grid
from survcompare.comparison.solution import ComparisonSolution

__all__ = [
    "METHODS",
    "QUARTILES",
    "WeibullLaw",
    "compare",
    "default_grid",
    "ComparisonSolution",
]
