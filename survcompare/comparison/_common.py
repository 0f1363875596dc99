"""
Parameter payload for a four-way curve comparison.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray

KAPLAN_MEIER = "Kaplan-Meier"
COX_PH = "Cox PH"
WEIBULL_AFT = "Weibull AFT"
TRUE_WEIBULL = "True Weibull"

METHODS = (KAPLAN_MEIER, COX_PH, WEIBULL_AFT, TRUE_WEIBULL)

QUARTILES = (0.25, 0.5, 0.75)


@dataclass(frozen=True)
class ComparisonParams:
    """Curves and quantiles of every method on a shared time grid."""

    grid: NDArray                          # (g,) strictly positive times
    survival: dict[str, NDArray]           # method -> (g,) S(t)
    cumulative_hazard: dict[str, NDArray]  # method -> (g,) H(t)
    probs: NDArray                         # (q,) quantile probabilities
    quantiles: dict[str, NDArray]          # method -> (q,) quantile times
    cox_km_max_abs_diff: float             # max |S_cox - S_km| at event times
    methods: tuple[str, ...]               # row order
