"""
Survival analysis.

Public API:
    kaplan_meier(...) -> KMSolution
    coxph(...) -> CoxSolution
    survreg(...) -> WeibullAFTSolution
"""

from survcompare.survival.solvers import coxph, kaplan_meier, survreg
from survcompare.survival.solution import (
    CoxSolution,
    KMSolution,
    WeibullAFTSolution,
)

__all__ = [
    "coxph",
    "kaplan_meier",
    "survreg",
    "CoxSolution",
    "KMSolution",
    "WeibullAFTSolution",
]
