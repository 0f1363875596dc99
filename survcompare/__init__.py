"""
survcompare: simulation study comparing survival estimators.

Simulates right-censored Weibull data and compares the Kaplan-Meier
estimator, a Cox proportional hazards fit and a Weibull accelerated
failure time fit against each other and against the true generating law.

Submodules:
    simulation: Seeded Weibull / exponential-censoring sampler
    survival: Kaplan-Meier, Cox PH and Weibull AFT estimators
    comparison: True-law reference, curve/quartile comparison, plots
    report: End-to-end study run and command-line entry point
"""

__version__ = "0.1.0"

from survcompare import simulation
from survcompare import survival
from survcompare import comparison

__all__ = [
    "__version__",
    "simulation",
    "survival",
    "comparison",
]
