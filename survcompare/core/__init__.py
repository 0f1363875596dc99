"""
Core infrastructure for survcompare.

Shared abstractions used by the simulation, survival and comparison
submodules.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing utilities and tolerance tiers
"""

from survcompare.core.result import Result
from survcompare.core.exceptions import (
    SurvCompareError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    ConvergenceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "SurvCompareError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "ConvergenceError",
]
