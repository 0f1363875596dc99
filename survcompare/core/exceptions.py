"""
Exception hierarchy for survcompare.

All exceptions inherit from SurvCompareError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class SurvCompareError(Exception):
    """Base exception for all survcompare errors."""
    pass


class ValidationError(SurvCompareError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks, including
    evaluating a closed-form curve outside its domain (t <= 0).
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    """
    pass


class NumericalError(SurvCompareError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number


class ConvergenceError(SurvCompareError):
    """
    Iterative algorithm failed to converge.

    Raised when Newton-Raphson fails to meet its convergence criterion
    within the maximum number of iterations and the caller asked for a
    hard failure.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final parameter or objective change
        reason: Why convergence failed (e.g., 'max_iterations', 'diverging')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
