"""
Tolerance tiers for numerical comparison.

Defines precision expectations for the different kinds of agreement the
study checks:
- exact: identities that hold up to floating-point rounding
  (zero-covariate Cox vs Kaplan-Meier, H = -log S)
- sampling: agreement between a fitted curve and the generating law,
  limited by sampling noise at n = 1000

Used by the comparison module and the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='exact',
    description='Algebraic identity, floating-point rounding only',
)

SAMPLING = ToleranceTier(
    rtol=0.1,
    atol=0.05,
    name='sampling',
    description='Fitted vs true law at n = 1000',
)
