"""
Shared compute infrastructure for survcompare.

Submodules:
    timing: Execution timing utilities
    tolerances: Named tolerance tiers for numerical comparison
"""

from survcompare.core.compute.timing import Timer

__all__ = [
    "Timer",
]
