"""
True generating law of the simulation, used as ground truth.

Survival, cumulative hazard and quantiles come straight from
scipy.stats.weibull_min. S and H use sf and logsf so the upper tail keeps
full precision where 1 - F(t) would round to zero.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import stats

from survcompare.core.validation import (
    check_array, check_positive, check_probabilities,
)


@dataclass(frozen=True)
class WeibullLaw:
    """Weibull(shape, scale) failure-time law.

    Attributes:
        shape: Weibull shape (k).
        scale: Weibull scale (λ).
    """
    shape: float = 2.0
    scale: float = 1.0

    def __post_init__(self):
        if not self.shape > 0:
            raise ValueError(f"shape must be > 0, got {self.shape}")
        if not self.scale > 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")

    @property
    def _dist(self):
        return stats.weibull_min(c=self.shape, scale=self.scale)

    def survival(self, t):
        """S(t) = 1 - F(t). Requires t > 0."""
        times = check_array(t, "t")
        check_positive(times, "t")
        values = self._dist.sf(times)
        return float(values) if np.ndim(t) == 0 else values

    def cumulative_hazard(self, t):
        """H(t) = -log S(t). Requires t > 0."""
        times = check_array(t, "t")
        check_positive(times, "t")
        values = -self._dist.logsf(times)
        return float(values) if np.ndim(t) == 0 else values

    def quantile(self, p):
        """Time t with S(t) = 1 - p."""
        probs = check_array(p, "p")
        check_probabilities(probs, "p")
        values = self._dist.ppf(probs)
        return float(values) if np.ndim(p) == 0 else values

    @property
    def median(self) -> float:
        return self.quantile(0.5)

    def __str__(self) -> str:
        return f"Weibull(shape={self.shape:g}, scale={self.scale:g})"
