"""
SimulationDesign: immutable description of a censored Weibull simulation.

Validates inputs at construction time; the sampler trusts clean values.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationDesign:
    """
    Frozen design for the failure/censoring sampler.

    Attributes:
        n: Number of subjects.
        shape: Weibull shape of the latent failure time.
        scale: Weibull scale of the latent failure time.
        rate: Exponential rate of the latent censoring time.
        seed: Random seed for reproducibility (None draws fresh entropy).
    """
    n: int
    shape: float
    scale: float
    rate: float
    seed: int | None

    @classmethod
    def for_weibull(
        cls,
        n: int,
        *,
        shape: float = 2.0,
        scale: float = 1.0,
        rate: float = 0.5,
        seed: int | None = None,
    ) -> SimulationDesign:
        """
        Create a simulation design with validation.

        Args:
            n: Number of subjects. Must be a positive integer.
            shape: Weibull shape (> 0).
            scale: Weibull scale (> 0).
            rate: Exponential censoring rate (> 0).
            seed: Integer seed or None.

        Returns:
            Validated SimulationDesign.

        Raises:
            ValueError: If inputs are invalid.
        """
        if isinstance(n, bool) or not isinstance(n, numbers.Integral):
            raise ValueError(f"n must be an integer, got {n!r}")
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")

        for name, value in (("shape", shape), ("scale", scale), ("rate", rate)):
            if not value > 0:
                raise ValueError(f"{name} must be > 0, got {value}")

        if seed is not None and (
            isinstance(seed, bool) or not isinstance(seed, numbers.Integral)
        ):
            raise ValueError(f"seed must be an integer or None, got {seed!r}")

        return cls(
            n=int(n),
            shape=float(shape),
            scale=float(scale),
            rate=float(rate),
            seed=None if seed is None else int(seed),
        )

    @property
    def censoring_mean(self) -> float:
        """Mean of the latent censoring time (1 / rate)."""
        return 1.0 / self.rate
