"""
Parameter payloads for simulation results.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class SampleParams:
    """Observed follow-up of a simulated cohort.

    Arrays are read-only; the latent failure and censoring draws are not
    kept.
    """

    time: NDArray                # (n,): min(failure, censoring)
    status: NDArray              # (n,) bool: True iff failure observed
    n_events: int
    n_censored: int
