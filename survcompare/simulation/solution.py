"""
Solution wrapper for simulated samples.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from survcompare.core.result import Result
from survcompare.simulation._common import SampleParams

if TYPE_CHECKING:
    from survcompare.simulation.design import SimulationDesign


@dataclass(frozen=True, eq=False)
class SampleSolution:
    """
    User-facing simulated sample.

    The time/status arrays feed kaplan_meier(), coxph() and survreg()
    directly.
    """
    _result: Result[SampleParams]
    _design: 'SimulationDesign'

    # --- Observed data ---

    @property
    def time(self) -> NDArray[np.floating[Any]]:
        """Observed follow-up time, shape (n,)."""
        return self._result.params.time

    @property
    def status(self) -> NDArray[np.bool_]:
        """Event indicator, shape (n,). True = failure observed."""
        return self._result.params.status

    @property
    def event(self) -> NDArray[np.floating[Any]]:
        """Event indicator as float 0/1."""
        return self.status.astype(np.float64)

    @property
    def n(self) -> int:
        return self._design.n

    @property
    def n_events(self) -> int:
        return self._result.params.n_events

    @property
    def n_censored(self) -> int:
        return self._result.params.n_censored

    @property
    def censoring_fraction(self) -> float:
        """Fraction of subjects censored."""
        return self.n_censored / self.n

    # --- Design ---

    @property
    def shape(self) -> float:
        return self._design.shape

    @property
    def scale(self) -> float:
        return self._design.scale

    @property
    def rate(self) -> float:
        return self._design.rate

    @property
    def seed(self) -> int | None:
        """Random seed used."""
        return self._design.seed

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Short description of the simulated cohort."""
        lines = []
        lines.append("Call: simulate()")
        lines.append("")
        lines.append(
            f"  T ~ Weibull(shape={self.shape:g}, scale={self.scale:g}), "
            f"C ~ Exp(rate={self.rate:g}), seed={self.seed}"
        )
        lines.append(
            f"  n={self.n}, events={self.n_events}, "
            f"censored={self.n_censored} "
            f"({100.0 * self.censoring_fraction:.1f}%)"
        )
        lines.append(
            f"  follow-up: min={np.min(self.time):.4g}, "
            f"median={np.median(self.time):.4g}, "
            f"max={np.max(self.time):.4g}"
        )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SampleSolution(n={self.n}, events={self.n_events}, "
            f"seed={self.seed})"
        )
