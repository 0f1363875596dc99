"""
Evaluation and inversion of right-continuous step curves.

Kaplan-Meier and Cox baseline curves are stored at their distinct event
times only. Between event times the curve is flat; before the first
event time survival is 1 and cumulative hazard is 0.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# R's quantile.survfit treats a plateau within this distance of the
# target as hitting it exactly.
_FLAT_TOL = np.sqrt(np.finfo(np.float64).eps)


def step_evaluate(
    knots: NDArray,
    values: NDArray,
    t,
    initial: float,
) -> NDArray:
    """Evaluate a right-continuous step function.

    Parameters
    ----------
    knots : NDArray
        (m,) increasing jump times.
    values : NDArray
        (m,) value from each jump time onward.
    t : array-like
        Evaluation times.
    initial : float
        Value before the first jump.

    Returns
    -------
    NDArray
        Same shape as ``t``.
    """
    t = np.asarray(t, dtype=np.float64)
    idx = np.searchsorted(knots, t, side="right") - 1
    padded = np.concatenate(([initial], values))
    return padded[idx + 1]


def step_quantile(
    knots: NDArray,
    survival: NDArray,
    probs,
) -> NDArray:
    """Invert a step survival curve at probabilities ``probs``.

    The p-th quantile is the first event time at which S(t) <= 1 - p.
    When the curve sits exactly on 1 - p over an interval, the midpoint
    of that interval is returned, as R does. NaN when the curve never
    drops to 1 - p.
    """
    probs = np.atleast_1d(np.asarray(probs, dtype=np.float64))
    out = np.full(probs.shape, np.nan)
    m = len(knots)

    for i, p in enumerate(probs):
        target = 1.0 - p
        hits = np.nonzero(survival <= target + _FLAT_TOL)[0]
        if len(hits) == 0:
            continue
        j = hits[0]
        if abs(survival[j] - target) < _FLAT_TOL and j + 1 < m:
            out[i] = 0.5 * (knots[j] + knots[j + 1])
        else:
            out[i] = knots[j]

    return out
