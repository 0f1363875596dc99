"""
Weibull failure times under independent exponential censoring.

For subject i:
    T_i ~ Weibull(shape, scale)      latent failure time
    C_i ~ Exponential(rate)          latent censoring time
    time_i = min(T_i, C_i)
    status_i = T_i <= C_i

All n failure times are drawn before the n censoring times, so a given
seed fixes both streams independently of how the arrays are consumed.
"""

from __future__ import annotations

import numpy as np

from survcompare.simulation._common import SampleParams
from survcompare.simulation.design import SimulationDesign


def draw_sample(design: SimulationDesign) -> SampleParams:
    """Draw one censored sample from a validated design.

    Parameters
    ----------
    design : SimulationDesign

    Returns
    -------
    SampleParams
    """
    rng = np.random.default_rng(design.seed)

    failure = design.scale * rng.weibull(design.shape, design.n)
    censoring = rng.exponential(design.censoring_mean, design.n)

    time = np.minimum(failure, censoring)
    status = failure <= censoring

    time.flags.writeable = False
    status.flags.writeable = False

    n_events = int(np.sum(status))

    return SampleParams(
        time=time,
        status=status,
        n_events=n_events,
        n_censored=design.n - n_events,
    )
