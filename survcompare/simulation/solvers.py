"""
Public API for simulation.

    simulate(n, shape=..., scale=..., rate=..., seed=...) → SampleSolution
"""

from __future__ import annotations

from survcompare.core.result import Result
from survcompare.core.compute.timing import Timer
from survcompare.simulation.design import SimulationDesign
from survcompare.simulation._sampler import draw_sample
from survcompare.simulation.solution import SampleSolution


def simulate(
    n: int,
    *,
    shape: float = 2.0,
    scale: float = 1.0,
    rate: float = 0.5,
    seed: int | None = None,
) -> SampleSolution:
    """Simulate right-censored Weibull survival data.

    Parameters
    ----------
    n : int
        Number of subjects.
    shape, scale : float
        Weibull shape and scale of the latent failure time.
    rate : float
        Rate of the exponential latent censoring time.
    seed : int or None
        Seed for numpy's default generator. The same seed reproduces the
        same times and statuses.

    Returns
    -------
    SampleSolution
    """
    design = SimulationDesign.for_weibull(
        n, shape=shape, scale=scale, rate=rate, seed=seed,
    )

    timer = Timer()
    timer.start()

    with timer.section('sampling'):
        params = draw_sample(design)

    timer.stop()

    warnings_list = []
    if params.n_events == 0:
        warnings_list.append("All subjects censored; no events observed")
    elif params.n_censored == 0:
        warnings_list.append("No subjects censored")

    result = Result(
        params=params,
        info={
            "method": "Weibull failure / exponential censoring",
            "generator": "numpy.random.default_rng",
        },
        timing=timer.result(),
        backend_name="cpu_sampler",
        warnings=tuple(warnings_list),
    )

    return SampleSolution(_result=result, _design=design)
