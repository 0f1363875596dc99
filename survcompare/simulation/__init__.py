"""
Simulation of right-censored survival data.

Usage:
    from survcompare.simulation import simulate

    sample = simulate(1000, shape=2.0, scale=1.0, rate=0.5, seed=475)
    sample.time, sample.status
"""

from survcompare.simulation.solvers import simulate
from survcompare.simulation.solution import SampleSolution
from survcompare.simulation.design import SimulationDesign

__all__ = [
    "simulate",
    "SampleSolution",
    "SimulationDesign",
]
