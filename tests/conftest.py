"""
pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def censored_weibull(rng):
    """Small right-censored Weibull(2, 1) sample with Exp(0.5) censoring."""
    n = 200
    failure = rng.weibull(2.0, n)
    censoring = rng.exponential(2.0, n)
    time = np.minimum(failure, censoring)
    event = (failure <= censoring).astype(np.float64)
    return time, event
