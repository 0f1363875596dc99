"""
Fitted study pieces shared by the comparison tests.
"""

import pytest

from survcompare.comparison import WeibullLaw
from survcompare.simulation import simulate
from survcompare.survival import coxph, kaplan_meier, survreg


@pytest.fixture(scope="module")
def fits():
    sample = simulate(1000, seed=475)
    return (
        kaplan_meier(sample.time, sample.status),
        coxph(sample.time, sample.status),
        survreg(sample.time, sample.status),
        WeibullLaw(shape=2.0, scale=1.0),
    )
