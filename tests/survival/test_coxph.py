"""
Tests for coxph() matching R survival::coxph().

R reference code:
    library(survival)
    coxph(Surv(time, event) ~ x1 + x2, data=...)
    coxph(Surv(time, event) ~ 1)            # null model
    survfit(coxph(Surv(time, event) ~ 1))   # baseline curves
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from survcompare.core.compute.tolerances import EXACT
from survcompare.survival import coxph, kaplan_meier, CoxSolution


# ── Fixtures ─────────────────────────────────────────────────────────

# Simple single-covariate example
# R:
#   time <- c(1, 2, 3, 4, 5, 6, 7, 8, 9, 10)
#   event <- c(1, 1, 1, 0, 1, 1, 0, 1, 1, 1)
#   x <- c(0, 0, 0, 0, 0, 1, 1, 1, 1, 1)
#   coxph(Surv(time, event) ~ x)
SIMPLE_TIME = np.array([1, 2, 3, 4, 5, 6, 7, 8, 9, 10], dtype=np.float64)
SIMPLE_EVENT = np.array([1, 1, 1, 0, 1, 1, 0, 1, 1, 1], dtype=np.float64)
SIMPLE_X = np.array([[0], [0], [0], [0], [0], [1], [1], [1], [1], [1]],
                     dtype=np.float64)

TWO_COV_TIME = np.array([3, 5, 7, 11, 13, 15, 2, 4, 6, 8,
                          10, 12, 14, 16, 18, 20, 1, 9, 17, 19],
                         dtype=np.float64)
TWO_COV_EVENT = np.array([1, 1, 0, 1, 1, 0, 1, 0, 1, 1,
                           0, 1, 1, 0, 1, 1, 1, 1, 0, 1],
                          dtype=np.float64)
TWO_COV_X = np.column_stack([
    [0.5, 1.2, -0.3, 0.8, -0.5, 1.0, -1.2, 0.3, 0.7, -0.8,
     1.5, -0.2, 0.4, -1.0, 0.9, -0.6, 1.1, -0.4, 0.2, -0.1],
    [1, 0, 1, 0, 1, 1, 0, 1, 0, 1,
     0, 1, 0, 1, 1, 0, 0, 1, 0, 1],
]).astype(np.float64)

# Tied event times
TIED_TIME = np.array([1, 1, 2, 2, 3, 3, 4, 4], dtype=np.float64)
TIED_EVENT = np.array([1, 1, 1, 1, 0, 1, 0, 1], dtype=np.float64)


# ═══════════════════════════════════════════════════════════════════════
# Null model (no covariates)
# ═══════════════════════════════════════════════════════════════════════


class TestCoxPHNullModel:
    """coxph(Surv(time, event) ~ 1)."""

    def test_no_iterations(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT)

        assert isinstance(result, CoxSolution)
        assert result.is_null_model
        assert result.converged is True
        assert result.n_iter == 0
        assert len(result.coefficients) == 0
        assert len(result.standard_errors) == 0
        assert result.concordance == 0.5

    def test_null_loglik(self):
        """Without ties, loglik = -Σ log(n_j) over event times.

        R:
            coxph(Surv(c(1,2,3,4,5,6), c(1,0,1,0,1,1)) ~ 1)$loglik
            # -3.871201 (= -log(48))
        """
        result = coxph([1, 2, 3, 4, 5, 6], [1, 0, 1, 0, 1, 1])
        assert result.loglik[0] == pytest.approx(-np.log(48.0), rel=1e-12)
        assert result.loglik[0] == result.loglik[1]

    def test_zero_column_matrix_is_null_model(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT, np.zeros((10, 0)))
        assert result.is_null_model

    def test_survival_equals_km_at_event_times(self, censored_weibull):
        time, event = censored_weibull
        km = kaplan_meier(time, event)
        cox = coxph(time, event)

        assert_allclose(cox.baseline_time, km.time)
        assert_allclose(
            cox.survival_function(km.time), km.survival,
            rtol=EXACT.rtol, atol=EXACT.atol,
        )

    def test_survival_equals_km_with_ties(self):
        km = kaplan_meier(TIED_TIME, TIED_EVENT)
        for ties in ("efron", "breslow"):
            cox = coxph(TIED_TIME, TIED_EVENT, ties=ties)
            assert_allclose(cox.baseline_survival, km.survival,
                            rtol=EXACT.rtol, atol=EXACT.atol)

    def test_breslow_cumhaz_is_nelson_aalen(self, censored_weibull):
        time, event = censored_weibull
        km = kaplan_meier(time, event)
        cox = coxph(time, event, ties="breslow")
        assert_allclose(cox.baseline_cumhaz, km.cumhaz,
                        rtol=EXACT.rtol, atol=EXACT.atol)

    def test_efron_cumhaz_with_ties(self):
        """Efron increment at d tied deaths is Σ_s 1 / (n - s).

        R:
            survfit(coxph(Surv(time, event) ~ 1, ties="efron"))$cumhaz
        """
        cox = coxph(TIED_TIME, TIED_EVENT, ties="efron")
        # t=1: n=8, d=2; t=2: n=6, d=2; t=3: n=4, d=1; t=4: n=2, d=1
        increments = [1/8 + 1/7, 1/6 + 1/5, 1/4, 1/2]
        assert_allclose(cox.baseline_cumhaz, np.cumsum(increments), rtol=1e-12)

    def test_efron_exceeds_breslow_with_ties(self):
        efron = coxph(TIED_TIME, TIED_EVENT, ties="efron")
        breslow = coxph(TIED_TIME, TIED_EVENT, ties="breslow")
        assert np.all(efron.baseline_cumhaz >= breslow.baseline_cumhaz)
        assert efron.baseline_cumhaz[0] > breslow.baseline_cumhaz[0]

    def test_quantiles_equal_km(self, censored_weibull):
        time, event = censored_weibull
        km = kaplan_meier(time, event)
        cox = coxph(time, event)
        probs = [0.25, 0.5, 0.75]
        assert_allclose(cox.quantile(probs), km.quantile(probs), equal_nan=True)

    def test_step_evaluation(self):
        cox = coxph([1, 2, 3, 4, 5, 6], [1, 0, 1, 0, 1, 1])
        assert cox.survival_function(0.5) == 1.0
        assert cox.cumulative_hazard(0.5) == 0.0
        assert cox.survival_function(2.0) == pytest.approx(5/6)

    def test_summary(self):
        s = coxph(SIMPLE_TIME, SIMPLE_EVENT).summary()
        assert "Null model" in s
        assert "log likelihood=" in s
        assert "n= 10, number of events= 8" in s
        assert "exp(coef)" not in s

    def test_info_flags_null_model(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT)
        assert result._result.info["null_model"] is True


# ═══════════════════════════════════════════════════════════════════════
# Covariate models
# ═══════════════════════════════════════════════════════════════════════


class TestCoxPHBasic:
    """Basic Cox PH model fitting."""

    def test_single_covariate_converges(self):
        """Near-perfect separation: R reports coef=-22.15, concordance=0.778."""
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X)

        assert result.converged is True
        assert result.n_observations == 10
        assert result.n_events == 8
        assert result.ties == "efron"
        assert not result.is_null_model
        assert result.coefficients[0] < -10
        assert result.concordance == pytest.approx(0.778, abs=0.01)

    def test_hazard_ratios_consistent(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X)
        assert_allclose(result.hazard_ratios, np.exp(result.coefficients),
                        rtol=1e-10)

    def test_two_covariates(self):
        result = coxph(TWO_COV_TIME, TWO_COV_EVENT, TWO_COV_X)

        assert result.converged is True
        assert len(result.coefficients) == 2
        assert_allclose(result.z_statistics,
                        result.coefficients / result.standard_errors,
                        rtol=1e-10)
        assert np.all((result.p_values >= 0) & (result.p_values <= 1))
        assert result.loglik[1] >= result.loglik[0] - 1e-10
        assert 0.0 <= result.concordance <= 1.0

    def test_covariate_means(self):
        result = coxph(TWO_COV_TIME, TWO_COV_EVENT, TWO_COV_X)
        assert_allclose(result.covariate_means, TWO_COV_X.mean(axis=0))

    def test_baseline_survival_valid(self):
        result = coxph(TWO_COV_TIME, TWO_COV_EVENT, TWO_COV_X)
        s = result.baseline_survival
        assert np.all((s >= 0) & (s <= 1))
        assert np.all(np.diff(s) <= 0)
        assert np.all(np.diff(result.baseline_cumhaz) > 0)

    def test_strong_signal(self, rng):
        n = 100
        x = rng.standard_normal((n, 1))
        time = rng.exponential(np.exp(-2 * x.ravel()))
        result = coxph(time, np.ones(n), x)
        assert result.converged is True
        assert result.coefficients[0] > 0


class TestCoxPHTies:

    def test_breslow(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X, ties="breslow")
        assert result.ties == "breslow"
        assert result.converged is True
        assert result.coefficients[0] < -10

    def test_no_ties_efron_equals_breslow(self):
        result_efron = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X, ties="efron")
        result_breslow = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X, ties="breslow")
        assert_allclose(result_efron.coefficients, result_breslow.coefficients,
                        rtol=1e-4)

    def test_tied_data_both_converge(self):
        X = np.array([[0], [1], [0], [1], [0], [1], [0], [1]], dtype=np.float64)
        assert coxph(TIED_TIME, TIED_EVENT, X, ties="efron").converged
        assert coxph(TIED_TIME, TIED_EVENT, X, ties="breslow").converged


class TestCoxPHSolution:

    def test_repr(self):
        r = repr(coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X))
        assert "CoxSolution" in r
        assert "concordance=" in r

    def test_summary(self):
        s = coxph(TWO_COV_TIME, TWO_COV_EVENT, TWO_COV_X).summary()
        assert "coxph()" in s
        assert "exp(coef)" in s
        assert "Pr(>|z|)" in s
        assert "Concordance" in s
        assert "Likelihood ratio" in s

    def test_metadata(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X)
        assert result.backend_name == "cpu_cox"
        assert "fit" in result.timing


class TestCoxPHValidation:

    def test_invalid_ties(self):
        with pytest.raises(ValueError, match="ties"):
            coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X, ties="invalid")

    def test_negative_time_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            coxph([-1, 2, 3], [1, 1, 1])

    def test_invalid_event_values(self):
        with pytest.raises(ValueError, match="0 and 1"):
            coxph([1, 2, 3], [0, 1, 2], [[1], [2], [3]])

    def test_x_row_mismatch(self):
        with pytest.raises(ValueError, match="rows"):
            coxph([1, 2, 3], [1, 1, 1], [[1, 2], [3, 4]])


class TestCoxPHEdgeCases:

    def test_no_events(self):
        """All censored: degenerate model with empty baseline."""
        result = coxph([1, 2, 3, 4, 5], np.zeros(5), np.ones((5, 1)))
        assert_allclose(result.coefficients, [0.0], atol=1e-10)
        assert result.n_events == 0
        assert len(result.baseline_time) == 0
        assert result.survival_function(3.0) == 1.0
        assert any("No events" in w for w in result.warnings)

    def test_no_events_null_model(self):
        result = coxph([1, 2, 3], np.zeros(3))
        assert result.is_null_model
        assert np.isnan(result.quantile(0.5))

    def test_single_event(self):
        result = coxph([1, 2, 3, 4, 5], [0, 0, 1, 0, 0],
                       [[1], [2], [3], [4], [5]])
        assert result.n_events == 1
        assert np.all(np.isfinite(result.coefficients))

    def test_max_iter_respected(self):
        result = coxph(SIMPLE_TIME, SIMPLE_EVENT, SIMPLE_X, max_iter=1)
        assert result.n_iter <= 1
