"""
Tests for compare(): four survival estimates on a shared grid.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from survcompare.comparison import (
    METHODS, QUARTILES, ComparisonSolution, WeibullLaw, compare, default_grid,
)
from survcompare.core.compute.tolerances import EXACT, SAMPLING
from survcompare.core.exceptions import DimensionError, ValidationError
from survcompare.survival import coxph, kaplan_meier, survreg


class TestDefaultGrid:

    def test_spans_to_last_event(self, fits):
        km = fits[0]
        grid = default_grid(km, 200)
        assert len(grid) == 200
        assert grid[0] > 0
        assert grid[-1] == pytest.approx(km.time[-1])
        assert np.all(np.diff(grid) > 0)

    def test_no_events_falls_back(self):
        km = kaplan_meier([1.0, 2.0], [0, 0])
        assert default_grid(km, 4)[-1] == pytest.approx(1.0)

    def test_bad_n_grid(self, fits):
        with pytest.raises(ValueError, match="n_grid"):
            default_grid(fits[0], 0)


class TestCompare:

    def test_table_shape(self, fits):
        result = compare(*fits)
        assert isinstance(result, ComparisonSolution)
        table = result.quartile_table()
        assert tuple(table) == METHODS
        assert all(len(row) == 3 for row in table.values())
        assert_allclose(result.probs, QUARTILES)

    def test_curves_on_shared_grid(self, fits):
        result = compare(*fits, n_grid=50)
        for method in METHODS:
            assert result.survival[method].shape == (50,)
            assert result.cumulative_hazard[method].shape == (50,)
            s = result.survival[method]
            assert np.all((s >= 0) & (s <= 1))

    def test_cox_equals_km(self, fits):
        result = compare(*fits)
        assert result.cox_km_max_abs_diff <= EXACT.atol
        assert_allclose(result.survival["Cox PH"], result.survival["Kaplan-Meier"],
                        atol=EXACT.atol)
        assert_allclose(result.quantiles["Cox PH"], result.quantiles["Kaplan-Meier"])

    def test_true_row_is_closed_form(self, fits):
        table = compare(*fits).quartile_table()
        p = np.array(QUARTILES)
        assert_allclose(table["True Weibull"], np.sqrt(-np.log(1 - p)), rtol=1e-12)

    def test_estimates_near_truth(self, fits):
        table = compare(*fits).quartile_table()
        truth = np.array(table["True Weibull"])
        for method in ("Kaplan-Meier", "Cox PH", "Weibull AFT"):
            assert_allclose(table[method], truth,
                            rtol=SAMPLING.rtol, atol=SAMPLING.atol)

    def test_quartiles_increasing(self, fits):
        for row in compare(*fits).quartile_table().values():
            assert row[0] < row[1] < row[2]

    def test_explicit_grid(self, fits):
        result = compare(*fits, grid=[0.5, 1.0, 1.5])
        assert_allclose(result.grid, [0.5, 1.0, 1.5])
        assert_allclose(
            result.survival["True Weibull"], np.exp(-np.array([0.5, 1.0, 1.5]) ** 2),
        )

    def test_custom_probs(self, fits):
        result = compare(*fits, probs=[0.1, 0.9])
        assert result.quantiles["Weibull AFT"].shape == (2,)
        assert "10%" in result.summary()

    def test_metadata(self, fits):
        result = compare(*fits)
        assert result.backend_name == "cpu_compare"
        assert {"curves", "quantiles", "equivalence"} <= set(result.timing)
        assert result.info["cox_null_model"] is True
        assert result.info["cox_km_equivalent"] is True
        assert result.info["truth"] == "Weibull(shape=2, scale=1)"


class TestCompareValidation:

    @pytest.mark.parametrize("grid", [[0.0, 1.0], [-1.0, 1.0]])
    def test_non_positive_grid(self, fits, grid):
        with pytest.raises(ValidationError, match="strictly positive"):
            compare(*fits, grid=grid)

    def test_non_finite_grid(self, fits):
        with pytest.raises(ValidationError, match="non-finite"):
            compare(*fits, grid=[1.0, np.inf])

    def test_2d_grid(self, fits):
        with pytest.raises(DimensionError):
            compare(*fits, grid=[[1.0, 2.0]])

    def test_bad_probs(self, fits):
        with pytest.raises(ValidationError):
            compare(*fits, probs=[0.5, 1.0])


class TestUndefinedQuantiles:

    def test_nan_and_warning(self):
        """Heavy censoring: KM and Cox never reach 0.25."""
        time = np.array([0.2, 0.4, 0.6, 0.8, 1.0, 1.2, 1.4, 1.6])
        event = np.array([1, 0, 1, 0, 0, 0, 0, 0])
        result = compare(
            kaplan_meier(time, event),
            coxph(time, event),
            survreg(time, event),
            WeibullLaw(),
        )

        assert np.isnan(result.quantiles["Kaplan-Meier"][2])
        assert np.isnan(result.quantiles["Cox PH"][2])
        assert np.all(np.isfinite(result.quantiles["Weibull AFT"]))
        assert any(
            w.startswith("Kaplan-Meier") and "quantile undefined" in w
            for w in result.warnings
        )
        assert "NA" in result.summary()


class TestComparisonSolution:

    def test_summary_table(self, fits):
        s = compare(*fits).summary()
        assert s.startswith("Quantiles of the survival time")
        for header in ("Q1", "Median", "Q3"):
            assert header in s
        for method in METHODS:
            assert method in s
        assert "max |S_cox - S_km|" in s

    def test_repr(self, fits):
        assert "ComparisonSolution(methods=4" in repr(compare(*fits))


class TestCompareWithCovariates:
    """Cox baseline curves live at the covariate means; the AFT follows."""

    @pytest.fixture(scope="class")
    def covariate_fits(self):
        rng = np.random.default_rng(12)
        x = rng.normal(1.0, 0.5, 300)
        t = np.exp(0.3 * x) * rng.weibull(2.0, 300)
        c = rng.exponential(3.0, 300)
        time = np.minimum(t, c)
        event = (t <= c).astype(np.float64)
        return (
            kaplan_meier(time, event),
            coxph(time, event, x[:, None]),
            survreg(time, event, x[:, None]),
            WeibullLaw(),
        )

    def test_aft_at_covariate_means(self, covariate_fits):
        km, cox, aft, truth = covariate_fits
        grid = np.array([0.5, 1.0, 1.5])
        result = compare(km, cox, aft, truth, grid=grid)

        x_bar = cox.covariate_means
        assert_allclose(result.survival["Weibull AFT"],
                        aft.survival_function(grid, x_bar), rtol=1e-12)
        assert_allclose(result.cumulative_hazard["Weibull AFT"],
                        aft.cumulative_hazard(grid, x_bar), rtol=1e-12)
        assert_allclose(result.quantiles["Weibull AFT"],
                        aft.quantile(np.array(QUARTILES), x_bar), rtol=1e-12)
        assert result.info["cox_null_model"] is False

    def test_mismatched_covariates(self, covariate_fits, fits):
        km, cox, _, truth = covariate_fits
        with pytest.raises(ValueError, match="share covariates"):
            compare(km, cox, fits[2], truth)
