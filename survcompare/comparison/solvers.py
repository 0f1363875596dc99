"""
Public API for comparing fitted survival curves.

    compare(km, cox, aft, truth) → ComparisonSolution
"""

from __future__ import annotations

import numpy as np

from survcompare.core.result import Result
from survcompare.core.compute.timing import Timer
from survcompare.core.compute.tolerances import EXACT
from survcompare.core.validation import (
    check_1d, check_array, check_finite, check_positive, check_probabilities,
)
from survcompare.comparison._common import (
    COX_PH, KAPLAN_MEIER, METHODS, QUARTILES, TRUE_WEIBULL, WEIBULL_AFT,
    ComparisonParams,
)
from survcompare.comparison._reference import WeibullLaw
from survcompare.comparison.solution import ComparisonSolution
from survcompare.survival.solution import (
    CoxSolution, KMSolution, WeibullAFTSolution,
)


def default_grid(km: KMSolution, n_grid: int = 200) -> np.ndarray:
    """Equally spaced grid on (0, t_max], t_max the last KM event time.

    Falls back to 1.0 when the sample has no events.
    """
    if n_grid < 1:
        raise ValueError(f"n_grid must be >= 1, got {n_grid}")
    t_max = float(km.time[-1]) if len(km.time) > 0 else 1.0
    return np.linspace(0.0, t_max, n_grid + 1)[1:]


def compare(
    km: KMSolution,
    cox: CoxSolution,
    aft: WeibullAFTSolution,
    truth: WeibullLaw,
    *,
    grid=None,
    n_grid: int = 200,
    probs=QUARTILES,
) -> ComparisonSolution:
    """Evaluate four survival estimates on a shared grid and tabulate quantiles.

    Parameters
    ----------
    km : KMSolution
        Kaplan-Meier fit.
    cox : CoxSolution
        Cox PH fit; its baseline curves are compared.
    aft : WeibullAFTSolution
        Weibull AFT fit. Evaluated at the Cox covariate means, the point
        where the Cox baseline curves live; with no covariates both are
        the marginal curves.
    truth : WeibullLaw
        Generating law.
    grid : array-like or None
        Strictly positive evaluation times. Default: ``default_grid(km, n_grid)``.
    n_grid : int
        Number of grid points when ``grid`` is None.
    probs : sequence of float
        Quantile probabilities, default quartiles (0.25, 0.5, 0.75).

    Returns
    -------
    ComparisonSolution

    Raises
    ------
    ValueError
        If the Cox and AFT fits use different numbers of covariates.
    """
    if grid is None:
        grid_arr = default_grid(km, n_grid)
    else:
        grid_arr = check_array(grid, "grid").astype(np.float64)
        check_1d(grid_arr, "grid")
        check_finite(grid_arr, "grid")
        check_positive(grid_arr, "grid")

    probs_arr = np.atleast_1d(check_array(probs, "probs").astype(np.float64))
    check_probabilities(probs_arr, "probs")

    n_cov = len(cox.covariate_means)
    if len(aft.coefficients) - 1 != n_cov:
        raise ValueError(
            f"cox and aft must share covariates: cox has {n_cov}, "
            f"aft has {len(aft.coefficients) - 1}"
        )
    x = cox.covariate_means if n_cov > 0 else None

    timer = Timer()
    timer.start()

    with timer.section('curves'):
        survival = {
            KAPLAN_MEIER: km.survival_function(grid_arr),
            COX_PH: cox.survival_function(grid_arr),
            WEIBULL_AFT: aft.survival_function(grid_arr, x),
            TRUE_WEIBULL: truth.survival(grid_arr),
        }
        cumulative_hazard = {
            KAPLAN_MEIER: km.cumulative_hazard(grid_arr),
            COX_PH: cox.cumulative_hazard(grid_arr),
            WEIBULL_AFT: aft.cumulative_hazard(grid_arr, x),
            TRUE_WEIBULL: truth.cumulative_hazard(grid_arr),
        }

    with timer.section('quantiles'):
        quantiles = {
            KAPLAN_MEIER: np.atleast_1d(km.quantile(probs_arr)),
            COX_PH: np.atleast_1d(cox.quantile(probs_arr)),
            WEIBULL_AFT: np.atleast_1d(aft.quantile(probs_arr, x)),
            TRUE_WEIBULL: np.atleast_1d(truth.quantile(probs_arr)),
        }

    with timer.section('equivalence'):
        if len(km.time) > 0:
            diff = float(np.max(np.abs(
                cox.survival_function(km.time) - km.survival
            )))
        else:
            diff = 0.0

    timer.stop()

    warnings_list = []
    for method in METHODS:
        for p, q in zip(probs_arr, quantiles[method]):
            if np.isnan(q):
                warnings_list.append(
                    f"{method}: survival never reaches {1.0 - p:g}; "
                    f"{p:g} quantile undefined"
                )

    params = ComparisonParams(
        grid=grid_arr,
        survival=survival,
        cumulative_hazard=cumulative_hazard,
        probs=probs_arr,
        quantiles=quantiles,
        cox_km_max_abs_diff=diff,
        methods=METHODS,
    )

    result = Result(
        params=params,
        info={
            "method": "curve comparison",
            "truth": str(truth),
            "n_grid": len(grid_arr),
            "cox_null_model": cox.is_null_model,
            "cox_km_equivalent": diff <= EXACT.atol,
        },
        timing=timer.result(),
        backend_name="cpu_compare",
        warnings=tuple(warnings_list),
    )

    return ComparisonSolution(_result=result)
