"""
Public API for survival analysis.

    kaplan_meier(time, event) → KMSolution
    coxph(time, event, X=None) → CoxSolution
    survreg(time, event, X=None) → WeibullAFTSolution

Each function validates inputs, creates a SurvivalDesign, runs the fit
kernel, and wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Literal

import numpy as np

from survcompare.core.exceptions import SingularMatrixError
from survcompare.core.result import Result
from survcompare.core.compute.timing import Timer
from survcompare.survival.design import SurvivalDesign
from survcompare.survival._km import kaplan_meier_fit
from survcompare.survival._cox import cox_fit
from survcompare.survival._weibull import weibull_aft_fit
from survcompare.survival.solution import (
    CoxSolution, KMSolution, WeibullAFTSolution,
)


def kaplan_meier(
    time,
    event,
    *,
    conf_level: float = 0.95,
    conf_type: Literal["log", "plain", "log-log"] = "log",
) -> KMSolution:
    """Kaplan-Meier survival curve estimation.

    Matches R's survival::survfit(Surv(time, event) ~ 1).

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    conf_level : float
        Confidence level for CI (default 0.95).
    conf_type : str
        CI transformation: "log" (R default), "plain", "log-log".

    Returns
    -------
    KMSolution
    """
    design = SurvivalDesign.for_survival(time, event)

    if conf_level <= 0 or conf_level >= 1:
        raise ValueError(
            f"conf_level must be in (0, 1), got {conf_level}"
        )

    if conf_type not in ("log", "plain", "log-log"):
        raise ValueError(
            f"conf_type must be 'log', 'plain', or 'log-log', "
            f"got '{conf_type}'"
        )

    timer = Timer()
    timer.start()

    params = kaplan_meier_fit(
        design.time, design.event,
        conf_level=conf_level,
        conf_type=conf_type,
    )

    timer.stop()

    result = Result(
        params=params,
        info={"method": "Kaplan-Meier", "cumhaz": "Nelson-Aalen"},
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=(),
    )

    return KMSolution(_result=result)


def coxph(
    time,
    event,
    X=None,
    *,
    ties: Literal["efron", "breslow"] = "efron",
    tol: float = 1e-9,
    max_iter: int = 20,
) -> CoxSolution:
    """Cox proportional hazards model.

    Matches R's survival::coxph(). With ``X=None`` (or zero columns) this
    is the null model ``coxph(Surv(time, event) ~ 1)``: there is nothing
    to estimate by partial likelihood and the fit consists of the baseline
    cumulative hazard and survival curves.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    X : array-like or None
        Covariate matrix (n, p). No intercept; the Cox model has none.
    ties : str
        Method for handling tied event times: "efron" (default) or "breslow".
    tol : float
        Convergence tolerance for Newton-Raphson.
    max_iter : int
        Maximum Newton-Raphson iterations.

    Returns
    -------
    CoxSolution
    """
    design = SurvivalDesign.for_survival(time, event, X)

    if ties not in ("efron", "breslow"):
        raise ValueError(
            f"ties must be 'efron' or 'breslow', got '{ties}'"
        )

    timer = Timer()
    timer.start()

    with timer.section('fit'):
        params = cox_fit(
            design.time, design.event, design.covariates,
            ties=ties,
            tol=tol,
            max_iter=max_iter,
        )

    timer.stop()

    warnings_list = []
    if not params.converged:
        warnings_list.append(
            f"Newton-Raphson did not converge in {max_iter} iterations"
        )
    if params.n_events == 0:
        warnings_list.append("No events observed; baseline hazard is empty")

    result = Result(
        params=params,
        info={
            "method": "Cox PH",
            "ties": ties,
            "n_iter": params.n_iter,
            "null_model": design.p == 0,
        },
        timing=timer.result(),
        backend_name="cpu_cox",
        warnings=tuple(warnings_list),
    )

    return CoxSolution(_result=result)


def survreg(
    time,
    event,
    X=None,
    *,
    tol: float = 1e-9,
    max_iter: int = 30,
) -> WeibullAFTSolution:
    """Weibull accelerated failure time regression.

    Matches R's survival::survreg(Surv(time, event) ~ x, dist="weibull").
    An intercept is always included; ``X`` holds any further covariates.

    Parameters
    ----------
    time : array-like
        Time to event or censoring. Must be strictly positive.
    event : array-like
        Event indicator (1=event, 0=censored).
    X : array-like or None
        Covariate matrix (n, p) without intercept column.
    tol : float
        Convergence tolerance on the relative log-likelihood change.
    max_iter : int
        Maximum Newton-Raphson iterations (R default 30).

    Returns
    -------
    WeibullAFTSolution

    Raises
    ------
    ValueError
        If any time is <= 0 or no event is observed.
    SingularMatrixError
        If the covariates are constant or collinear with the intercept.
    ConvergenceError
        If Newton-Raphson diverges to non-finite parameters.
    """
    design = SurvivalDesign.for_survival(time, event, X)

    if np.any(design.time <= 0):
        raise ValueError(
            "time must be strictly positive for a Weibull AFT fit "
            f"(got {int(np.sum(design.time <= 0))} value(s) <= 0)"
        )

    if design.n_events == 0:
        raise ValueError(
            "survreg() requires at least one observed event; "
            "the Weibull likelihood has no maximum when all are censored"
        )

    Z = np.column_stack([np.ones(design.n), design.covariates])

    rank = np.linalg.matrix_rank(Z)
    if rank < Z.shape[1]:
        raise SingularMatrixError(
            f"design matrix [1, X] has rank {rank}, expected {Z.shape[1]}; "
            f"remove constant or collinear covariates",
            matrix_name="[1, X]",
            condition_number=float(np.linalg.cond(Z)),
        )

    timer = Timer()
    timer.start()

    with timer.section('fit'):
        params = weibull_aft_fit(
            design.time, design.event, Z,
            tol=tol,
            max_iter=max_iter,
        )

    timer.stop()

    warnings_list = []
    if not params.converged:
        msg = (
            f"Weibull AFT Newton-Raphson did not converge after "
            f"{params.n_iter} iterations"
        )
        warnings_list.append(msg)
        warnings.warn(msg, RuntimeWarning, stacklevel=2)

    result = Result(
        params=params,
        info={
            "method": "Weibull AFT",
            "dist": "weibull",
            "n_iter": params.n_iter,
        },
        timing=timer.result(),
        backend_name="cpu_survreg",
        warnings=tuple(warnings_list),
    )

    return WeibullAFTSolution(_result=result)
