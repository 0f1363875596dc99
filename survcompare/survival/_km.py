"""
Kaplan-Meier product-limit estimator with Nelson-Aalen cumulative hazard.

Matches R's survival::survfit(Surv(time, event) ~ 1):
- Product-limit survival estimate: S(t) = ∏(1 - d_j / n_j)
- Nelson-Aalen cumulative hazard: H(t) = Σ d_j / n_j
- Greenwood variance: Var(S(t)) = S(t)^2 * Σ(d_j / (n_j * (n_j - d_j)))
- Confidence intervals via log, plain, or log-log transformation

References:
    Kaplan, E. L., & Meier, P. (1958). Nonparametric estimation from
        incomplete observations. JASA, 53(282), 457-481.
    Nelson, W. (1972). Theory and applications of hazard plotting for
        censored failure data. Technometrics, 14(4), 945-966.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from survcompare.survival._common import KMParams


def risk_table(
    time: NDArray,
    event: NDArray,
) -> tuple[NDArray, NDArray, NDArray, NDArray]:
    """Counts at each distinct event time.

    Events at a tied time are processed before censorings at that time,
    so a subject censored at t_j is still at risk at t_j.

    Returns
    -------
    (event_times, n_risk, n_events, n_censored)
        n_censored[j] counts censorings in [t_j, t_{j+1}).
        Censorings before the first event time are not in any bin.
    """
    n = len(time)
    order = np.argsort(time, kind="stable")
    t_sorted = time[order]
    e_sorted = event[order]

    uniq, first_idx, counts = np.unique(
        t_sorted, return_index=True, return_counts=True,
    )
    d_all = np.add.reduceat(e_sorted, first_idx)
    c_all = counts - d_all
    # Everyone whose time is >= u is at risk at u
    n_risk_all = (n - first_idx).astype(np.float64)

    ev_pos = np.nonzero(d_all > 0)[0]
    if len(ev_pos) == 0:
        empty = np.array([], dtype=np.float64)
        return empty, empty, empty, empty

    n_censored = np.add.reduceat(c_all, ev_pos).astype(np.float64)

    return (
        uniq[ev_pos],
        n_risk_all[ev_pos],
        d_all[ev_pos].astype(np.float64),
        n_censored,
    )


def kaplan_meier_fit(
    time: NDArray,
    event: NDArray,
    conf_level: float,
    conf_type: str,
) -> KMParams:
    """Compute the Kaplan-Meier survival curve.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    conf_level : float
        Confidence level for CI (e.g. 0.95).
    conf_type : str
        CI type: "log" (default, matches R), "plain", "log-log".

    Returns
    -------
    KMParams
    """
    n_total = len(time)
    n_events_total = int(np.sum(event))

    out_time, n_risk, n_events, n_censored = risk_table(time, event)
    if len(out_time) > 0:
        n_censored_initial = int(np.sum((time < out_time[0]) & (event == 0)))
    else:
        n_censored_initial = n_total

    if len(out_time) == 0:
        # No events: survival is 1 everywhere
        empty = np.array([], dtype=np.float64)
        return KMParams(
            time=empty,
            survival=empty,
            cumhaz=empty,
            n_risk=empty,
            n_events=empty,
            n_censored=empty,
            n_censored_initial=n_censored_initial,
            se=empty,
            ci_lower=empty,
            ci_upper=empty,
            conf_level=conf_level,
            conf_type=conf_type,
            n_observations=n_total,
            n_events_total=0,
        )

    hazard_component = n_events / n_risk
    survival = np.cumprod(1.0 - hazard_component)
    cumhaz = np.cumsum(hazard_component)

    # Avoid division by zero when n_j == d_j (all at risk die)
    denom = n_risk * (n_risk - n_events)
    denom = np.where(denom > 0, denom, np.inf)
    greenwood_sum = np.cumsum(n_events / denom)
    se = np.sqrt(survival ** 2 * greenwood_sum)

    z = stats.norm.ppf((1.0 + conf_level) / 2.0)
    ci_lower, ci_upper = _compute_ci(survival, se, z, conf_type)

    return KMParams(
        time=out_time,
        survival=survival,
        cumhaz=cumhaz,
        n_risk=n_risk,
        n_events=n_events,
        n_censored=n_censored,
        n_censored_initial=n_censored_initial,
        se=se,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        conf_level=conf_level,
        conf_type=conf_type,
        n_observations=n_total,
        n_events_total=n_events_total,
    )


def _compute_ci(
    survival: NDArray,
    se: NDArray,
    z: float,
    conf_type: str,
) -> tuple[NDArray, NDArray]:
    """Pointwise confidence band for S(t), clipped to [0, 1].

    Parameters
    ----------
    survival : S(t) values
    se : Greenwood standard errors
    z : normal quantile (e.g. 1.96 for 95%)
    conf_type : "log", "plain", or "log-log"
    """
    if conf_type == "plain":
        ci_lower = survival - z * se
        ci_upper = survival + z * se

    elif conf_type == "log":
        # R default: exp(log(S) ± z * se / S)
        with np.errstate(divide='ignore', invalid='ignore'):
            log_s = np.log(survival)
            se_log = se / survival
            ci_lower = np.exp(log_s - z * se_log)
            ci_upper = np.exp(log_s + z * se_log)

    elif conf_type == "log-log":
        with np.errstate(divide='ignore', invalid='ignore'):
            log_s = np.log(survival)
            log_neg_log_s = np.log(-log_s)
            se_loglog = se / (survival * np.abs(log_s))
            ci_lower = np.exp(-np.exp(log_neg_log_s + z * se_loglog))
            ci_upper = np.exp(-np.exp(log_neg_log_s - z * se_loglog))
    else:
        raise ValueError(
            f"Unknown conf_type '{conf_type}'. "
            f"Choose from 'log', 'plain', 'log-log'."
        )

    ci_lower = np.clip(ci_lower, 0.0, 1.0)
    ci_upper = np.clip(ci_upper, 0.0, 1.0)

    # S=0 or S=1 give NaN under the log transforms
    ci_lower = np.where(np.isnan(ci_lower), 0.0, ci_lower)
    ci_upper = np.where(np.isnan(ci_upper), 1.0, ci_upper)

    return ci_lower, ci_upper
