"""
Cox Proportional Hazards model via Newton-Raphson, with baseline curves.

Implements Efron's and Breslow's methods for tied event times,
matching R's survival::coxph().

Algorithm:
    Initialize β = 0
    For iteration 1..max_iter:
        Compute: partial log-likelihood L(β), score U(β), information I(β)
        β_new = β + I(β)^{-1} @ U(β)
        Check convergence: max|β_new - β| < tol

Efron's partial likelihood (R default):
    L(β) = Σ_{j: event times} [ Σ_{i ∈ D_j} x_i @ β
            - Σ_{s=0}^{d_j-1} log(Σ_{l ∈ R_j} exp(x_l @ β)
                - (s/d_j) * Σ_{i ∈ D_j} exp(x_i @ β)) ]

    where D_j = set of events at time t_j, d_j = |D_j|,
          R_j = risk set at time t_j (alive just before t_j).

With no covariates the partial likelihood has no parameters: the fit is
the null model and only the baseline curves carry information.

Baseline curves are evaluated at the covariate means:
    H0(t) = Σ_{t_j <= t} dH_j,   dH_j = d_j / S0_j              (Breslow)
                                 dH_j = Σ_s 1 / (S0_j - s/d_j D_j)  (Efron)
    S0(t) = ∏_{t_j <= t} (1 - d_j / S0_j)
where S0_j = Σ_{l ∈ R_j} exp(η_l) and D_j = Σ_{i ∈ D_j} exp(η_i). With
β = 0, S0_j is the number at risk, so S0(t) is the Kaplan-Meier curve and
the Breslow H0(t) is the Nelson-Aalen estimate.

References:
    Cox, D. R. (1972). Regression models and life-tables. JRSS-B, 34(2), 187-220.
    Efron, B. (1977). The efficiency of Cox's likelihood function for
        censored data. JASA, 72(359), 557-565.
    Breslow, N. E. (1972). Discussion of Professor Cox's paper.
        JRSS-B, 34(2), 216-217.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from survcompare.survival._common import CoxParams


@dataclass(frozen=True)
class _RiskSets:
    """Index layout of risk and death sets on time-sorted data.

    Data are sorted by ascending time with censored rows before events at
    tied times, so the risk set at t_j is the suffix starting at
    ``risk_start[j]`` and the deaths are the contiguous slice
    ``[death_start[j], death_end[j])``.
    """

    event_times: NDArray
    risk_start: NDArray
    death_start: NDArray
    death_end: NDArray
    n_deaths: NDArray

    @classmethod
    def build(cls, t_sorted: NDArray, e_sorted: NDArray) -> _RiskSets:
        event_times = np.unique(t_sorted[e_sorted == 1])
        risk_start = np.searchsorted(t_sorted, event_times, side="left")
        death_end = np.searchsorted(t_sorted, event_times, side="right")
        cum_events = np.concatenate(([0.0], np.cumsum(e_sorted)))
        n_deaths = (cum_events[death_end] - cum_events[risk_start]).astype(np.int64)
        return cls(
            event_times=event_times,
            risk_start=risk_start,
            death_start=death_end - n_deaths,
            death_end=death_end,
            n_deaths=n_deaths,
        )


def _suffix_sum(a: NDArray) -> NDArray:
    """Sums over a[i:] for every i, along axis 0."""
    return np.cumsum(a[::-1], axis=0)[::-1]


def cox_fit(
    time: NDArray,
    event: NDArray,
    X: NDArray,
    ties: str = "efron",
    tol: float = 1e-9,
    max_iter: int = 20,
) -> CoxParams:
    """Fit Cox proportional hazards model.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    X : NDArray
        (n, p) covariate matrix (NO intercept). p may be 0.
    ties : str
        Method for handling tied event times: "efron" (default) or "breslow".
    tol : float
        Convergence tolerance (max absolute change in β).
    max_iter : int
        Maximum Newton-Raphson iterations.

    Returns
    -------
    CoxParams
    """
    n, p = X.shape

    order = np.lexsort((event, time))  # ascending time, censored before events
    t_sorted = time[order]
    e_sorted = event[order]

    # Centring leaves β and the partial likelihood unchanged and puts the
    # baseline at the covariate means, as survfit() does.
    means = X.mean(axis=0) if p > 0 else np.zeros(0, dtype=np.float64)
    X_sorted = X[order] - means

    n_events_total = int(np.sum(event))

    if n_events_total == 0:
        empty = np.array([], dtype=np.float64)
        return CoxParams(
            coefficients=np.zeros(p, dtype=np.float64),
            hazard_ratios=np.ones(p, dtype=np.float64),
            standard_errors=np.full(p, np.inf),
            z_statistics=np.zeros(p, dtype=np.float64),
            p_values=np.ones(p, dtype=np.float64),
            loglik=(0.0, 0.0),
            concordance=0.5,
            n_events=0,
            n_observations=n,
            n_iter=0,
            converged=True,
            ties=ties,
            covariate_means=means,
            baseline_time=empty,
            baseline_cumhaz=empty,
            baseline_survival=empty,
        )

    risk = _RiskSets.build(t_sorted, e_sorted)
    beta = np.zeros(p, dtype=np.float64)

    null_loglik = _partial_loglik(beta, X_sorted, risk, ties)

    converged = False
    n_iter = 0

    if p == 0:
        converged = True
    else:
        loglik_old = null_loglik

        for iteration in range(1, max_iter + 1):
            loglik, score, info_matrix = _score_and_information(
                beta, X_sorted, risk, ties
            )

            # Newton step: β_new = β + I^{-1} @ U
            try:
                step = np.linalg.solve(info_matrix, score)
            except np.linalg.LinAlgError:
                break

            # Limit step size so exp(X @ beta) doesn't overflow
            max_step = np.max(np.abs(step))
            if max_step > 5.0:
                step = step * (5.0 / max_step)

            beta_new = beta + step
            loglik_new = _partial_loglik(beta_new, X_sorted, risk, ties)

            # R-style convergence: max|β_new - β| < tol
            if np.max(np.abs(beta_new - beta)) < tol:
                beta = beta_new
                converged = True
                n_iter = iteration
                break

            if iteration > 1 and abs(loglik_new - loglik_old) / (abs(loglik_old) + 0.1) < tol:
                beta = beta_new
                converged = True
                n_iter = iteration
                break

            beta = beta_new
            loglik_old = loglik_new
            n_iter = iteration

    model_loglik, _, info_final = _score_and_information(
        beta, X_sorted, risk, ties
    )

    if p > 0:
        try:
            var_matrix = np.linalg.inv(info_final)
            se = np.sqrt(np.maximum(np.diag(var_matrix), 0.0))
        except np.linalg.LinAlgError:
            se = np.full(p, np.inf)
    else:
        se = np.zeros(0, dtype=np.float64)

    # Wald z-statistics and p-values
    with np.errstate(divide='ignore', invalid='ignore'):
        z = np.where(se > 0, beta / se, 0.0)
    p_values = 2.0 * stats.norm.sf(np.abs(z))

    concordance = _concordance(beta, time, event, X) if p > 0 else 0.5

    base_cumhaz, base_surv = _baseline(X_sorted @ beta, risk, ties)

    return CoxParams(
        coefficients=beta,
        hazard_ratios=np.exp(beta),
        standard_errors=se,
        z_statistics=z,
        p_values=p_values,
        loglik=(float(null_loglik), float(model_loglik)),
        concordance=concordance,
        n_events=n_events_total,
        n_observations=n,
        n_iter=n_iter,
        converged=converged,
        ties=ties,
        covariate_means=means,
        baseline_time=risk.event_times,
        baseline_cumhaz=base_cumhaz,
        baseline_survival=base_surv,
    )


def _partial_loglik(
    beta: NDArray,
    X: NDArray,
    risk: _RiskSets,
    ties: str,
) -> float:
    """Partial log-likelihood at β."""
    loglik, _, _ = _score_and_information(beta, X, risk, ties)
    return loglik


def _score_and_information(
    beta: NDArray,
    X: NDArray,
    risk: _RiskSets,
    ties: str,
) -> tuple[float, NDArray, NDArray]:
    """Compute log-likelihood, score vector, and observed information matrix.

    Parameters
    ----------
    beta : (p,)
    X : (n, p) sorted ascending by time, centred
    risk : risk-set layout of the sorted data
    ties : "efron" or "breslow"

    Returns
    -------
    (loglik, score, info_matrix)
        loglik : float
        score : (p,): gradient of log-likelihood
        info_matrix : (p, p): negative Hessian (observed information)
    """
    n, p = X.shape
    eta = X @ beta

    # Center eta for numerical stability (cancels in partial likelihood)
    eta_c = eta - (np.max(eta) if n > 0 else 0.0)
    w = np.exp(eta_c)

    S0_all = _suffix_sum(w)
    S1_all = _suffix_sum(X * w[:, np.newaxis])
    S2_all = _suffix_sum(np.einsum('ni,nj,n->nij', X, X, w))

    loglik = 0.0
    score = np.zeros(p, dtype=np.float64)
    info_matrix = np.zeros((p, p), dtype=np.float64)

    for j in range(len(risk.event_times)):
        r = risk.risk_start[j]
        lo, hi = risk.death_start[j], risk.death_end[j]
        d_j = int(risk.n_deaths[j])

        S0 = S0_all[r]
        S1 = S1_all[r]
        S2 = S2_all[r]

        event_X_sum = np.sum(X[lo:hi], axis=0)
        event_eta_sum = np.sum(eta_c[lo:hi])

        if ties == "breslow" or d_j == 1:
            loglik += event_eta_sum - d_j * np.log(S0)
            score += event_X_sum - d_j * S1 / S0
            info_matrix += d_j * (S2 / S0 - np.outer(S1, S1) / S0**2)

        elif ties == "efron":
            death_w = w[lo:hi]
            death_X = X[lo:hi]
            death_S0 = np.sum(death_w)
            death_S1 = death_X.T @ death_w
            death_S2 = (death_X * death_w[:, np.newaxis]).T @ death_X

            loglik += event_eta_sum
            score += event_X_sum

            for s in range(d_j):
                frac = s / d_j
                denom = S0 - frac * death_S0
                if denom <= 0:
                    continue

                mean = (S1 - frac * death_S1) / denom

                loglik -= np.log(denom)
                score -= mean
                info_matrix += (S2 - frac * death_S2) / denom - np.outer(mean, mean)

    return loglik, score, info_matrix


def _baseline(
    eta: NDArray,
    risk: _RiskSets,
    ties: str,
) -> tuple[NDArray, NDArray]:
    """Baseline cumulative hazard and product-limit survival.

    Parameters
    ----------
    eta : (n,) linear predictor on centred, time-sorted data
    risk : risk-set layout
    ties : "efron" or "breslow"

    Returns
    -------
    (cumhaz, survival) at ``risk.event_times``
    """
    w = np.exp(eta)
    S0 = _suffix_sum(w)[risk.risk_start]
    d = risk.n_deaths.astype(np.float64)

    increments = d / S0

    if ties == "efron":
        for j in np.nonzero(risk.n_deaths > 1)[0]:
            d_j = int(risk.n_deaths[j])
            death_S0 = np.sum(w[risk.death_start[j]:risk.death_end[j]])
            fracs = np.arange(d_j) / d_j
            increments[j] = np.sum(1.0 / (S0[j] - fracs * death_S0))

    cumhaz = np.cumsum(increments)
    survival = np.cumprod(np.clip(1.0 - d / S0, 0.0, 1.0))

    return cumhaz, survival


def _concordance(
    beta: NDArray,
    time: NDArray,
    event: NDArray,
    X: NDArray,
) -> float:
    """Harrell's concordance statistic (C-statistic).

    C = P(risk_i > risk_j | T_i < T_j, event_i = 1)
    """
    eta = X @ beta

    concordant = 0
    discordant = 0
    tied_risk = 0

    for i in np.nonzero(event == 1)[0]:
        later = time > time[i]
        eta_later = eta[later]
        concordant += int(np.sum(eta[i] > eta_later))
        discordant += int(np.sum(eta[i] < eta_later))
        tied_risk += int(np.sum(eta[i] == eta_later))

    total = concordant + discordant + tied_risk
    if total == 0:
        return 0.5

    return (concordant + 0.5 * tied_risk) / total
