"""
Parameter payloads for survival analysis results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class KMParams:
    """Kaplan-Meier survival curve parameters.

    Matches the output of R's survival::survfit().
    """

    time: NDArray                # (m,): unique event times
    survival: NDArray            # (m,): S(t) at each event time
    cumhaz: NDArray              # (m,): Nelson-Aalen H(t) at each event time
    n_risk: NDArray              # (m,): number at risk just before each time
    n_events: NDArray            # (m,): events at each time
    n_censored: NDArray          # (m,): censored in [t_j, t_{j+1})
    n_censored_initial: int      # censored before the first event time
    se: NDArray                  # (m,): Greenwood standard error
    ci_lower: NDArray            # (m,): lower CI for S(t)
    ci_upper: NDArray            # (m,): upper CI for S(t)
    conf_level: float            # confidence level (e.g. 0.95)
    conf_type: str               # CI type: "log" (default), "plain", "log-log"
    n_observations: int          # total n
    n_events_total: int          # total events


@dataclass(frozen=True)
class CoxParams:
    """Cox proportional hazards model parameters.

    Matches the output of R's survival::coxph() and, for the baseline
    curves, survfit() on the fitted model at the covariate means.
    """

    coefficients: NDArray        # (p,): log hazard ratios
    hazard_ratios: NDArray       # (p,): exp(coef)
    standard_errors: NDArray     # (p,): from observed information matrix
    z_statistics: NDArray        # (p,): coef / se
    p_values: NDArray            # (p,): two-sided Wald test
    loglik: tuple[float, float]  # (null log-lik, model log-lik)
    concordance: float           # Harrell's C-statistic
    n_events: int
    n_observations: int
    n_iter: int                  # Newton-Raphson iterations
    converged: bool
    ties: str                    # "efron" or "breslow"
    covariate_means: NDArray     # (p,): centring point of the baseline
    baseline_time: NDArray       # (m,): unique event times
    baseline_cumhaz: NDArray     # (m,): H0(t), increments per `ties`
    baseline_survival: NDArray   # (m,): product-limit S0(t)


@dataclass(frozen=True)
class WeibullAFTParams:
    """Weibull accelerated failure time model parameters.

    Matches the output of R's survival::survreg(dist="weibull").
    Coefficients are on the log-time scale; the first is the intercept.
    """

    coefficients: NDArray        # (k,): intercept first
    scale: float                 # τ, extreme-value scale of log T
    standard_errors: NDArray     # (k + 1,): coefficients, then log(scale)
    z_statistics: NDArray        # (k + 1,)
    p_values: NDArray            # (k + 1,)
    vcov: NDArray                # (k + 1, k + 1): on (β, log τ)
    loglik: tuple[float, float]  # (intercept-only log-lik, model log-lik)
    n_events: int
    n_observations: int
    n_iter: int
    converged: bool
