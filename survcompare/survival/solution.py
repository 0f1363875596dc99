"""
Solution wrappers for survival analysis results.

Each Solution wraps a Result[Params] and exposes user-friendly properties,
curve evaluation, quantiles, and R-style summary() methods.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from survcompare.core.result import Result
from survcompare.core.validation import (
    check_array, check_positive, check_probabilities,
)
from survcompare.survival._common import CoxParams, KMParams, WeibullAFTParams
from survcompare.survival._curves import step_evaluate, step_quantile
from survcompare.survival._weibull import aft_cumhaz, aft_quantile, aft_survival


def _as_probs(p) -> NDArray:
    probs = check_array(p, "p")
    check_probabilities(probs, "p")
    return probs


def _as_times(t) -> NDArray:
    times = check_array(t, "t")
    check_positive(times, "t")
    return times


def _scalar_or_array(values: NDArray, like):
    """Return a float for scalar input, an array otherwise."""
    if np.ndim(like) == 0:
        return float(np.reshape(values, -1)[0])
    return values


class KMSolution:
    """Kaplan-Meier survival curve solution.

    Properties mirror R's survfit() output.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[KMParams]) -> None:
        self._result = _result

    # -- Properties delegating to KMParams --

    @property
    def time(self):
        """Unique event times."""
        return self._result.params.time

    @property
    def survival(self):
        """S(t) at each event time."""
        return self._result.params.survival

    @property
    def cumhaz(self):
        """Nelson-Aalen H(t) at each event time."""
        return self._result.params.cumhaz

    @property
    def n_risk(self):
        """Number at risk just before each event time."""
        return self._result.params.n_risk

    @property
    def n_events(self):
        """Number of events at each event time."""
        return self._result.params.n_events

    @property
    def n_censored(self):
        """Number censored from each event time up to the next.

        Entry j counts censorings in [t_j, t_{j+1}). Censorings before the
        first event time are reported by ``n_censored_initial``.
        """
        return self._result.params.n_censored

    @property
    def n_censored_initial(self) -> int:
        """Number censored before the first event time."""
        return self._result.params.n_censored_initial

    @property
    def se(self):
        """Greenwood standard error of S(t)."""
        return self._result.params.se

    @property
    def ci_lower(self):
        """Lower confidence bound for S(t)."""
        return self._result.params.ci_lower

    @property
    def ci_upper(self):
        """Upper confidence bound for S(t)."""
        return self._result.params.ci_upper

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def conf_type(self) -> str:
        return self._result.params.conf_type

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    # -- Curve evaluation --

    def survival_function(self, t):
        """Right-continuous S(t); 1 before the first event time."""
        values = step_evaluate(self.time, self.survival, t, initial=1.0)
        return _scalar_or_array(values, t)

    def cumulative_hazard(self, t):
        """Right-continuous Nelson-Aalen H(t); 0 before the first event time."""
        values = step_evaluate(self.time, self.cumhaz, t, initial=0.0)
        return _scalar_or_array(values, t)

    def quantile(self, p):
        """Time at which S(t) first drops to 1 - p (NaN if it never does)."""
        values = step_quantile(self.time, self.survival, _as_probs(p))
        return _scalar_or_array(values, p)

    @property
    def median_survival(self) -> float | None:
        """Median survival time, or None if S(t) never reaches 0.5."""
        median = self.quantile(0.5)
        return None if np.isnan(median) else median

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of Kaplan-Meier fit."""
        lines = []
        lines.append("Call: kaplan_meier()")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"events={self.n_events_total}"
        )
        lines.append("")

        median = self.median_survival
        median_str = f"{median:.4g}" if median is not None else "NA"
        lines.append(f"  median survival = {median_str}")
        lines.append("")

        ci_pct = int(round(self.conf_level * 100))
        lines.append(
            f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
            f"{'survival':>10s}  {'cumhaz':>10s}  {'se':>10s}  "
            f"{f'lower {ci_pct}%':>10s}  {f'upper {ci_pct}%':>10s}"
        )

        # Show up to 20 rows
        m = len(self.time)
        show = min(m, 20)
        for i in range(show):
            lines.append(
                f"  {self.time[i]:8.4g}  {self.n_risk[i]:8.0f}  "
                f"{self.n_events[i]:8.0f}  "
                f"{self.survival[i]:10.6f}  {self.cumhaz[i]:10.6f}  "
                f"{self.se[i]:10.6f}  "
                f"{self.ci_lower[i]:10.6f}  {self.ci_upper[i]:10.6f}"
            )
        if m > 20:
            lines.append(f"  ... ({m - 20} more rows)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"KMSolution(n={self.n_observations}, "
            f"events={self.n_events_total}, "
            f"median={self.median_survival})"
        )


class CoxSolution:
    """Cox proportional hazards solution.

    Properties mirror R's coxph() output; curve methods mirror survfit()
    on the fitted model at the covariate means.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[CoxParams]) -> None:
        self._result = _result

    @property
    def coefficients(self):
        return self._result.params.coefficients

    @property
    def hazard_ratios(self):
        return self._result.params.hazard_ratios

    @property
    def standard_errors(self):
        return self._result.params.standard_errors

    @property
    def z_statistics(self):
        return self._result.params.z_statistics

    @property
    def p_values(self):
        return self._result.params.p_values

    @property
    def loglik(self):
        return self._result.params.loglik

    @property
    def concordance(self) -> float:
        return self._result.params.concordance

    @property
    def n_events(self) -> int:
        return self._result.params.n_events

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_iter(self) -> int:
        return self._result.params.n_iter

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def ties(self) -> str:
        return self._result.params.ties

    @property
    def is_null_model(self) -> bool:
        """True when fitted without covariates."""
        return len(self.coefficients) == 0

    # -- Baseline --

    @property
    def covariate_means(self):
        return self._result.params.covariate_means

    @property
    def baseline_time(self):
        """Distinct event times of the baseline curves."""
        return self._result.params.baseline_time

    @property
    def baseline_cumhaz(self):
        return self._result.params.baseline_cumhaz

    @property
    def baseline_survival(self):
        return self._result.params.baseline_survival

    def survival_function(self, t):
        """Baseline S0(t) at the covariate means (step function)."""
        values = step_evaluate(
            self.baseline_time, self.baseline_survival, t, initial=1.0,
        )
        return _scalar_or_array(values, t)

    def cumulative_hazard(self, t):
        """Baseline H0(t) at the covariate means (step function)."""
        values = step_evaluate(
            self.baseline_time, self.baseline_cumhaz, t, initial=0.0,
        )
        return _scalar_or_array(values, t)

    def quantile(self, p):
        """Quantile of the baseline survival curve (NaN if not reached)."""
        values = step_quantile(
            self.baseline_time, self.baseline_survival, _as_probs(p),
        )
        return _scalar_or_array(values, p)

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of Cox PH fit."""
        lines = []
        lines.append("Call: coxph()")
        lines.append("")

        if self.is_null_model:
            lines.append("  Null model")
            lines.append(f"    log likelihood= {self.loglik[1]:.4f}")
            lines.append(
                f"    n= {self.n_observations}, "
                f"number of events= {self.n_events}"
            )
            return "\n".join(lines)

        lines.append(
            f"  n= {self.n_observations}, "
            f"number of events= {self.n_events}"
        )
        lines.append("")

        lines.append(
            f"  {'':>10s}  {'coef':>10s}  {'exp(coef)':>10s}  "
            f"{'se(coef)':>10s}  {'z':>10s}  {'Pr(>|z|)':>12s}"
        )
        p = len(self.coefficients)
        for i in range(p):
            name = f"x{i}"
            lines.append(
                f"  {name:>10s}  {self.coefficients[i]:10.6f}  "
                f"{self.hazard_ratios[i]:10.6f}  "
                f"{self.standard_errors[i]:10.6f}  "
                f"{self.z_statistics[i]:10.4f}  "
                f"{self.p_values[i]:12.4g}"
            )

        lines.append("")
        lines.append(
            f"  Concordance= {self.concordance:.4f}"
        )
        lr_stat = 2 * (self.loglik[1] - self.loglik[0])
        lines.append(
            f"  Likelihood ratio test= {lr_stat:.4f} on {p} df"
        )

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CoxSolution(n={self.n_observations}, "
            f"events={self.n_events}, "
            f"concordance={self.concordance:.4f})"
        )


class WeibullAFTSolution:
    """Weibull accelerated failure time solution.

    Properties mirror R's survreg(dist="weibull") output. Coefficients are
    on the log-time scale; ``scale`` is τ, so the Weibull shape is 1/τ.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[WeibullAFTParams]) -> None:
        self._result = _result

    @property
    def coefficients(self):
        """(k,) log-time coefficients, intercept first."""
        return self._result.params.coefficients

    @property
    def intercept(self) -> float:
        return float(self.coefficients[0])

    @property
    def scale(self) -> float:
        """Extreme-value scale τ of log T."""
        return self._result.params.scale

    @property
    def weibull_shape(self) -> float:
        """Weibull shape 1/τ."""
        return 1.0 / self.scale

    @property
    def weibull_scale(self) -> float:
        """Weibull scale exp(β0) at zero covariates."""
        return float(np.exp(self.intercept))

    @property
    def standard_errors(self):
        """(k + 1,): coefficients, then log(scale)."""
        return self._result.params.standard_errors

    @property
    def z_statistics(self):
        return self._result.params.z_statistics

    @property
    def p_values(self):
        return self._result.params.p_values

    @property
    def vcov(self):
        return self._result.params.vcov

    @property
    def loglik(self):
        """(intercept-only, model) log-likelihood."""
        return self._result.params.loglik

    @property
    def n_events(self) -> int:
        return self._result.params.n_events

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_iter(self) -> int:
        return self._result.params.n_iter

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    def linear_predictor(self, x=None) -> float:
        """μ = β0 + x @ β for one covariate vector (None at zero)."""
        beta = self.coefficients
        if x is None:
            return float(beta[0])
        x = np.ravel(np.asarray(x, dtype=np.float64))
        if len(x) != len(beta) - 1:
            raise ValueError(
                f"x must have {len(beta) - 1} elements, got {len(x)}"
            )
        return float(beta[0] + x @ beta[1:])

    def survival_function(self, t, x=None):
        """S(t) = exp(-exp((log t - μ) / τ)). Requires t > 0."""
        times = _as_times(t)
        values = aft_survival(times, self.linear_predictor(x), self.scale)
        return _scalar_or_array(values, t)

    def cumulative_hazard(self, t, x=None):
        """H(t) = exp((log t - μ) / τ). Requires t > 0."""
        times = _as_times(t)
        values = aft_cumhaz(times, self.linear_predictor(x), self.scale)
        return _scalar_or_array(values, t)

    def quantile(self, p, x=None):
        """t_p = exp(μ + τ log(-log(1 - p)))."""
        values = aft_quantile(_as_probs(p), self.linear_predictor(x), self.scale)
        return _scalar_or_array(values, p)

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of the survreg fit."""
        lines = []
        lines.append("Call: survreg(dist='weibull')")
        lines.append("")
        lines.append(
            f"  {'':>12s}  {'Value':>10s}  {'Std. Error':>10s}  "
            f"{'z':>10s}  {'p':>12s}"
        )
        k = len(self.coefficients)
        names = ["(Intercept)"] + [f"x{i}" for i in range(k - 1)] + ["Log(scale)"]
        values = list(self.coefficients) + [np.log(self.scale)]
        for i, name in enumerate(names):
            lines.append(
                f"  {name:>12s}  {values[i]:10.6f}  "
                f"{self.standard_errors[i]:10.6f}  "
                f"{self.z_statistics[i]:10.4f}  "
                f"{self.p_values[i]:12.4g}"
            )
        lines.append("")
        lines.append(f"  Scale= {self.scale:.4g}")
        lines.append(
            f"  Weibull shape= {self.weibull_shape:.4g}, "
            f"scale= {self.weibull_scale:.4g}"
        )
        lines.append("")
        lines.append(
            f"  Loglik(model)= {self.loglik[1]:.2f}   "
            f"Loglik(intercept only)= {self.loglik[0]:.2f}"
        )
        lines.append(
            f"  Number of Newton-Raphson Iterations: {self.n_iter}"
        )
        lines.append(
            f"  n= {self.n_observations}, "
            f"number of events= {self.n_events}"
        )

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"WeibullAFTSolution(n={self.n_observations}, "
            f"intercept={self.intercept:.4f}, scale={self.scale:.4f})"
        )
