"""
SurvivalDesign: immutable container for right-censored time-to-event data.

Wraps time, event indicator and optional covariates. Validates inputs at
construction time: all downstream code trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from survcompare.core.exceptions import ValidationError
from survcompare.core.validation import check_array, check_finite


@dataclass(frozen=True, eq=False)
class SurvivalDesign:
    """Immutable survival data container.

    Parameters
    ----------
    time : NDArray
        Time to event or censoring. Must be non-negative and finite.
    event : NDArray
        Event indicator: 1 = event observed, 0 = censored.
    X : NDArray or None
        Covariate matrix (n, p). None for KM and intercept-only fits.
        A matrix with zero columns is normalised to None.
    """

    time: NDArray
    event: NDArray
    X: NDArray | None

    @classmethod
    def for_survival(
        cls,
        time,
        event,
        X=None,
    ) -> SurvivalDesign:
        """Create and validate survival data.

        Parameters
        ----------
        time : array-like
            Time to event or censoring.
        event : array-like
            Event indicator (0/1 or bool).
        X : array-like or None
            Optional covariate matrix.

        Returns
        -------
        SurvivalDesign

        Raises
        ------
        ValueError
            If inputs are invalid.
        """
        try:
            time = check_array(time, "time").astype(np.float64).ravel()
            event = check_array(event, "event").astype(np.float64).ravel()
        except ValidationError as e:
            raise ValueError(str(e)) from e

        n = len(time)

        if n == 0:
            raise ValueError("time must have at least one observation")

        if len(event) != n:
            raise ValueError(
                f"time and event must have the same length: "
                f"got {n} and {len(event)}"
            )

        try:
            check_finite(time, "time")
        except ValidationError as e:
            raise ValueError(str(e)) from e

        if np.any(time < 0):
            raise ValueError("time must be non-negative")

        unique_events = np.unique(event[~np.isnan(event)])
        if np.any(np.isnan(event)) or not np.all(np.isin(unique_events, [0.0, 1.0])):
            raise ValueError(
                f"event must contain only 0 and 1, "
                f"got unique values: {np.unique(event)}"
            )

        X_arr = None
        if X is not None:
            X_arr = np.asarray(X, dtype=np.float64)
            if X_arr.ndim == 1:
                X_arr = X_arr.reshape(-1, 1)
            if X_arr.ndim != 2:
                raise ValueError(
                    f"X must be 1D or 2D, got {X_arr.ndim}D"
                )
            if X_arr.shape[0] != n:
                raise ValueError(
                    f"X must have {n} rows to match time, "
                    f"got {X_arr.shape[0]}"
                )
            if not np.all(np.isfinite(X_arr)):
                raise ValueError("X contains non-finite values")
            if X_arr.shape[1] == 0:
                X_arr = None

        return cls(
            time=time,
            event=event,
            X=X_arr,
        )

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def p(self) -> int:
        """Number of covariates (0 if no covariates)."""
        return self.X.shape[1] if self.X is not None else 0

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(np.sum(self.event))

    @property
    def n_censored(self) -> int:
        return self.n - self.n_events

    @property
    def covariates(self) -> NDArray:
        """Covariate matrix, (n, 0) when there are none."""
        if self.X is None:
            return np.zeros((self.n, 0), dtype=np.float64)
        return self.X
