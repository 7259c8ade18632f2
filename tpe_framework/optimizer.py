"""
TPE Framework - Optimizer Module

This module implements ``TpeOptimizer``, a one-dimensional Tree-structured
Parzen Estimator driven through an ask/tell protocol:

- ``ask(rng)`` splits the history into good/bad groups by the gamma quantile,
  fits one density per group, samples candidates from the good density and
  returns the candidate with the highest ``log l(x) - log g(x)``
- ``tell(value, objective)`` validates and records an evaluated trial

Densities are refitted lazily on every ``ask``; ``tell`` only appends to the
history. The random source is always passed in explicitly, so a fixed
generator seed and call sequence reproduce the same suggestions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .config import TpeConfig
from .errors import InvalidObservation
from .estimators import Estimator, FittedDensity, check_compatible
from .gamma import split_good_bad
from .search_space import CategoricalRange, SearchSpace


@dataclass(frozen=True)
class Trial:
    """One evaluated point: parameter value and its objective."""

    value: float
    objective: float


class TpeOptimizer:
    """
    Single-dimension TPE optimizer (minimization).

    Parameters
    ----------
    estimator : Estimator
        ``ParzenEstimator`` for a ``Range`` or ``HistogramEstimator`` for a
        ``CategoricalRange``.
    space : SearchSpace
        The dimension to optimize.
    config : Optional[TpeConfig]
        Gamma and candidate count. Defaults to ``TpeConfig()``.

    Raises
    ------
    InvalidConfig
        If the estimator cannot model ``space``.

    Examples
    --------
    >>> rng = np.random.default_rng(42)
    >>> opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
    >>> for _ in range(100):
    ...     x = opt.ask(rng)
    ...     opt.tell(x, x ** 2)
    >>> idx, best = opt.best_trial
    """

    def __init__(
        self,
        estimator: Estimator,
        space: SearchSpace,
        config: Optional[TpeConfig] = None,
    ) -> None:
        check_compatible(estimator, space)
        if config is None:
            config = TpeConfig()
        elif not isinstance(config, TpeConfig):
            raise TypeError(f"config must be TpeConfig, got {type(config).__name__}")

        self.estimator = estimator
        self.space = space
        self.config = config

        self._history: List[Trial] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def history(self) -> Tuple[Trial, ...]:
        """All trials told so far, in trial order."""
        return tuple(self._history)

    @property
    def n_observations(self) -> int:
        """Number of observations so far."""
        return len(self._history)

    @property
    def best_trial(self) -> Optional[Tuple[int, Trial]]:
        """``(index, trial)`` with the lowest objective; earliest wins ties."""
        if not self._history:
            return None
        idx = min(range(len(self._history)), key=lambda i: self._history[i].objective)
        return idx, self._history[idx]

    @property
    def is_categorical(self) -> bool:
        return isinstance(self.space, CategoricalRange)

    # -------------------------------------------------------------------------
    # Ask interface
    # -------------------------------------------------------------------------

    def fit_densities(self) -> Tuple[FittedDensity, FittedDensity]:
        """
        Fit the good (``l``) and bad (``g``) densities on the current history.

        Empty groups fall back to the uniform prior of the space.
        """
        values = [t.value for t in self._history]
        objectives = [t.objective for t in self._history]
        good, bad = split_good_bad(values, objectives, self.config.gamma)
        return self.estimator.fit_pair(good, bad, self.space)

    def ask(self, rng: np.random.Generator) -> float:
        """
        Suggest the next value to evaluate.

        Parameters
        ----------
        rng : np.random.Generator
            Random source used for candidate sampling.

        Returns
        -------
        float
            A value inside the space. For categorical spaces this is an
            integral index in ``[0, n)``.
        """
        if not isinstance(rng, np.random.Generator):
            raise TypeError(f"rng must be a numpy Generator, got {type(rng).__name__}")

        l_density, g_density = self.fit_densities()

        candidates = np.atleast_1d(l_density.sample(rng, self.config.candidates))
        scores = l_density.log_density(candidates) - g_density.log_density(candidates)

        # argmax keeps the first sampled candidate among equal scores
        best = candidates[int(np.argmax(scores))]
        return self.space.clamp(best)

    # -------------------------------------------------------------------------
    # Tell interface
    # -------------------------------------------------------------------------

    def tell(self, value: float, objective: float) -> None:
        """
        Record the objective value for an evaluated parameter.

        Parameters
        ----------
        value : float
            The evaluated parameter (category index for categorical spaces).
        objective : float
            The objective value, lower is better.

        Raises
        ------
        InvalidObservation
            If ``objective`` is not a finite number or ``value`` is outside
            the space. The history is left unchanged.
        """
        try:
            objective = float(objective)
            value = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidObservation(
                f"value and objective must be numbers, got ({value!r}, {objective!r})"
            ) from e

        if not math.isfinite(objective):
            raise InvalidObservation(f"objective must be finite, got {objective}")
        if not self.space.contains(value):
            raise InvalidObservation(f"value {value} lies outside {self.space!r}")

        self._history.append(Trial(value=value, objective=objective))

    # -------------------------------------------------------------------------
    # History views
    # -------------------------------------------------------------------------

    def value_history(self) -> List[float]:
        """Objective of every trial, in trial order."""
        return [t.objective for t in self._history]

    def best_value_history(self) -> List[Tuple[int, float]]:
        """Running best as ``(trial_index, objective)``, one entry per improvement."""
        out: List[Tuple[int, float]] = []
        best = math.inf
        for i, t in enumerate(self._history):
            if t.objective < best:
                best = t.objective
                out.append((i, best))
        return out

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get current optimization statistics.

        Returns
        -------
        Dict[str, Any]
            Dictionary with optimization statistics.
        """
        best = self.best_trial
        return {
            "n_observations": self.n_observations,
            "space": repr(self.space),
            "categorical": self.is_categorical,
            "estimator": type(self.estimator).__name__,
            "gamma": self.config.gamma,
            "candidates": self.config.candidates,
            "best_trial": None if best is None else best[0],
            "best_value": None if best is None else best[1].value,
            "best_objective": None if best is None else best[1].objective,
        }

    def __repr__(self) -> str:
        best = self.best_trial
        best_y = "n/a" if best is None else f"{best[1].objective:.4f}"
        kind = "categorical" if self.is_categorical else "continuous"
        return (
            f"TpeOptimizer({kind}, space={self.space!r}, estimator={type(self.estimator).__name__}, "
            f"n_obs={self.n_observations}, best_y={best_y})"
        )
