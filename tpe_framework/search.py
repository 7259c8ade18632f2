"""
TPE Framework - Multi-dimension search

``TpeSearch`` optimizes a typed parameter dictionary with one scalar
objective by holding one independent ``TpeOptimizer`` per dimension. Each
trial asks every dimension, evaluates the objective once, and tells the same
objective back to every dimension. Dimensions are modelled independently, not
jointly.

Supported parameter specifications:

- Continuous: ``(low, high)`` tuple -> ``Range`` + Parzen estimator
- Categorical: list of choices -> ``CategoricalRange`` + histogram estimator
- Fixed: one-choice list or scalar -> passed through, not optimized
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .config import TpeOptimizerBuilder
from .errors import InvalidObservation, InvalidRange
from .estimators import histogram_estimator, parzen_estimator
from .optimizer import TpeOptimizer
from .search_space import CategoricalRange, Range


@dataclass
class SearchResult:
    """Outcome of ``TpeSearch.optimize``."""

    best_params: Dict[str, Any]
    best_trial: int
    best_value: float
    value_history: List[float] = field(default_factory=list)
    param_history: List[Dict[str, Any]] = field(default_factory=list)
    best_value_history: List[Tuple[int, float]] = field(default_factory=list)

    @property
    def n_trials(self) -> int:
        return len(self.value_history)

    def __repr__(self) -> str:
        return (
            f"SearchResult(\n"
            f"  best_value={self.best_value:.6g},\n"
            f"  best_params={self.best_params},\n"
            f"  best_trial={self.best_trial},\n"
            f"  n_trials={self.n_trials}\n"
            f")"
        )


class TpeSearch:
    """
    Coordinate one ``TpeOptimizer`` per parameter.

    Parameters
    ----------
    param_space : Dict[str, Any]
        Dictionary mapping parameter names to their specifications.
    builder : Optional[TpeOptimizerBuilder]
        Shared gamma/candidate settings for every dimension.

    Raises
    ------
    TypeError
        If ``param_space`` is not a non-empty dict.
    InvalidRange
        If a range or choices list is malformed.
    InvalidConfig
        If the builder settings are invalid.

    Examples
    --------
    >>> search = TpeSearch({'x': (-5.0, 5.0), 'y': [1, 2, 3]})
    >>> result = search.optimize(lambda c: c['x'] ** 2 + c['y'], n_trials=200, seed=42)
    >>> result.best_params
    """

    def __init__(
        self,
        param_space: Dict[str, Any],
        builder: Optional[TpeOptimizerBuilder] = None,
    ) -> None:
        if not isinstance(param_space, dict) or not param_space:
            raise TypeError("param_space must be a non-empty dict")

        if builder is None:
            builder = TpeOptimizerBuilder()

        self.optimizers: Dict[str, TpeOptimizer] = {}
        self.choices: Dict[str, List[Any]] = {}
        self.fixed: Dict[str, Any] = {}
        self._parse_param_space(param_space, builder)

        self.param_order = list(param_space.keys())

    def _parse_param_space(
        self,
        param_space: Dict[str, Any],
        builder: TpeOptimizerBuilder,
    ) -> None:
        """Build one optimizer per optimizable parameter."""
        for name, spec in param_space.items():
            if isinstance(spec, list):
                if len(spec) == 1:
                    self.fixed[name] = spec[0]
                    continue
                # encode() looks choices up by equality, so they must be distinct
                for i, choice in enumerate(spec):
                    if any(choice == other for other in spec[:i]):
                        raise InvalidRange(
                            f"Duplicate choice {choice!r} for '{name}': choices must compare unequal"
                        )
                # CategoricalRange rejects an empty list
                self.optimizers[name] = builder.build(histogram_estimator(), CategoricalRange(len(spec)))
                self.choices[name] = list(spec)
                continue

            if isinstance(spec, tuple):
                if len(spec) != 2:
                    raise InvalidRange(f"Invalid range for '{name}': {spec} (expected (low, high))")
                self.optimizers[name] = builder.build(parzen_estimator(), Range(spec[0], spec[1]))
                continue

            self.fixed[name] = spec

    @property
    def dim(self) -> int:
        """Number of optimized dimensions."""
        return len(self.optimizers)

    @property
    def n_observations(self) -> int:
        if not self.optimizers:
            return 0
        return next(iter(self.optimizers.values())).n_observations

    # -------------------------------------------------------------------------
    # Ask / tell
    # -------------------------------------------------------------------------

    def ask(self, rng: np.random.Generator) -> Dict[str, Any]:
        """Assemble one configuration by asking every dimension in order."""
        config: Dict[str, Any] = {}
        for name in self.param_order:
            if name in self.fixed:
                config[name] = self.fixed[name]
                continue
            x = self.optimizers[name].ask(rng)
            if name in self.choices:
                config[name] = self.choices[name][int(x)]
            else:
                config[name] = x
        return config

    def encode(self, config: Dict[str, Any]) -> Dict[str, float]:
        """
        Convert a configuration to per-dimension optimizer values.

        Categorical values are matched to their choice by equality.

        Raises
        ------
        KeyError
            If an optimized parameter is missing.
        InvalidObservation
            If a categorical value is not one of its choices.
        """
        values: Dict[str, float] = {}
        for name in self.optimizers:
            if name not in config:
                raise KeyError(f"Missing '{name}' in config")
            val = config[name]
            if name in self.choices:
                try:
                    values[name] = float(self.choices[name].index(val))
                except ValueError as e:
                    raise InvalidObservation(
                        f"Invalid value for '{name}': {val!r} (choices={self.choices[name]})"
                    ) from e
            else:
                values[name] = val
        return values

    def tell(self, config: Dict[str, Any], objective: float) -> None:
        """
        Tell the same objective to every dimension.

        The configuration is validated against every dimension before any
        optimizer records it, so a rejected trial leaves all histories
        unchanged.
        """
        values = self.encode(config)

        try:
            objective = float(objective)
        except (TypeError, ValueError) as e:
            raise InvalidObservation(f"objective must be a number, got {objective!r}") from e
        if not math.isfinite(objective):
            raise InvalidObservation(f"objective must be finite, got {objective}")
        for name, x in values.items():
            if not isinstance(x, numbers.Real) or not self.optimizers[name].space.contains(x):
                raise InvalidObservation(f"value {x!r} for '{name}' lies outside its space")

        for name, x in values.items():
            self.optimizers[name].tell(x, objective)

    # -------------------------------------------------------------------------
    # High-level optimization interface
    # -------------------------------------------------------------------------

    def optimize(
        self,
        objective: Callable[[Dict[str, Any]], float],
        n_trials: int = 100,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False,
        print_every: int = 50,
    ) -> SearchResult:
        """
        Run the ask -> evaluate -> tell loop.

        Parameters
        ----------
        objective : Callable
            Function to minimize. Takes a config dict, returns a finite float.
        n_trials : int
            Number of objective evaluations.
        seed : Optional[int]
            Seed for a fresh generator (ignored when ``rng`` is given).
        rng : Optional[np.random.Generator]
            Random source shared by all dimensions.
        verbose : bool
            Print progress every ``print_every`` trials.

        Returns
        -------
        SearchResult
            Best configuration plus per-trial histories.
        """
        if rng is None:
            rng = np.random.default_rng(seed)

        best_value = math.inf
        best_params: Dict[str, Any] = {}
        best_trial = -1
        value_history: List[float] = []
        param_history: List[Dict[str, Any]] = []
        best_value_history: List[Tuple[int, float]] = []

        for i in range(n_trials):
            config = self.ask(rng)
            v = float(objective(config))
            self.tell(config, v)

            if v < best_value:
                best_value = v
                best_params = dict(config)
                best_trial = i
                best_value_history.append((i, v))

            value_history.append(v)
            param_history.append(dict(config))

            if verbose and (i + 1) % print_every == 0:
                print(f"Trial {i + 1}/{n_trials}: best={best_value:.6g} (trial {best_trial})")

        if verbose:
            print(f"Best params: {best_params}")
            print(f"Best trial: {best_trial}")
            print(f"Best value: {best_value}")

        return SearchResult(
            best_params=best_params,
            best_trial=best_trial,
            best_value=best_value,
            value_history=value_history,
            param_history=param_history,
            best_value_history=best_value_history,
        )

    def __repr__(self) -> str:
        parts = []
        for name in self.param_order:
            if name in self.choices:
                parts.append(f"{name}: {self.choices[name]}")
            elif name in self.optimizers:
                space = self.optimizers[name].space
                parts.append(f"{name}: [{space.low}, {space.high}]")
            else:
                parts.append(f"{name}: {self.fixed[name]} (fixed)")
        return f"TpeSearch(dim={self.dim}, params=[{', '.join(parts)}])"
