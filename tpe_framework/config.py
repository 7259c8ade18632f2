"""TPE Framework - Optimizer configuration

``TpeConfig`` is the immutable configuration of a ``TpeOptimizer``.
``TpeOptimizerBuilder`` is a fluent front end that collects overrides and
validates them once, in ``build``, before any optimizer exists.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InvalidConfig

if TYPE_CHECKING:
    from .estimators import Estimator
    from .optimizer import TpeOptimizer
    from .search_space import SearchSpace

DEFAULT_GAMMA = 0.25
DEFAULT_CANDIDATES = 24


@dataclass(frozen=True)
class TpeConfig:
    """
    TPE hyper-parameters.

    Parameters
    ----------
    gamma : float
        Fraction of trials labelled "good", in ``(0, 1]``.
    candidates : int
        Number of candidates drawn from the good density per ``ask``.

    Raises
    ------
    InvalidConfig
        If ``gamma`` is outside ``(0, 1]`` or ``candidates < 1``.
    """

    gamma: float = DEFAULT_GAMMA
    candidates: int = DEFAULT_CANDIDATES

    def __post_init__(self) -> None:
        try:
            gamma = float(self.gamma)
        except (TypeError, ValueError) as e:
            raise InvalidConfig(f"gamma must be a number, got {self.gamma!r}") from e
        if not (math.isfinite(gamma) and 0.0 < gamma <= 1.0):
            raise InvalidConfig(f"gamma must be in (0, 1], got {self.gamma}")

        if isinstance(self.candidates, bool) or not isinstance(self.candidates, numbers.Integral):
            raise InvalidConfig(f"candidates must be an integer, got {self.candidates!r}")
        if self.candidates < 1:
            raise InvalidConfig(f"candidates must be >= 1, got {self.candidates}")

        object.__setattr__(self, "gamma", gamma)
        object.__setattr__(self, "candidates", int(self.candidates))


class TpeOptimizerBuilder:
    """
    Fluent builder for ``TpeOptimizer``.

    Examples
    --------
    >>> opt = (
    ...     TpeOptimizerBuilder()
    ...     .gamma(0.1)
    ...     .candidates(64)
    ...     .build(parzen_estimator(), Range(-5.0, 5.0))
    ... )
    """

    def __init__(self) -> None:
        self._gamma: float = DEFAULT_GAMMA
        self._candidates: int = DEFAULT_CANDIDATES

    def gamma(self, gamma: float) -> "TpeOptimizerBuilder":
        """Set the good-trial fraction."""
        self._gamma = gamma
        return self

    def candidates(self, candidates: int) -> "TpeOptimizerBuilder":
        """Set the number of candidates scored per ``ask``."""
        self._candidates = candidates
        return self

    def config(self) -> TpeConfig:
        """Validate the collected overrides into a ``TpeConfig``."""
        return TpeConfig(gamma=self._gamma, candidates=self._candidates)

    def build(self, estimator: "Estimator", space: "SearchSpace") -> "TpeOptimizer":
        """
        Build a ``TpeOptimizer``.

        Raises
        ------
        InvalidConfig
            If gamma/candidates are invalid or the estimator cannot model
            ``space``.
        """
        from .optimizer import TpeOptimizer

        return TpeOptimizer(estimator, space, config=self.config())

    def __repr__(self) -> str:
        return f"TpeOptimizerBuilder(gamma={self._gamma}, candidates={self._candidates})"

