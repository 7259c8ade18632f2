"""
TPE Framework - Search Space Module

This module defines the one-dimensional search spaces a ``TpeOptimizer`` can
explore:

- ``Range``: a bounded continuous interval ``[low, high]``
- ``CategoricalRange``: ``n`` categories, stored as float indices in ``[0, n)``

Both are immutable once built and validate their bounds eagerly. The set of
variants is closed; estimators and the optimizer dispatch on the concrete type.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .errors import InvalidRange


@dataclass(frozen=True)
class Range:
    """
    Bounded continuous search space.

    Parameters
    ----------
    low : float
        Lower bound (inclusive).
    high : float
        Upper bound (inclusive). Must be strictly greater than ``low``.

    Raises
    ------
    InvalidRange
        If a bound is not finite or ``low >= high``.

    Examples
    --------
    >>> space = Range(-5.0, 5.0)
    >>> space.clamp(7.3)
    5.0
    """

    low: float
    high: float

    def __post_init__(self) -> None:
        try:
            low = float(self.low)
            high = float(self.high)
        except (TypeError, ValueError) as e:
            raise InvalidRange(f"Range bounds must be numeric, got ({self.low!r}, {self.high!r})") from e
        if not (math.isfinite(low) and math.isfinite(high)):
            raise InvalidRange(f"Range bounds must be finite, got ({self.low}, {self.high})")
        if not (high > low):
            raise InvalidRange(f"Invalid range: low={self.low} must be < high={self.high}")
        object.__setattr__(self, "low", low)
        object.__setattr__(self, "high", high)

    @property
    def width(self) -> float:
        """Extent of the interval (``high - low``)."""
        return self.high - self.low

    def clamp(self, x: float) -> float:
        """Saturate ``x`` into ``[low, high]``."""
        return float(min(max(float(x), self.low), self.high))

    def contains(self, x: float) -> bool:
        """Check if ``x`` is a finite value inside ``[low, high]``."""
        x = float(x)
        return math.isfinite(x) and self.low <= x <= self.high

    def sample_uniform(
        self,
        rng: np.random.Generator,
        size: Optional[int] = None,
    ) -> Union[float, np.ndarray]:
        """Draw from the uniform prior over the interval."""
        if size is None:
            return float(rng.uniform(self.low, self.high))
        return rng.uniform(self.low, self.high, size)

    def __repr__(self) -> str:
        return f"Range({self.low}, {self.high})"


@dataclass(frozen=True)
class CategoricalRange:
    """
    Bounded categorical search space of ``n`` choices.

    Values are category indices stored as floats in ``[0, n)``; consumers
    truncate them with ``int()`` when they need the index.

    Parameters
    ----------
    n : int
        Number of categories (``n >= 1``).

    Raises
    ------
    InvalidRange
        If ``n`` is not an integer or ``n < 1``.
    """

    n: int

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, numbers.Integral):
            raise InvalidRange(f"CategoricalRange requires an integer n, got {self.n!r}")
        if self.n < 1:
            raise InvalidRange(f"CategoricalRange requires n >= 1, got {self.n}")
        object.__setattr__(self, "n", int(self.n))

    @property
    def low(self) -> float:
        return 0.0

    @property
    def high(self) -> float:
        return float(self.n)

    @property
    def width(self) -> float:
        return float(self.n)

    def clamp(self, x: float) -> float:
        """Saturate ``x`` into ``[0, n - 1]``."""
        return float(min(max(float(x), 0.0), float(self.n - 1)))

    def contains(self, x: float) -> bool:
        """Check if ``x`` is a finite index inside ``[0, n)``."""
        x = float(x)
        return math.isfinite(x) and 0.0 <= x < self.n

    def index(self, x: float) -> int:
        """Convert a stored float value to its category index."""
        return int(self.clamp(x))

    def sample_uniform(
        self,
        rng: np.random.Generator,
        size: Optional[int] = None,
    ) -> Union[float, np.ndarray]:
        """Draw a category index uniformly (as float)."""
        if size is None:
            return float(rng.integers(self.n))
        return rng.integers(self.n, size=size).astype(float)

    def __repr__(self) -> str:
        return f"CategoricalRange({self.n})"


SearchSpace = Union[Range, CategoricalRange]


def continuous_range(low: float, high: float) -> Range:
    """Build a validated continuous ``Range``."""
    return Range(low, high)


def categorical_range(n: int) -> CategoricalRange:
    """Build a validated ``CategoricalRange`` over ``n`` choices."""
    return CategoricalRange(n)
