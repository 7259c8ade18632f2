"""TPE Framework - Histogram Estimator

Count-based density estimator for categorical search spaces.

Every category receives a pseudo-count (``prior_weight``) on top of its
observed count, so categories never seen still keep a nonzero probability.
With no observations the distribution is uniform.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidConfig
from .search_space import CategoricalRange


@dataclass(frozen=True, eq=False)
class FittedHistogram:
    """Smoothed categorical distribution over ``space.n`` categories."""

    space: CategoricalRange
    counts: np.ndarray
    probs: np.ndarray

    def sample(
        self,
        rng: np.random.Generator,
        size: Optional[int] = None,
    ) -> Union[float, np.ndarray]:
        """Draw category indices proportionally to the smoothed frequencies."""
        idx = rng.choice(self.space.n, size=size, p=self.probs)
        if size is None:
            return float(idx)
        return np.asarray(idx, dtype=float)

    def log_density(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Log probability of the category (``int(x)``) each value falls in."""
        x_arr = np.asarray(x, dtype=float)
        idx = np.clip(x_arr, 0, self.space.n - 1).astype(int)
        out = np.log(self.probs[idx])

        if np.ndim(x) == 0:
            return float(out)
        return out


@dataclass(frozen=True)
class HistogramEstimator:
    """
    Histogram density estimator for ``CategoricalRange`` spaces.

    Parameters
    ----------
    prior_weight : float
        Additive (Laplace) pseudo-count given to every category.
    """

    prior_weight: float = 1.0

    def __post_init__(self) -> None:
        if not (self.prior_weight > 0):
            raise InvalidConfig(f"prior_weight must be > 0, got {self.prior_weight}")

    def fit(self, observations: Sequence[float], space: CategoricalRange) -> FittedHistogram:
        """Count observations per category and smooth the frequencies."""
        obs = np.asarray(observations, dtype=float).ravel()
        idx = np.clip(obs, 0, space.n - 1).astype(int)
        counts = np.bincount(idx, minlength=space.n).astype(float)

        smoothed = counts + self.prior_weight
        probs = smoothed / smoothed.sum()
        return FittedHistogram(space=space, counts=counts, probs=probs)

    def fit_pair(
        self,
        good: Sequence[float],
        bad: Sequence[float],
        space: CategoricalRange,
    ) -> Tuple[FittedHistogram, FittedHistogram]:
        """Fit the ``l`` (good) and ``g`` (bad) histograms independently."""
        return self.fit(good, space), self.fit(bad, space)
