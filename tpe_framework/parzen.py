"""TPE Framework - Parzen Estimator

Kernel density estimator for continuous search spaces.

Each observation becomes one Gaussian component with uniform weight. The
bandwidth of a component is the larger of the gaps to its sorted neighbours,
clipped to ``[sigma_min, sigma_max]`` with ``sigma_max = width / ceiling_divisor``
and ``sigma_min = min(width / min(max_divisor, n + 1), sigma_max)``.
Coincident points never collapse to a zero-width kernel, sparse fits stay
local to their observations instead of spreading onto the bounds, and the
floor shrinks as observations accumulate so the estimate can sharpen around
good regions.

With no observations the density is the uniform prior over the range.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from scipy.special import logsumexp

from .errors import InvalidConfig
from .search_space import Range

_LOG_SQRT_2PI = 0.5 * math.log(2.0 * math.pi)


def compute_bandwidths(
    mus: np.ndarray,
    low: float,
    high: float,
    max_divisor: int = 100,
    ceiling_divisor: float = 10.0,
) -> np.ndarray:
    """
    Adaptive per-component bandwidths for sorted means.

    Parameters
    ----------
    mus : np.ndarray
        Component means sorted ascending.
    low, high : float
        Bounds of the search space.
    max_divisor : int
        Cap on ``n + 1`` when deriving the minimum bandwidth.
    ceiling_divisor : float
        The maximum bandwidth is ``(high - low) / ceiling_divisor``.

    Returns
    -------
    np.ndarray
        One bandwidth per mean, in ``[sigma_min, sigma_max]``.
    """
    n = mus.size
    width = high - low
    sigma_max = width / ceiling_divisor
    # below ceiling_divisor - 1 observations the floor would exceed the ceiling
    sigma_min = min(width / min(max_divisor, n + 1), sigma_max)

    gaps = np.diff(mus)
    left = np.concatenate(([0.0], gaps))
    right = np.concatenate((gaps, [0.0]))
    sigmas = np.maximum(left, right)

    return np.clip(sigmas, sigma_min, sigma_max)


@dataclass(frozen=True, eq=False)
class FittedParzen:
    """Gaussian mixture fitted on one group of observations."""

    space: Range
    mus: np.ndarray
    sigmas: np.ndarray

    @property
    def n_components(self) -> int:
        return int(self.mus.size)

    @property
    def is_prior(self) -> bool:
        """True when no observations were given (uniform prior)."""
        return self.mus.size == 0

    def sample(
        self,
        rng: np.random.Generator,
        size: Optional[int] = None,
    ) -> Union[float, np.ndarray]:
        """
        Draw from the mixture, clamped into the search space.

        A component is picked uniformly, then a value is drawn from its
        Gaussian.
        """
        if self.is_prior:
            return self.space.sample_uniform(rng, size)

        n = 1 if size is None else size
        idx = rng.integers(self.mus.size, size=n)
        x = rng.normal(self.mus[idx], self.sigmas[idx])
        x = np.clip(x, self.space.low, self.space.high)

        if size is None:
            return float(x[0])
        return x

    def log_density(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Log of the mixture density, evaluated with log-sum-exp."""
        x_arr = np.asarray(x, dtype=float)

        if self.is_prior:
            out = np.full(x_arr.shape, -math.log(self.space.width))
        else:
            z = (x_arr[..., None] - self.mus) / self.sigmas
            log_pdf = -0.5 * z * z - np.log(self.sigmas) - _LOG_SQRT_2PI
            out = logsumexp(log_pdf, axis=-1) - math.log(self.mus.size)

        if np.ndim(x) == 0:
            return float(out)
        return out


@dataclass(frozen=True)
class ParzenEstimator:
    """
    Parzen (Gaussian-kernel) density estimator for ``Range`` spaces.

    Parameters
    ----------
    max_divisor : int
        The minimum bandwidth is ``width / min(max_divisor, n + 1)``.
    ceiling_divisor : float
        The maximum bandwidth is ``width / ceiling_divisor``.
    """

    max_divisor: int = 100
    ceiling_divisor: float = 10.0

    def __post_init__(self) -> None:
        if self.max_divisor < 1:
            raise InvalidConfig(f"max_divisor must be >= 1, got {self.max_divisor}")
        if not self.ceiling_divisor >= 1:
            raise InvalidConfig(f"ceiling_divisor must be >= 1, got {self.ceiling_divisor}")

    def fit(self, observations: Sequence[float], space: Range) -> FittedParzen:
        """Fit a mixture with one component per observation."""
        mus = np.sort(np.asarray(observations, dtype=float).ravel())
        if mus.size == 0:
            return FittedParzen(space=space, mus=mus, sigmas=mus.copy())

        sigmas = compute_bandwidths(mus, space.low, space.high, self.max_divisor, self.ceiling_divisor)
        return FittedParzen(space=space, mus=mus, sigmas=sigmas)

    def fit_pair(
        self,
        good: Sequence[float],
        bad: Sequence[float],
        space: Range,
    ) -> Tuple[FittedParzen, FittedParzen]:
        """Fit the ``l`` (good) and ``g`` (bad) densities independently."""
        return self.fit(good, space), self.fit(bad, space)
