"""TPE Framework - Estimator variants

The density estimator set is closed: ``ParzenEstimator`` pairs with ``Range``
and ``HistogramEstimator`` pairs with ``CategoricalRange``. This module names
the variant union, provides the default factories, and checks that an
estimator matches the space it will model.
"""

from __future__ import annotations

from typing import Union

from .errors import InvalidConfig
from .histogram import FittedHistogram, HistogramEstimator
from .parzen import FittedParzen, ParzenEstimator
from .search_space import CategoricalRange, Range, SearchSpace

Estimator = Union[ParzenEstimator, HistogramEstimator]
FittedDensity = Union[FittedParzen, FittedHistogram]


def parzen_estimator() -> ParzenEstimator:
    """Default Parzen estimator (continuous spaces)."""
    return ParzenEstimator()


def histogram_estimator() -> HistogramEstimator:
    """Default histogram estimator (categorical spaces)."""
    return HistogramEstimator()


def check_compatible(estimator: Estimator, space: SearchSpace) -> None:
    """
    Validate an estimator/space pair.

    Raises
    ------
    InvalidConfig
        If the estimator cannot model the given space.
    TypeError
        If either argument is not one of the known variants.
    """
    if isinstance(estimator, ParzenEstimator):
        if isinstance(space, Range):
            return
        if isinstance(space, CategoricalRange):
            raise InvalidConfig("ParzenEstimator requires a continuous Range, got CategoricalRange")
    elif isinstance(estimator, HistogramEstimator):
        if isinstance(space, CategoricalRange):
            return
        if isinstance(space, Range):
            raise InvalidConfig("HistogramEstimator requires a CategoricalRange, got Range")
    else:
        raise TypeError(
            f"estimator must be ParzenEstimator or HistogramEstimator, got {type(estimator).__name__}"
        )
    raise TypeError(f"space must be Range or CategoricalRange, got {type(space).__name__}")
