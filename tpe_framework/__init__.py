"""
TPE Framework
=============

Tree-structured Parzen Estimator for black-box minimization over mixed
continuous/categorical spaces, plus a Levenberg–Marquardt curve fitter used
as a deterministic baseline.

The framework combines:
- One-dimensional search spaces (continuous ``Range``, ``CategoricalRange``)
- Parzen (Gaussian mixture) and histogram density estimators
- An ask/tell ``TpeOptimizer`` scoring candidates by ``log l(x) - log g(x)``
- ``TpeSearch``: one optimizer per parameter, driven with a shared objective
- ``LmOptimizer``: damped Gauss–Newton with dual-number Jacobians

Installation
------------
Requires numpy and scipy.

Quick Start
-----------
One dimension, explicit ask/tell:

    >>> import numpy as np
    >>> from tpe_framework import TpeOptimizer, Range, parzen_estimator
    >>> rng = np.random.default_rng(42)
    >>> opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
    >>> for _ in range(200):
    ...     x = opt.ask(rng)
    ...     opt.tell(x, x ** 2)

Typed parameter space:

    >>> from tpe_framework import TpeSearch
    >>> search = TpeSearch({'x': (-5.0, 5.0), 'y': [1, 2, 3]})
    >>> result = search.optimize(lambda c: c['x'] ** 2 + c['y'], n_trials=500, seed=42)
    >>> result.best_params, result.best_value

Curve fitting:

    >>> from tpe_framework import LmOptimizer
    >>> from tpe_framework.dual import exp
    >>> opt = LmOptimizer((x, y), lambda x, p: p[0] * exp(-p[1] * x))
    >>> p = opt.set_init_param([1.0, 1.0]).set_max_iter(100).optimize()

Modules
-------
- search_space: Range / CategoricalRange
- parzen, histogram: density estimators
- gamma: good/bad split of the history
- config: TpeConfig and TpeOptimizerBuilder
- optimizer: TpeOptimizer
- search: multi-dimension TpeSearch
- dual, least_squares: forward-mode AD and LmOptimizer

Version
-------
1.0.0
"""

__version__ = "1.0.0"

from .errors import OptimizerError, InvalidRange, InvalidConfig, InvalidObservation
from .search_space import (
    Range,
    CategoricalRange,
    SearchSpace,
    continuous_range,
    categorical_range,
)
from .parzen import ParzenEstimator, FittedParzen
from .histogram import HistogramEstimator, FittedHistogram
from .estimators import Estimator, FittedDensity, parzen_estimator, histogram_estimator
from .gamma import split_good_bad
from .config import TpeConfig, TpeOptimizerBuilder
from .optimizer import TpeOptimizer, Trial
from .search import TpeSearch, SearchResult
from .dual import Dual
from .least_squares import LmOptimizer

__all__ = [
    "OptimizerError",
    "InvalidRange",
    "InvalidConfig",
    "InvalidObservation",
    "Range",
    "CategoricalRange",
    "SearchSpace",
    "continuous_range",
    "categorical_range",
    "ParzenEstimator",
    "FittedParzen",
    "HistogramEstimator",
    "FittedHistogram",
    "Estimator",
    "FittedDensity",
    "parzen_estimator",
    "histogram_estimator",
    "split_good_bad",
    "TpeConfig",
    "TpeOptimizerBuilder",
    "TpeOptimizer",
    "Trial",
    "TpeSearch",
    "SearchResult",
    "Dual",
    "LmOptimizer",
    "__version__",
]
