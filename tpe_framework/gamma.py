"""TPE Framework - Gamma split

Gamma ($\\gamma$) is the fraction of trials labelled "good".

Trials are ranked by objective (ascending, lower is better) with a stable
sort, so equal objectives keep insertion order. The lowest
``ceil(gamma * n)`` trials (at least one) form the good group.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

# Guards ceil() against products like 0.3 * 10 = 3.0000000000000004.
_CEIL_EPS = 1e-9


def n_good(n_trials: int, gamma: float) -> int:
    """Number of trials labelled good out of ``n_trials``."""
    if n_trials <= 0:
        return 0
    k = math.ceil(gamma * n_trials - _CEIL_EPS)
    return int(min(max(k, 1), n_trials))


def split_good_bad(
    values: Sequence[float],
    objectives: Sequence[float],
    gamma: float,
) -> Tuple[List[float], List[float]]:
    """
    Split parameter values into good and bad groups.

    Parameters
    ----------
    values : Sequence[float]
        Parameter values, in trial order.
    objectives : Sequence[float]
        Objective values aligned with ``values``.
    gamma : float
        Fraction of trials labelled good, in ``(0, 1]``.

    Returns
    -------
    good : List[float]
        Values of the best-ranked trials.
    bad : List[float]
        Values of the remaining trials.
    """
    if len(values) != len(objectives):
        raise ValueError(
            f"values and objectives must have equal length, got {len(values)} and {len(objectives)}"
        )
    if len(values) == 0:
        return [], []

    order = np.argsort(np.asarray(objectives, dtype=float), kind="stable")
    k = n_good(len(values), gamma)

    good = [float(values[i]) for i in order[:k]]
    bad = [float(values[i]) for i in order[k:]]
    return good, bad
