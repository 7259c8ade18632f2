"""TPE Framework - Error kinds

Every fallible boundary of the framework (search-space construction, optimizer
configuration, ``tell``) raises one of the classes below. They all derive from
``OptimizerError``, which is itself a ``ValueError``, so callers may catch the
specific kind, the framework base class, or plain ``ValueError``.
"""

from __future__ import annotations


class OptimizerError(ValueError):
    """Base class for all errors raised by the framework."""


class InvalidRange(OptimizerError):
    """Malformed search-space bounds (``low >= high`` or ``n < 1``)."""


class InvalidConfig(OptimizerError):
    """Bad optimizer/estimator configuration (gamma, candidate count, ...)."""


class InvalidObservation(OptimizerError):
    """Non-finite objective or out-of-range value passed to ``tell``."""
