"""
TPE Framework - Nonlinear least squares

``LmOptimizer`` fits the parameters of a model ``f(x, p)`` to a dataset by
Levenberg–Marquardt (damped Gauss–Newton):

- residuals ``r = y - f(x, p)`` and the Jacobian ``J = df/dp`` are evaluated
  at every data point with forward-mode dual numbers (exact, no finite
  differences)
- each iteration solves ``(J^T J + lambda I) dp = J^T r``
- a step is accepted only if the residual sum of squares decreases; the
  damping ``lambda`` shrinks after an accepted step and grows on a rejected
  one, and the same iteration is retried

Termination (small step, stalled improvement, or ``max_iter``) is never an
error: the last accepted parameters are returned and ``get_error()`` reports
the remaining misfit.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .dual import Dual
from .errors import InvalidConfig

Model = Callable[[float, List[Dual]], Union[Dual, float]]


def _as_dataset(data: Any) -> Tuple[np.ndarray, np.ndarray]:
    """Accept ``(x, y)`` arrays or a sequence of ``(x, y)`` pairs."""
    if isinstance(data, tuple) and len(data) == 2 and np.ndim(data[0]) == 1:
        x = np.asarray(data[0], dtype=float)
        y = np.asarray(data[1], dtype=float)
    else:
        arr = np.asarray(data, dtype=float)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise InvalidConfig(f"data must be (x, y) arrays or (x, y) pairs, got shape {arr.shape}")
        x, y = arr[:, 0], arr[:, 1]

    if x.shape != y.shape:
        raise InvalidConfig(f"x and y must have the same length, got {x.shape} and {y.shape}")
    if x.size == 0:
        raise InvalidConfig("data must contain at least one point")
    return x, y


class LmOptimizer:
    """
    Levenberg–Marquardt curve fitter with dual-number Jacobians.

    Parameters
    ----------
    data : Any
        ``(x, y)`` arrays, or a sequence of ``(x, y)`` pairs.
    model : Callable
        ``model(x, params) -> Dual | float``. ``params`` is a list of
        ``Dual``; use the functions of ``tpe_framework.dual`` (``exp``,
        ``log``, ...) for non-arithmetic operations.
    lambda_init : float
        Initial damping factor.
    lambda_up, lambda_down : float
        Damping multiplier after a rejected / divisor after an accepted step.
    lambda_max : float
        Damping beyond which the fit is considered stalled.
    xtol : float
        Relative step-size tolerance.
    ftol : float
        Relative residual-improvement tolerance.

    Examples
    --------
    >>> from tpe_framework.dual import exp
    >>> def model(x, p):
    ...     return p[0] * exp(-p[1] * x)
    >>> opt = LmOptimizer((x, y), model).set_init_param([1.0, 1.0]).set_max_iter(50)
    >>> p = opt.optimize()
    >>> opt.get_error()
    """

    def __init__(
        self,
        data: Any,
        model: Model,
        lambda_init: float = 1e-3,
        lambda_up: float = 10.0,
        lambda_down: float = 10.0,
        lambda_max: float = 1e12,
        xtol: float = 1e-10,
        ftol: float = 1e-14,
    ) -> None:
        if not callable(model):
            raise TypeError("model must be callable")
        if not (lambda_init > 0 and lambda_up > 1 and lambda_down > 1):
            raise InvalidConfig("lambda_init must be > 0 and lambda_up/lambda_down must be > 1")

        self.x, self.y = _as_dataset(data)
        self.model = model

        self.lambda_init = lambda_init
        self.lambda_up = lambda_up
        self.lambda_down = lambda_down
        self.lambda_max = lambda_max
        self.xtol = xtol
        self.ftol = ftol

        self.max_iter = 50
        self.param: Optional[np.ndarray] = None
        self.n_iter = 0
        self.damping = lambda_init
        self.termination: Optional[str] = None
        self._residuals: Optional[np.ndarray] = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_init_param(self, param: Sequence[float]) -> "LmOptimizer":
        """Set the starting parameter vector."""
        p = np.asarray(param, dtype=float).ravel()
        if p.size == 0 or not np.all(np.isfinite(p)):
            raise InvalidConfig(f"initial parameters must be a non-empty finite vector, got {param}")
        self.param = p
        self._residuals = None
        return self

    def set_max_iter(self, max_iter: int) -> "LmOptimizer":
        """Set the iteration cap."""
        if isinstance(max_iter, bool) or not isinstance(max_iter, numbers.Integral) or max_iter < 1:
            raise InvalidConfig(f"max_iter must be a positive integer, got {max_iter!r}")
        self.max_iter = int(max_iter)
        return self

    # -------------------------------------------------------------------------
    # Model evaluation
    # -------------------------------------------------------------------------

    def evaluate(self, param: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Residuals and Jacobian at ``param``.

        Returns
        -------
        r : np.ndarray
            ``y - f(x, param)``, shape ``(m,)``.
        J : np.ndarray
            ``df/dparam``, shape ``(m, n_params)``.
        """
        n = param.size
        f = np.empty(self.x.size)
        J = np.empty((self.x.size, n))

        for i, xi in enumerate(self.x):
            out = self.model(float(xi), Dual.variables(param))
            if isinstance(out, Dual):
                f[i] = out.value
                J[i] = out.grad
            else:
                f[i] = float(out)
                J[i] = 0.0

        return self.y - f, J

    # -------------------------------------------------------------------------
    # Optimization
    # -------------------------------------------------------------------------

    def optimize(self, verbose: bool = False) -> np.ndarray:
        """
        Run Levenberg–Marquardt from the initial parameters.

        Parameters
        ----------
        verbose : bool
            Print SSE and damping at every iteration.

        Returns
        -------
        np.ndarray
            The last accepted parameter vector.

        Raises
        ------
        InvalidConfig
            If no initial parameters were set.
        """
        if self.param is None:
            raise InvalidConfig("initial parameters not set (call set_init_param first)")

        p = self.param.copy()
        lam = self.lambda_init
        with np.errstate(all="ignore"):
            r, J = self.evaluate(p)
        sse = float(r @ r)
        if not np.isfinite(sse):
            raise InvalidConfig(f"model is not finite at the initial parameters {p.tolist()}")

        self.termination = "max_iter"
        self.n_iter = 0
        identity = np.eye(p.size)

        for it in range(self.max_iter):
            self.n_iter = it + 1
            A = J.T @ J
            g = J.T @ r

            accepted = False
            dp = np.zeros_like(p)
            sse_new = sse
            while lam <= self.lambda_max:
                try:
                    dp = np.linalg.solve(A + lam * identity, g)
                except np.linalg.LinAlgError:
                    lam *= self.lambda_up
                    continue

                p_new = p + dp
                with np.errstate(all="ignore"):
                    r_new, J_new = self.evaluate(p_new)
                    sse_new = float(r_new @ r_new)

                if np.isfinite(sse_new) and np.all(np.isfinite(J_new)) and sse_new < sse:
                    accepted = True
                    break
                lam *= self.lambda_up

            if not accepted:
                self.termination = "stalled"
                break

            improvement = sse - sse_new
            p, r, J, sse_prev, sse = p_new, r_new, J_new, sse, sse_new
            lam = max(lam / self.lambda_down, 1e-15)

            if verbose:
                print(f"Iter {self.n_iter}/{self.max_iter}: sse={sse:.6e}, lambda={lam:.2e}")

            if np.linalg.norm(dp) <= self.xtol * (np.linalg.norm(p) + self.xtol):
                self.termination = "converged"
                break
            if improvement <= self.ftol * sse_prev:
                self.termination = "stalled"
                break

        self.param = p
        self.damping = lam
        self._residuals = r

        if verbose:
            print(f"Stopped after {self.n_iter} iterations ({self.termination}), MAE={self.get_error():.6e}")

        return p.copy()

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def get_error(self) -> float:
        """Mean absolute residual at the current parameters."""
        if self.param is None:
            raise InvalidConfig("initial parameters not set (call set_init_param first)")
        if self._residuals is None:
            with np.errstate(all="ignore"):
                self._residuals, _ = self.evaluate(self.param)
        return float(np.mean(np.abs(self._residuals)))

    def get_statistics(self) -> Dict[str, Any]:
        """Summary of the last run."""
        return {
            "n_iter": self.n_iter,
            "max_iter": self.max_iter,
            "termination": self.termination,
            "damping": self.damping,
            "param": None if self.param is None else self.param.tolist(),
            "error": None if self.param is None else self.get_error(),
        }

    def __repr__(self) -> str:
        return (
            f"LmOptimizer(n_data={self.x.size}, max_iter={self.max_iter}, "
            f"n_iter={self.n_iter}, termination={self.termination})"
        )
