"""TPE Framework - Forward-mode automatic differentiation

``Dual`` carries a value and a gradient vector (one derivative channel per
model parameter). Propagating duals through a model's arithmetic yields the
exact derivatives of the output with respect to every parameter in a single
evaluation, which is how ``LmOptimizer`` builds its Jacobian.

The elementary functions below accept either a ``Dual`` or a plain number, so
the same model code runs on floats and on duals.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Union

import numpy as np

Number = Union[int, float]


class Dual:
    """
    Dual number ``value + grad . eps``.

    Parameters
    ----------
    value : float
        Primal value.
    grad : np.ndarray
        Partial derivatives with respect to each seeded variable.

    Examples
    --------
    >>> a, b = Dual.variables([2.0, 3.0])
    >>> y = a * exp(-b)
    >>> y.value, y.grad
    """

    __slots__ = ("value", "grad")

    # numpy scalars on the left defer to Dual's reflected operators
    __array_ufunc__ = None

    def __init__(self, value: Number, grad: Union[Sequence[float], np.ndarray]) -> None:
        self.value = np.float64(value)
        self.grad = np.asarray(grad, dtype=float)

    @classmethod
    def constant(cls, value: Number, n: int) -> "Dual":
        """A value with zero derivative in all ``n`` channels."""
        return cls(value, np.zeros(n))

    @classmethod
    def variables(cls, values: Sequence[float]) -> List["Dual"]:
        """Seed one unit derivative channel per value."""
        n = len(values)
        eye = np.eye(n)
        return [cls(v, eye[i]) for i, v in enumerate(values)]

    def _lift(self, other: Union["Dual", Number]) -> "Dual":
        if isinstance(other, Dual):
            return other
        return Dual(other, np.zeros_like(self.grad))

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Union["Dual", Number]) -> "Dual":
        o = self._lift(other)
        return Dual(self.value + o.value, self.grad + o.grad)

    __radd__ = __add__

    def __sub__(self, other: Union["Dual", Number]) -> "Dual":
        o = self._lift(other)
        return Dual(self.value - o.value, self.grad - o.grad)

    def __rsub__(self, other: Number) -> "Dual":
        return self._lift(other) - self

    def __mul__(self, other: Union["Dual", Number]) -> "Dual":
        o = self._lift(other)
        return Dual(self.value * o.value, self.grad * o.value + self.value * o.grad)

    __rmul__ = __mul__

    def __truediv__(self, other: Union["Dual", Number]) -> "Dual":
        o = self._lift(other)
        return Dual(
            self.value / o.value,
            (self.grad * o.value - self.value * o.grad) / (o.value * o.value),
        )

    def __rtruediv__(self, other: Number) -> "Dual":
        return self._lift(other) / self

    def __neg__(self) -> "Dual":
        return Dual(-self.value, -self.grad)

    def __pos__(self) -> "Dual":
        return self

    def __pow__(self, other: Union["Dual", Number]) -> "Dual":
        if isinstance(other, Dual):
            # d(u^v) = u^v (v' ln u + v u'/u)
            return exp(other * log(self))
        p = float(other)
        if p == 0.0:
            return Dual(1.0, np.zeros_like(self.grad))
        return Dual(self.value ** p, p * self.value ** (p - 1.0) * self.grad)

    def __rpow__(self, other: Number) -> "Dual":
        base = float(other)
        v = base ** self.value
        return Dual(v, v * np.log(base) * self.grad)

    def __abs__(self) -> "Dual":
        sign = 1.0 if self.value >= 0 else -1.0
        return Dual(abs(self.value), sign * self.grad)

    # -------------------------------------------------------------------------
    # Comparisons (by value)
    # -------------------------------------------------------------------------

    def __lt__(self, other: Union["Dual", Number]) -> bool:
        return self.value < _value(other)

    def __le__(self, other: Union["Dual", Number]) -> bool:
        return self.value <= _value(other)

    def __gt__(self, other: Union["Dual", Number]) -> bool:
        return self.value > _value(other)

    def __ge__(self, other: Union["Dual", Number]) -> bool:
        return self.value >= _value(other)

    def __float__(self) -> float:
        return float(self.value)

    def __repr__(self) -> str:
        return f"Dual({float(self.value)}, {self.grad.tolist()})"


def _value(x: Union[Dual, Number]) -> float:
    return x.value if isinstance(x, Dual) else float(x)


# -----------------------------------------------------------------------------
# Elementary functions
# -----------------------------------------------------------------------------


def exp(x: Union[Dual, Number]) -> Union[Dual, float]:
    if isinstance(x, Dual):
        v = float(np.exp(x.value))
        return Dual(v, v * x.grad)
    return float(np.exp(x))


def log(x: Union[Dual, Number]) -> Union[Dual, float]:
    if isinstance(x, Dual):
        return Dual(float(np.log(x.value)), x.grad / x.value)
    return float(np.log(x))


def sqrt(x: Union[Dual, Number]) -> Union[Dual, float]:
    if isinstance(x, Dual):
        v = float(np.sqrt(x.value))
        return Dual(v, x.grad / (2.0 * v))
    return float(np.sqrt(x))


def sin(x: Union[Dual, Number]) -> Union[Dual, float]:
    if isinstance(x, Dual):
        return Dual(math.sin(x.value), math.cos(x.value) * x.grad)
    return math.sin(x)


def cos(x: Union[Dual, Number]) -> Union[Dual, float]:
    if isinstance(x, Dual):
        return Dual(math.cos(x.value), -math.sin(x.value) * x.grad)
    return math.cos(x)


def tanh(x: Union[Dual, Number]) -> Union[Dual, float]:
    if isinstance(x, Dual):
        t = math.tanh(x.value)
        return Dual(t, (1.0 - t * t) * x.grad)
    return math.tanh(x)
