"""
Elementwise arithmetic and comparison kernels for NDArray.

All binary operators broadcast their operands with NumPy semantics. The
result shape is computed by `broadcast_shapes` before the kernel runs, so
incompatible operands raise `ShapeMismatchError` rather than a NumPy error.
Python scalars are lifted to rank-0 arrays and broadcast like any operand.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

from ....domain._errors import NDArrayArithmeticError
from .._shape import broadcast_shapes


class NDArrayArithmeticMixin:
    """
    Mixin providing ``+ - * / **``, their reflected forms, `equal` and `where`.

    Notes
    -----
    - Division raises `NDArrayArithmeticError` when any divisor element is
      exactly zero; it never produces ``inf``.
    - Power raises `NDArrayArithmeticError` if the result contains NaN where
      neither operand did (negative base with a fractional exponent).
    """

    def _binary(self, other: Any, op: str, kernel: Callable, *, reflected: bool = False):
        other = self._coerce(other)
        a, b = (other, self) if reflected else (self, other)
        broadcast_shapes(op, a.shape, b.shape)
        return type(self)._wrap(kernel(a._view(), b._view()), fresh=True)

    # ----------------------------
    # Addition / subtraction
    # ----------------------------
    def add(self, other: Any):
        return self._binary(other, "add", np.add)

    def subtract(self, other: Any):
        return self._binary(other, "sub", np.subtract)

    def __add__(self, other: Any):
        return self.add(other)

    def __radd__(self, other: Any):
        return self._binary(other, "add", np.add, reflected=True)

    def __sub__(self, other: Any):
        return self.subtract(other)

    def __rsub__(self, other: Any):
        return self._binary(other, "sub", np.subtract, reflected=True)

    # ----------------------------
    # Multiplication
    # ----------------------------
    def multiply(self, other: Any):
        return self._binary(other, "mul", np.multiply)

    def __mul__(self, other: Any):
        return self.multiply(other)

    def __rmul__(self, other: Any):
        return self._binary(other, "mul", np.multiply, reflected=True)

    # ----------------------------
    # Division
    # ----------------------------
    @staticmethod
    def _checked_divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        if np.any(b == 0):
            raise NDArrayArithmeticError("div", "division by zero")
        return np.divide(a, b)

    def divide(self, other: Any):
        """
        Elementwise true division ``self / other``.

        Raises
        ------
        ShapeMismatchError
            If the operands do not broadcast.
        NDArrayArithmeticError
            If any element of the divisor is zero.
        """
        return self._binary(other, "div", self._checked_divide)

    def __truediv__(self, other: Any):
        return self.divide(other)

    def __rtruediv__(self, other: Any):
        return self._binary(other, "div", self._checked_divide, reflected=True)

    # ----------------------------
    # Power
    # ----------------------------
    @staticmethod
    def _checked_power(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        if np.any((a == 0) & (b < 0)):
            raise NDArrayArithmeticError("pow", "zero raised to a negative power")
        with np.errstate(invalid="ignore"):
            out = np.power(a, b)
        bad = np.isnan(out) & ~np.isnan(a) & ~np.isnan(b)
        if np.any(bad):
            raise NDArrayArithmeticError(
                "pow", "undefined result (negative base with fractional exponent)"
            )
        return out

    def power(self, other: Any):
        """
        Elementwise power ``self ** other`` with broadcasting.

        Raises
        ------
        NDArrayArithmeticError
            If a zero base meets a negative exponent, or the result is
            otherwise undefined for some element.
        """
        return self._binary(other, "pow", self._checked_power)

    def __pow__(self, other: Any):
        return self.power(other)

    def __rpow__(self, other: Any):
        return self._binary(other, "pow", self._checked_power, reflected=True)

    # ----------------------------
    # Comparison / selection
    # ----------------------------
    def equal(self, other: Any):
        """
        Elementwise equality as a float mask (1.0 where equal, else 0.0).
        """
        return self._binary(other, "equal", lambda a, b: (a == b).astype(np.float32))

    def greater(self, other: Any):
        """
        Elementwise ``self > other`` as a float mask.
        """
        return self._binary(other, "greater", lambda a, b: (a > b).astype(np.float32))

    @classmethod
    def where(cls, condition: Any, x: Any, y: Any):
        """
        Select elements from `x` where `condition` is non-zero, else from `y`.

        All three operands broadcast together.

        Parameters
        ----------
        condition : Any
            Mask; any non-zero element counts as true.
        x, y : Any
            Values chosen where the mask is true / false. Scalars are allowed.

        Returns
        -------
        NDArray
            Array of the broadcast shape of the three operands.
        """
        c = cls._coerce(condition)
        xa = cls._coerce(x)
        ya = cls._coerce(y)
        shape = broadcast_shapes("where", c.shape, xa.shape)
        broadcast_shapes("where", shape, ya.shape)
        return cls._wrap(np.where(c._view() != 0, xa._view(), ya._view()), fresh=True)
