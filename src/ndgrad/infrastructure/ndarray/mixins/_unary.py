"""
Elementwise unary kernels for NDArray.
"""

from __future__ import annotations

import numpy as np

from ....domain._errors import NDArrayArithmeticError


class NDArrayUnaryMixin:
    """
    Mixin providing `neg`, `exp`, `log`, `sqrt` and `abs`.

    Domain violations raise `NDArrayArithmeticError` instead of returning
    NaN or ``-inf``.
    """

    def neg(self):
        return type(self)._wrap(np.negative(self._view()), fresh=True)

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self.copy()

    def exp(self):
        """
        Elementwise natural exponential.

        Large inputs overflow to ``inf`` with NumPy's usual RuntimeWarning.
        """
        return type(self)._wrap(np.exp(self._view()), fresh=True)

    def log(self):
        """
        Elementwise natural logarithm.

        Raises
        ------
        NDArrayArithmeticError
            If any element is less than or equal to zero.
        """
        v = self._view()
        if np.any(v <= 0):
            raise NDArrayArithmeticError("log", "logarithm of a non-positive value")
        return type(self)._wrap(np.log(v), fresh=True)

    def sqrt(self):
        """
        Elementwise square root. ``sqrt(0) == 0`` is allowed.

        Raises
        ------
        NDArrayArithmeticError
            If any element is negative.
        """
        v = self._view()
        if np.any(v < 0):
            raise NDArrayArithmeticError("sqrt", "square root of a negative value")
        return type(self)._wrap(np.sqrt(v), fresh=True)

    def abs(self):
        return type(self)._wrap(np.abs(self._view()), fresh=True)

    __abs__ = abs
