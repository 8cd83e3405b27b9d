"""
Matrix multiplication for NDArray.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ....domain._errors import ShapeMismatchError
from .._shape import broadcast_shapes


class NDArrayLinalgMixin:
    """
    Mixin providing `matmul` and the ``@`` operator.
    """

    def matmul(self, other: Any):
        """
        Matrix product with NumPy ``matmul`` semantics.

        - 1D @ 1D is the inner product (rank-0 result).
        - 2D @ 2D is the matrix product ``(m, k) @ (k, n) -> (m, n)``.
        - A 1D left operand is treated as a row vector and a 1D right operand
          as a column vector; the promoted axis is removed from the result.
        - Rank >= 3 operands are stacks of matrices; their leading batch
          dimensions broadcast.

        Raises
        ------
        ShapeMismatchError
            If an operand is rank 0, the contracted dimensions differ, or the
            batch dimensions do not broadcast.
        """
        other = self._coerce(other)
        a, b = self.shape, other.shape
        if len(a) == 0 or len(b) == 0:
            raise ShapeMismatchError("matmul", a, b, detail="rank-0 operands are not allowed")

        k_a = a[-1]
        k_b = b[0] if len(b) == 1 else b[-2]
        if k_a != k_b:
            raise ShapeMismatchError(
                "matmul", a, b, detail=f"inner dimensions differ: {k_a} vs {k_b}"
            )
        if len(a) > 2 or len(b) > 2:
            broadcast_shapes("matmul", a[:-2], b[:-2])

        return type(self)._wrap(np.matmul(self._view(), other._view()), fresh=True)

    def __matmul__(self, other: Any):
        return self.matmul(other)

    def __rmatmul__(self, other: Any):
        return self._coerce(other).matmul(self)
