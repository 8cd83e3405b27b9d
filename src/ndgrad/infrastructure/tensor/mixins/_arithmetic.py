"""
Arithmetic mixin defining elementwise Tensor operators and matmul.

Every operator lifts Python scalars (and raw arrays) to constant tensors that
do not require gradients, then records the matching primitive through
`apply`. Broadcasting follows NumPy rules; gradients are un-broadcast back to
each operand's shape by the primitives themselves.
"""

from typing import Any, Union

from ....domain._tensor import ITensor
from ...functions import AddFn, DivFn, MatMulFn, MulFn, NegFn, PowFn, apply

Number = Union[int, float]


class TensorMixinArithmetic:
    """
    Mixin providing ``+ - * / **``, unary ``-`` and ``@`` for tensors.

    Notes
    -----
    - ``a - b`` is recorded as ``a + (-b)``.
    - ``**`` maps to the Pow primitive, which also differentiates with
      respect to the exponent when the exponent requires gradients.
    """

    # ----------------------------
    # Addition / subtraction
    # ----------------------------
    def __add__(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise addition with broadcasting.

        Notes
        -----
        Backward rule:
        - ``da = unbroadcast(dz, a.shape)``
        - ``db = unbroadcast(dz, b.shape)``
        """
        return apply(AddFn, self, self._as_tensor(other))

    def __radd__(self: ITensor, other: Number) -> "ITensor":
        return apply(AddFn, self._as_tensor(other), self)

    def __sub__(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        return self + (-self._as_tensor(other))

    def __rsub__(self: ITensor, other: Number) -> "ITensor":
        return self._as_tensor(other) + (-self)

    def __neg__(self: ITensor) -> "ITensor":
        return apply(NegFn, self)

    # ----------------------------
    # Multiplication / division
    # ----------------------------
    def __mul__(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise multiplication with broadcasting.

        Notes
        -----
        Using the same tensor for both operands (``x * x``) records two
        consumer edges, so ``x`` receives both contributions (``2 * x * dz``).
        """
        return apply(MulFn, self, self._as_tensor(other))

    def __rmul__(self: ITensor, other: Number) -> "ITensor":
        return apply(MulFn, self._as_tensor(other), self)

    def __truediv__(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise true division with broadcasting.

        Raises
        ------
        NDArrayArithmeticError
            If any divisor element is zero.
        """
        return apply(DivFn, self, self._as_tensor(other))

    def __rtruediv__(self: ITensor, other: Number) -> "ITensor":
        return apply(DivFn, self._as_tensor(other), self)

    # ----------------------------
    # Power
    # ----------------------------
    def __pow__(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        return apply(PowFn, self, self._as_tensor(other))

    def __rpow__(self: ITensor, other: Number) -> "ITensor":
        return apply(PowFn, self._as_tensor(other), self)

    def pow(self: ITensor, exponent: Any) -> "ITensor":
        return self ** exponent

    # ----------------------------
    # Matrix multiplication
    # ----------------------------
    def matmul(self: ITensor, other: Any) -> "ITensor":
        """
        Matrix product (NumPy ``matmul`` semantics, batched for rank >= 3).

        Raises
        ------
        ShapeMismatchError
            If the inner dimensions differ or batch dimensions do not
            broadcast.
        """
        return apply(MatMulFn, self, self._as_tensor(other))

    def __matmul__(self: ITensor, other: Any) -> "ITensor":
        return self.matmul(other)

    def __rmatmul__(self: ITensor, other: Any) -> "ITensor":
        return apply(MatMulFn, self._as_tensor(other), self)
