"""
Unary mixin: exp, log, sqrt and tanh for tensors.
"""

from ....domain._tensor import ITensor
from ...functions import ExpFn, LogFn, SqrtFn, apply


class TensorMixinUnary:
    """
    Mixin providing elementwise unary functions.
    """

    def exp(self: ITensor) -> "ITensor":
        """
        Elementwise exponential. Backward reuses the forward output.
        """
        return apply(ExpFn, self)

    def log(self: ITensor) -> "ITensor":
        """
        Elementwise natural logarithm.

        Raises
        ------
        NDArrayArithmeticError
            If any element is less than or equal to zero.
        """
        return apply(LogFn, self)

    def sqrt(self: ITensor) -> "ITensor":
        return apply(SqrtFn, self)

    def tanh(self: ITensor) -> "ITensor":
        """
        Hyperbolic tangent, composed from differentiable primitives.

        See `ndgrad.infrastructure._activations.tanh`.
        """
        from ..._activations import tanh

        return tanh(self)
