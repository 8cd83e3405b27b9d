"""
Elementwise unary primitives: Exp, Log and Sqrt.
"""

from typing import Tuple

import numpy as np

from ...domain._function import Function
from ..ndarray import NDArray


def pole_gradient(grad_out: NDArray, finite: NDArray, pole: NDArray) -> NDArray:
    """
    Combine a finite local gradient with positions where the derivative is
    infinite.

    At `pole` positions the result is ``+inf`` or ``-inf`` following the sign
    of `grad_out`, and 0 where `grad_out` is 0, so a zero upstream gradient
    never turns into ``inf`` or ``nan``. Elsewhere `finite` is used.
    """
    signed_inf = NDArray.where(grad_out.greater(0.0), np.inf, -np.inf)
    at_pole = NDArray.where(grad_out.equal(0.0), 0.0, signed_inf)
    return NDArray.where(pole, at_pole, finite)


class ExpFn(Function):
    """
    Elementwise exponential function.

    Implements:

        out = exp(x)

    Backward:

        d(exp(x))/dx = exp(x) = out

    Notes
    -----
    The forward output is saved so backward does not recompute ``exp``.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        out = x.exp()
        ctx.save_for_backward(out)
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        (out,) = ctx.saved_arrays
        return (grad_out * out,)


class LogFn(Function):
    """
    Elementwise natural logarithm; backward ``dx = dz / x``.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        ctx.save_for_backward(x)
        return x.log()

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        (x,) = ctx.saved_arrays
        return (grad_out / x,)


class SqrtFn(Function):
    """
    Elementwise square root; backward ``dx = 0.5 * dz / sqrt(x)``.

    The gradient at ``x == 0`` is ``+inf`` scaled by the sign of ``dz``, and 0
    where ``dz`` is 0.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        out = x.sqrt()
        ctx.save_for_backward(out)
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        (out,) = ctx.saved_arrays
        pole = out.equal(0.0)
        safe = NDArray.where(pole, 1.0, out)
        return (pole_gradient(grad_out, grad_out * 0.5 / safe, pole),)
