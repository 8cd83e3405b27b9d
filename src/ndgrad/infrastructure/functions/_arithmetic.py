"""
Elementwise arithmetic primitives: Add, Neg, Mul, Div and Pow.

All binary primitives broadcast in forward and un-broadcast in backward, so
each operand receives a gradient of its own shape.

Subtraction has no primitive of its own; ``a - b`` is recorded as
``a + (-b)``.
"""

import warnings
from typing import Tuple

from ...domain._function import Function
from ..ndarray import NDArray
from ._unary import pole_gradient
from ._unbroadcast import unbroadcast


class AddFn(Function):
    """
    Elementwise addition ``out = a + b``.

    Backward:

        da = unbroadcast(dz, a.shape)
        db = unbroadcast(dz, b.shape)
    """

    @staticmethod
    def forward(ctx, a: NDArray, b: NDArray) -> NDArray:
        ctx.saved_meta["a_shape"] = a.shape
        ctx.saved_meta["b_shape"] = b.shape
        return a + b

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray, NDArray]:
        return (
            unbroadcast(grad_out, ctx.saved_meta["a_shape"]),
            unbroadcast(grad_out, ctx.saved_meta["b_shape"]),
        )


class NegFn(Function):
    """
    Elementwise negation ``out = -a``; backward ``da = -dz``.
    """

    @staticmethod
    def forward(ctx, a: NDArray) -> NDArray:
        return -a

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        return (-grad_out,)


class MulFn(Function):
    """
    Elementwise multiplication ``out = a * b``.

    Backward:

        da = unbroadcast(dz * b, a.shape)
        db = unbroadcast(dz * a, b.shape)
    """

    @staticmethod
    def forward(ctx, a: NDArray, b: NDArray) -> NDArray:
        ctx.save_for_backward(a, b)
        return a * b

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray, NDArray]:
        a, b = ctx.saved_arrays
        return unbroadcast(grad_out * b, a.shape), unbroadcast(grad_out * a, b.shape)


class DivFn(Function):
    """
    Elementwise true division ``out = a / b``.

    Backward:

        da = unbroadcast(dz / b, a.shape)
        db = unbroadcast(-dz * a / b^2, b.shape)

    Notes
    -----
    Forward rejects zero divisors, so the backward divisions are safe.
    """

    @staticmethod
    def forward(ctx, a: NDArray, b: NDArray) -> NDArray:
        out = a / b
        ctx.save_for_backward(a, b)
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray, NDArray]:
        a, b = ctx.saved_arrays
        da = unbroadcast(grad_out / b, a.shape)
        db = unbroadcast(-grad_out * a / (b * b), b.shape)
        return da, db


class PowFn(Function):
    """
    Elementwise power ``out = a ** b``.

    Backward:

        da = unbroadcast(dz * b * a^(b - 1), a.shape)
        db = unbroadcast(dz * a^b * ln(a), b.shape)   where a > 0, else 0

    Notes
    -----
    At ``a == 0`` with ``0 < b < 1`` the base gradient is infinite and is
    formed by `pole_gradient`.

    ``ln(a)`` is undefined for non-positive bases. When the exponent requires
    a gradient and such bases are present, their contribution is 0 and a
    RuntimeWarning is emitted.
    """

    @staticmethod
    def forward(ctx, a: NDArray, b: NDArray) -> NDArray:
        out = a ** b
        ctx.save_for_backward(a, b, out)
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray, NDArray]:
        a, b, out = ctx.saved_arrays
        needs_a, needs_b = ctx.needs_input_grad or (True, True)

        da = None
        if needs_a:
            singular = a.equal(0.0) * (1.0 - b).greater(0.0)
            base = NDArray.where(singular, 1.0, a)
            finite = grad_out * b * (base ** (b - 1.0))
            pole = singular * b.greater(0.0)
            da = unbroadcast(pole_gradient(grad_out, finite, pole), a.shape)

        db = None
        if needs_b:
            positive = a.greater(0.0)
            if positive.numel() and positive.min().item() == 0.0:
                warnings.warn(
                    "pow: gradient w.r.t. the exponent is undefined for non-positive "
                    "bases; those elements contribute 0",
                    RuntimeWarning,
                    stacklevel=2,
                )
            log_a = NDArray.where(positive, a, 1.0).log()
            local = NDArray.where(positive, out * log_a, 0.0)
            db = unbroadcast(grad_out * local, b.shape)

        return da, db
