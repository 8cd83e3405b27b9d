"""
Matrix multiplication primitive.
"""

from typing import Optional, Tuple

from ...domain._function import Function
from ..ndarray import NDArray, broadcast_shapes
from ._unbroadcast import unbroadcast


def _promote(a: NDArray, b: NDArray) -> Tuple[NDArray, NDArray]:
    # 1D operands act as a row (left) or column (right) matrix.
    a2 = a.reshape(1, a.shape[0]) if a.ndim == 1 else a
    b2 = b.reshape(b.shape[0], 1) if b.ndim == 1 else b
    return a2, b2


class MatMulFn(Function):
    """
    Matrix product ``out = a @ b`` (NumPy ``matmul`` semantics).

    Backward, on the operands promoted to at least 2-D:

        da = dz @ swap(b)
        db = swap(a) @ dz

    where ``swap`` exchanges the last two axes. Gradients are un-broadcast
    over batch dimensions and reshaped back to the original operand shapes.
    """

    @staticmethod
    def forward(ctx, a: NDArray, b: NDArray) -> NDArray:
        out = a @ b
        ctx.save_for_backward(a, b)
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[Optional[NDArray], Optional[NDArray]]:
        a, b = ctx.saved_arrays
        needs_a, needs_b = ctx.needs_input_grad or (True, True)

        a2, b2 = _promote(a, b)
        batch = broadcast_shapes("matmul", a2.shape[:-2], b2.shape[:-2])
        out_shape = batch + (a2.shape[-2], b2.shape[-1])
        dz = grad_out.reshape(out_shape)

        da = db = None
        if needs_a:
            da = unbroadcast(dz @ b2.swap_axes(-1, -2), a2.shape).reshape(a.shape)
        if needs_b:
            db = unbroadcast(a2.swap_axes(-1, -2) @ dz, b2.shape).reshape(b.shape)
        return da, db
