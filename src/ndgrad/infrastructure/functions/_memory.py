"""
Shape primitives: Reshape, Transpose, Concat and Stack.
"""

from typing import Tuple

from ...domain._function import Function
from ..ndarray import NDArray
from ..ndarray._shape import normalize_axis


class ReshapeFn(Function):
    """
    Reshape; backward ``dx = dz.reshape(x.shape)``.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        ctx.saved_meta["x_shape"] = x.shape
        return x.reshape(ctx.saved_meta["shape"])

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        return (grad_out.reshape(ctx.saved_meta["x_shape"]),)


class TransposeFn(Function):
    """
    Axis swap; its own inverse, so backward swaps the same axes of ``dz``.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        meta = ctx.saved_meta
        meta["axis1"] = normalize_axis("transpose", meta.get("axis1", -2), x.ndim)
        meta["axis2"] = normalize_axis("transpose", meta.get("axis2", -1), x.ndim)
        return x.swap_axes(meta["axis1"], meta["axis2"])

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        meta = ctx.saved_meta
        return (grad_out.swap_axes(meta["axis1"], meta["axis2"]),)


class ConcatFn(Function):
    """
    Concatenation along an existing axis.

    Backward splits ``dz`` back along the axis at the input boundaries, one
    slice per input.
    """

    @staticmethod
    def forward(ctx, *xs: NDArray) -> NDArray:
        out = NDArray.concatenate(xs, axis=ctx.saved_meta.get("axis", 0))
        axis = normalize_axis("concat", ctx.saved_meta.get("axis", 0), xs[0].ndim)
        ctx.saved_meta["axis"] = axis
        ctx.saved_meta["sizes"] = [x.shape[axis] for x in xs]
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray, ...]:
        axis = ctx.saved_meta["axis"]
        grads = []
        start = 0
        for size in ctx.saved_meta["sizes"]:
            grads.append(grad_out.slice_axis(axis, start, start + size))
            start += size
        return tuple(grads)


class StackFn(Function):
    """
    Stacking along a new axis; backward takes each input's slice of ``dz``
    and removes the stacked axis.
    """

    @staticmethod
    def forward(ctx, *xs: NDArray) -> NDArray:
        out = NDArray.stack(xs, axis=ctx.saved_meta.get("axis", 0))
        ctx.saved_meta["axis"] = normalize_axis("stack", ctx.saved_meta.get("axis", 0), xs[0].ndim + 1)
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray, ...]:
        axis = ctx.saved_meta["axis"]
        return tuple(
            grad_out.slice_axis(axis, i, i + 1).squeeze(axis)
            for i in range(grad_out.shape[axis])
        )
