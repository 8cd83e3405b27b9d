"""
Reduction primitives: Sum, Mean, Max/Min and Var.

Every reduction reads ``axis`` (None for a full reduction) and ``keepdims``
from ``ctx.saved_meta``. Backward first restores the reduced axis of the
upstream gradient and broadcasts it back to the input shape.
"""

from typing import Optional, Sequence, Tuple

from ...domain._function import Function
from ..ndarray import NDArray
from ..ndarray._shape import normalize_optional_axis


def expand_reduced(
    grad_out: NDArray, shape: Sequence[int], axis: Optional[int], keepdims: bool
) -> NDArray:
    """
    Broadcast the gradient of a reduction back to the reduced input's shape.

    Parameters
    ----------
    grad_out : NDArray
        Gradient with respect to the reduction result.
    shape : Sequence[int]
        Shape of the reduction input.
    axis : Optional[int]
        Normalized reduced axis, or None for a full reduction.
    keepdims : bool
        Whether the forward reduction kept the reduced axis.

    Returns
    -------
    NDArray
        Gradient of shape `shape`.
    """
    g = grad_out
    if axis is not None and not keepdims:
        g = g.expand_dims(axis)
    return g.broadcast_to(tuple(shape))


def _axis_meta(ctx, x: NDArray) -> Tuple[Optional[int], bool]:
    axis = normalize_optional_axis(ctx.function.__name__, ctx.saved_meta.get("axis"), x.ndim)
    ctx.saved_meta["axis"] = axis
    ctx.saved_meta["x_shape"] = x.shape
    return axis, bool(ctx.saved_meta.get("keepdims", False))


class SumFn(Function):
    """
    Sum reduction; backward ``dx = broadcast(dz, x.shape)``.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        axis, keepdims = _axis_meta(ctx, x)
        return x.sum(axis=axis, keepdims=keepdims)

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        meta = ctx.saved_meta
        return (expand_reduced(grad_out, meta["x_shape"], meta["axis"], meta.get("keepdims", False)),)


class MeanFn(Function):
    """
    Mean reduction; backward ``dx = broadcast(dz, x.shape) / n`` where ``n``
    is the number of elements averaged per output element.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        axis, keepdims = _axis_meta(ctx, x)
        ctx.saved_meta["count"] = x.reduced_size(axis)
        return x.mean(axis=axis, keepdims=keepdims)

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        meta = ctx.saved_meta
        g = expand_reduced(grad_out, meta["x_shape"], meta["axis"], meta.get("keepdims", False))
        return (g / float(meta["count"]),)


class MaxFn(Function):
    """
    Max (or, with ``kind="min"``, Min) reduction.

    Backward routes the upstream gradient to the winning positions:

        dx = broadcast(dz, x.shape) * mask

    where ``mask`` comes from `NDArray.reduction_mask`, so tied winners share
    the gradient evenly.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        axis, keepdims = _axis_meta(ctx, x)
        kind = ctx.saved_meta.setdefault("kind", "max")
        out = x.max(axis=axis, keepdims=keepdims) if kind == "max" else x.min(axis=axis, keepdims=keepdims)
        ctx.save_for_backward(x.reduction_mask(axis, kind=kind))
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        (mask,) = ctx.saved_arrays
        meta = ctx.saved_meta
        g = expand_reduced(grad_out, meta["x_shape"], meta["axis"], meta.get("keepdims", False))
        return (g * mask,)


class VarFn(Function):
    """
    Population variance (``ddof=0``).

    Backward:

        dx = broadcast(dz) * 2 * (x - mean(x, axis)) / n
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        axis, keepdims = _axis_meta(ctx, x)
        ctx.saved_meta["count"] = x.reduced_size(axis)
        ctx.save_for_backward(x - x.mean(axis=axis, keepdims=True))
        return x.var(axis=axis, keepdims=keepdims)

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        (centered,) = ctx.saved_arrays
        meta = ctx.saved_meta
        g = expand_reduced(grad_out, meta["x_shape"], meta["axis"], meta.get("keepdims", False))
        return (g * centered * (2.0 / float(meta["count"])),)
