"""
Indexing primitives: MaskedFill, IndexRow, SliceAxis, Gather and Select.

Each gather-style backward starts from zeros of the source shape and
scatter-adds the upstream gradient at the positions that were read, so
repeated indices accumulate.
"""

from typing import Tuple

from ...domain._errors import ShapeMismatchError
from ...domain._function import Function
from ..ndarray import NDArray, broadcast_shapes
from ..ndarray._shape import normalize_axis
from ..ndarray.mixins import as_index_array


class MaskedFillFn(Function):
    """
    Keep elements where ``condition`` is non-zero and replace the rest with a
    constant ``value``.

    Backward:

        dx = where(condition, dz, 0)
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        cond = NDArray._coerce(ctx.saved_meta["condition"])
        if broadcast_shapes("masked_fill", x.shape, cond.shape) != x.shape:
            raise ShapeMismatchError(
                "masked_fill", x.shape, cond.shape, detail="condition must broadcast to the input"
            )
        ctx.saved_meta["condition"] = cond
        return NDArray.where(cond, x, float(ctx.saved_meta["value"]))

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        return (NDArray.where(ctx.saved_meta["condition"], grad_out, 0.0),)


class IndexRowFn(Function):
    """
    Read one row of the leading axis (``t[i]``).
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        out = x.index_row(ctx.saved_meta["index"])
        ctx.saved_meta["x_shape"] = x.shape
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        g = NDArray.zeros(ctx.saved_meta["x_shape"])
        g.scatter_add_(ctx.saved_meta["index"], grad_out)
        return (g,)


class SliceAxisFn(Function):
    """
    Read the range ``start:stop`` along one axis.

    Backward pads ``dz`` with zeros on both sides of the range.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        meta = ctx.saved_meta
        out = x.slice_axis(meta["axis"], meta["start"], meta["stop"])
        meta["axis"] = normalize_axis("slice_axis", meta["axis"], x.ndim)
        meta["x_shape"] = x.shape
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        meta = ctx.saved_meta
        axis, shape = meta["axis"], meta["x_shape"]
        before = list(shape)
        before[axis] = meta["start"]
        after = list(shape)
        after[axis] = shape[axis] - meta["stop"]
        return (
            NDArray.concatenate(
                [NDArray.zeros(before), grad_out, NDArray.zeros(after)], axis=axis
            ),
        )


class GatherFn(Function):
    """
    Row gather along the leading axis (embedding lookup).

    Backward scatter-adds ``dz`` into zeros of the source shape; rows that
    were gathered several times receive the sum of their gradients.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        out = x.gather(ctx.saved_meta["indices"])
        ctx.saved_meta["indices"] = as_index_array("gather", ctx.saved_meta["indices"], x.shape[0])
        ctx.saved_meta["x_shape"] = x.shape
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        g = NDArray.zeros(ctx.saved_meta["x_shape"])
        g.scatter_add_(ctx.saved_meta["indices"], grad_out)
        return (g,)


class SelectFn(Function):
    """
    Element gather by coordinate arrays, one per axis.

    Backward scatter-adds ``dz`` at the selected coordinates.
    """

    @staticmethod
    def forward(ctx, x: NDArray) -> NDArray:
        coords = ctx.saved_meta["coords"]
        out = x.select(*coords)
        ctx.saved_meta["coords"] = tuple(
            as_index_array("select", c, x.shape[axis]) for axis, c in enumerate(coords)
        )
        ctx.saved_meta["x_shape"] = x.shape
        return out

    @staticmethod
    def backward(ctx, grad_out: NDArray) -> Tuple[NDArray]:
        g = NDArray.zeros(ctx.saved_meta["x_shape"])
        g.scatter_add_(ctx.saved_meta["coords"], grad_out)
        return (g,)
