"""
Shape arithmetic shared by the NDArray kernels.

The helpers in this module are pure functions over shape tuples. They own all
shape validation performed by `NDArray`, so that the NumPy kernels in the
mixins only ever run on operands whose shapes are already known to be
compatible, and every shape problem surfaces as an ndgrad error rather than a
backend-specific one.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ...domain._errors import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    ShapeMismatchError,
)


def numel(shape: Sequence[int]) -> int:
    """
    Return the number of elements described by `shape` (1 for a scalar).
    """
    n = 1
    for d in shape:
        n *= int(d)
    return n


def row_major_strides(shape: Sequence[int]) -> tuple[int, ...]:
    """
    Compute row-major strides, in elements, for `shape`.

    Parameters
    ----------
    shape : Sequence[int]
        Array shape.

    Returns
    -------
    tuple[int, ...]
        ``strides[i]`` is the flat distance between neighbours along axis i.
    """
    strides = [0] * len(shape)
    stride = 1
    for i in range(len(shape) - 1, -1, -1):
        strides[i] = stride
        stride *= int(shape[i])
    return tuple(strides)


def normalize_shape(op: str, shape_like: Any) -> tuple[int, ...]:
    """
    Coerce an int or an int sequence into a shape tuple.

    Raises
    ------
    TypeError
        If `shape_like` is not an int or a sequence of ints.
    """
    if isinstance(shape_like, int):
        return (int(shape_like),)
    try:
        dims = tuple(shape_like)
    except TypeError:
        raise TypeError(f"{op}: shape must be an int or a sequence of ints, got {shape_like!r}")
    out = []
    for d in dims:
        if isinstance(d, bool) or not hasattr(d, "__index__"):
            raise TypeError(f"{op}: shape entries must be ints, got {d!r}")
        out.append(d.__index__())
    return tuple(out)


def validate_shape(op: str, shape: Sequence[int]) -> tuple[int, ...]:
    """
    Validate that every dimension of `shape` is non-negative.
    """
    for d in shape:
        if d < 0:
            raise InvalidArgumentError(op, f"negative dimension in shape {tuple(shape)}")
    return tuple(shape)


def broadcast_shapes(op: str, a: Sequence[int], b: Sequence[int]) -> tuple[int, ...]:
    """
    Compute the NumPy-style broadcast of two shapes.

    Shapes are aligned from the trailing dimension; a dimension of size 1
    stretches to match the other operand.

    Raises
    ------
    ShapeMismatchError
        If a pair of aligned dimensions differ and neither is 1.
    """
    ndim = max(len(a), len(b))
    pa = (1,) * (ndim - len(a)) + tuple(a)
    pb = (1,) * (ndim - len(b)) + tuple(b)

    out = []
    for i, (da, db) in enumerate(zip(pa, pb)):
        if da == db or db == 1:
            out.append(da)
        elif da == 1:
            out.append(db)
        else:
            raise ShapeMismatchError(
                op, tuple(a), tuple(b), detail=f"cannot broadcast axis {i}: {da} vs {db}"
            )
    return tuple(out)


def normalize_axis(op: str, axis: Any, ndim: int) -> int:
    """
    Normalize a possibly-negative axis into ``[0, ndim)``.

    Raises
    ------
    TypeError
        If `axis` is not an int.
    IndexOutOfRangeError
        If `axis` lies outside ``[-ndim, ndim)``.
    """
    if isinstance(axis, bool) or not hasattr(axis, "__index__"):
        raise TypeError(f"{op}: axis must be an int, got {type(axis).__name__}")
    axis = axis.__index__()
    if axis < -ndim or axis >= ndim:
        raise IndexOutOfRangeError(op, axis, ndim)
    return axis + ndim if axis < 0 else axis


def normalize_optional_axis(op: str, axis: Optional[int], ndim: int) -> Optional[int]:
    """
    Like `normalize_axis`, but passes ``None`` (reduce everything) through.
    """
    if axis is None:
        return None
    return normalize_axis(op, axis, ndim)


def infer_reshape(op: str, src_shape: Sequence[int], new_shape: Sequence[int]) -> tuple[int, ...]:
    """
    Resolve a reshape target, inferring at most one ``-1`` dimension.

    Parameters
    ----------
    op : str
        Operation name used in error messages.
    src_shape : Sequence[int]
        Current shape.
    new_shape : Sequence[int]
        Requested shape, possibly containing a single ``-1``.

    Returns
    -------
    tuple[int, ...]
        Fully specified target shape.

    Raises
    ------
    InvalidArgumentError
        If more than one dimension is ``-1`` or a dimension is below ``-1``.
    ShapeMismatchError
        If the element count cannot be preserved.
    """
    total = numel(src_shape)
    dims = list(new_shape)

    unknown = [i for i, d in enumerate(dims) if d == -1]
    if len(unknown) > 1:
        raise InvalidArgumentError(op, f"only one dimension can be -1, got {tuple(new_shape)}")
    if any(d < -1 for d in dims):
        raise InvalidArgumentError(op, f"invalid dimension in {tuple(new_shape)}")

    if unknown:
        known = numel(d for i, d in enumerate(dims) if i != unknown[0])
        if known == 0 or total % known != 0:
            raise ShapeMismatchError(
                op, tuple(src_shape), tuple(new_shape), detail="cannot infer -1 dimension"
            )
        dims[unknown[0]] = total // known

    if numel(dims) != total:
        raise ShapeMismatchError(
            op, tuple(src_shape), tuple(new_shape), detail="total size must be preserved"
        )
    return tuple(dims)


def check_concat_shapes(op: str, shapes: Sequence[Sequence[int]], axis: int) -> None:
    """
    Validate that all `shapes` agree on every dimension except `axis`.

    Raises
    ------
    ShapeMismatchError
        If ranks differ or any non-axis dimension disagrees.
    """
    first = tuple(shapes[0])
    for s in shapes[1:]:
        s = tuple(s)
        if len(s) != len(first):
            raise ShapeMismatchError(op, first, s, detail="ranks differ")
        for d, (x, y) in enumerate(zip(first, s)):
            if d != axis and x != y:
                raise ShapeMismatchError(
                    op, first, s, detail=f"dimension {d} differs outside axis {axis}"
                )
