"""
Indexing, gather and scatter kernels for NDArray.

Index inputs may be Python ints, sequences, NumPy integer arrays or NDArrays
holding integral floats (labels and context windows are usually produced as
float NDArrays). Negative indices count from the end of their axis; anything
outside ``[-size, size)`` raises `IndexOutOfRangeError`.

`set_index` and `scatter_add_` are the only mutating operations on NDArray.
They exist to build gradient buffers for the gather-style operations.
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple, Union

import numpy as np

from ....domain._errors import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    ShapeMismatchError,
)
from .._shape import broadcast_shapes, normalize_axis

IndexLike = Union[int, Sequence[int], np.ndarray, Any]


def as_index_array(op: str, indices: IndexLike, bound: int) -> np.ndarray:
    """
    Convert `indices` into a NumPy ``intp`` array checked against `bound`.

    Parameters
    ----------
    op : str
        Operation name used in error messages.
    indices : IndexLike
        Index values of any supported kind.
    bound : int
        Size of the indexed axis.

    Returns
    -------
    numpy.ndarray
        Non-negative integer indices of the same shape as `indices`.

    Raises
    ------
    InvalidArgumentError
        If an index value is not integral.
    IndexOutOfRangeError
        If an index lies outside ``[-bound, bound)``.
    """
    if hasattr(indices, "_view"):
        raw = indices._view()
    elif hasattr(indices, "data") and hasattr(indices.data, "_view"):
        raw = indices.data._view()
    else:
        raw = np.asarray(indices)

    if raw.dtype.kind == "b":
        raise InvalidArgumentError(op, "boolean indices are not supported")
    if raw.dtype.kind == "f":
        if not np.all(np.isfinite(raw)) or np.any(raw != np.round(raw)):
            raise InvalidArgumentError(op, "indices must be integral values")
    elif raw.dtype.kind not in "iu":
        raise InvalidArgumentError(op, f"unsupported index dtype {raw.dtype}")

    idx = raw.astype(np.intp)
    if idx.size:
        lo, hi = int(idx.min()), int(idx.max())
        if lo < -bound:
            raise IndexOutOfRangeError(op, lo, bound, kind="index")
        if hi >= bound:
            raise IndexOutOfRangeError(op, hi, bound, kind="index")
    return np.where(idx < 0, idx + bound, idx)


def _scalar_or_array(idx: np.ndarray) -> Union[int, np.ndarray]:
    # Rank-0 indices select like a plain int (no fancy-index result axis).
    return int(idx) if idx.ndim == 0 else idx


class NDArrayIndexingMixin:
    """
    Mixin providing row indexing, gather/select, axis slicing and the
    in-place scatter primitives.
    """

    def _resolve_index(self, op: str, index: Any) -> Union[np.ndarray, Tuple[np.ndarray, ...]]:
        """
        Resolve a row index (single index-like) or a coordinate tuple
        (one index-like per leading axis) into NumPy fancy-index form.
        """
        if self.ndim == 0:
            raise InvalidArgumentError(op, "cannot index a rank-0 array")
        if isinstance(index, tuple):
            if len(index) > self.ndim:
                raise InvalidArgumentError(
                    op, f"{len(index)} coordinate arrays for a rank-{self.ndim} array"
                )
            coords = tuple(
                _scalar_or_array(as_index_array(op, c, self.shape[axis]))
                for axis, c in enumerate(index)
            )
            shape = ()
            for c in coords:
                shape = broadcast_shapes(op, shape, np.shape(c))
            return coords
        return _scalar_or_array(as_index_array(op, index, self.shape[0]))

    # ----------------------------
    # Reads
    # ----------------------------
    def index_row(self, i: int):
        """
        Return row `i` along the leading axis as a new array of rank ``ndim - 1``.

        Raises
        ------
        InvalidArgumentError
            If the array is rank 0.
        IndexOutOfRangeError
            If `i` lies outside ``[-shape[0], shape[0])``.
        """
        if self.ndim == 0:
            raise InvalidArgumentError("index_row", "cannot index a rank-0 array")
        if isinstance(i, bool) or not hasattr(i, "__index__"):
            raise TypeError(f"index_row: index must be an int, got {type(i).__name__}")
        i = i.__index__()
        n = self.shape[0]
        if i < -n or i >= n:
            raise IndexOutOfRangeError("index_row", i, n, kind="index")
        return type(self)._wrap(self._view()[i])

    def gather(self, indices: IndexLike):
        """
        Gather rows of the leading axis (embedding lookup).

        Parameters
        ----------
        indices : IndexLike
            Row indices of any shape.

        Returns
        -------
        NDArray
            Array of shape ``indices.shape + self.shape[1:]``.
        """
        idx = self._resolve_index("gather", indices)
        if isinstance(idx, tuple):
            raise InvalidArgumentError("gather", "use select() for coordinate indexing")
        return type(self)._wrap(self._view()[idx])

    def select(self, *coords: IndexLike):
        """
        Gather individual elements by coordinate arrays, one per axis.

        ``a.select(rows, cols)[k] == a[rows[k], cols[k]]``. The coordinate
        arrays broadcast together and the result has their broadcast shape.

        Raises
        ------
        InvalidArgumentError
            If the number of coordinate arrays differs from ``ndim``.
        """
        if len(coords) != self.ndim:
            raise InvalidArgumentError(
                "select", f"expected {self.ndim} coordinate arrays, got {len(coords)}"
            )
        idx = self._resolve_index("select", tuple(coords))
        return type(self)._wrap(self._view()[idx])

    def slice_axis(self, axis: int, start: int, stop: int):
        """
        Return elements ``start:stop`` along `axis`.

        Raises
        ------
        IndexOutOfRangeError
            If the range is not contained in ``[0, shape[axis]]`` or
            ``start > stop``.
        """
        ax = normalize_axis("slice_axis", axis, self.ndim)
        size = self.shape[ax]
        if not 0 <= start <= size:
            raise IndexOutOfRangeError("slice_axis", start, size + 1, kind="index")
        if not start <= stop <= size:
            raise IndexOutOfRangeError("slice_axis", stop, size + 1, kind="index")
        key = [slice(None)] * self.ndim
        key[ax] = slice(start, stop)
        return type(self)._wrap(self._view()[tuple(key)])

    # ----------------------------
    # In-place writes
    # ----------------------------
    def _scatter_values(self, op: str, idx: Any, values: Any) -> np.ndarray:
        target_shape = self._view()[idx].shape
        vals = self._coerce(values)
        if broadcast_shapes(op, vals.shape, target_shape) != tuple(target_shape):
            raise ShapeMismatchError(
                op, vals.shape, tuple(target_shape), detail="values do not fit the indexed region"
            )
        return vals._view()

    def set_index(self, indices: IndexLike, values: Any) -> None:
        """
        Assign `values` at `indices` in place.

        `indices` is either a row index array (rows of the leading axis) or a
        tuple of coordinate arrays. With repeated indices the last write wins.
        """
        idx = self._resolve_index("set_index", indices)
        self._view()[idx] = self._scatter_values("set_index", idx, values)

    def scatter_add_(self, indices: IndexLike, values: Any) -> None:
        """
        Add `values` at `indices` in place, accumulating repeated indices.

        This is the adjoint of `gather` / `select`: scattering a gradient of
        the gathered shape back yields the gradient of the source array.
        """
        idx = self._resolve_index("scatter_add_", indices)
        np.add.at(self._view(), idx, self._scatter_values("scatter_add_", idx, values))
