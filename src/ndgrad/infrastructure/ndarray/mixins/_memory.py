"""
Shape and layout kernels for NDArray.

This module covers operations that move or regroup elements without doing
arithmetic on them: reshape, axis permutation, broadcasting and
concatenation/splitting. Every result owns a fresh contiguous buffer; in
particular `transpose` physically reorders elements instead of returning a
strided view.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Union

import numpy as np

from ....domain._errors import (
    InvalidArgumentError,
    ShapeMismatchError,
)
from .._shape import (
    broadcast_shapes,
    check_concat_shapes,
    infer_reshape,
    normalize_axis,
    normalize_shape,
    validate_shape,
)


def _shape_args(op: str, args: tuple) -> tuple:
    # reshape(2, 3) and reshape((2, 3)) are both accepted.
    if len(args) == 1 and not hasattr(args[0], "__index__"):
        return normalize_shape(op, args[0])
    return normalize_shape(op, args)


class NDArrayMemoryMixin:
    """
    Mixin providing reshape, transpose, broadcast, concatenate, stack and
    split.
    """

    # ----------------------------
    # Reshaping
    # ----------------------------
    def reshape(self, *new_shape: Union[int, Sequence[int]]):
        """
        Return an array with the same elements and a new shape.

        At most one dimension may be ``-1``; it is inferred from the element
        count.

        Parameters
        ----------
        *new_shape : int or Sequence[int]
            Target shape, given as separate ints or a single sequence.

        Raises
        ------
        InvalidArgumentError
            If more than one dimension is ``-1``.
        ShapeMismatchError
            If the element count would change.
        """
        target = infer_reshape("reshape", self.shape, _shape_args("reshape", new_shape))
        return type(self)._wrap(self._view().reshape(target))

    def flatten(self):
        return self.reshape(-1)

    def expand_dims(self, axis: int):
        """
        Insert a size-1 dimension at `axis` (``-1`` appends).
        """
        ax = normalize_axis("expand_dims", axis, self.ndim + 1)
        shape = self.shape[:ax] + (1,) + self.shape[ax:]
        return self.reshape(shape)

    def squeeze(self, axis: Any = None):
        """
        Remove size-1 dimensions (all of them, or only `axis`).
        """
        if axis is None:
            return self.reshape(tuple(d for d in self.shape if d != 1))
        ax = normalize_axis("squeeze", axis, self.ndim)
        if self.shape[ax] != 1:
            raise InvalidArgumentError(
                "squeeze", f"cannot squeeze axis {axis} of size {self.shape[ax]}"
            )
        return self.reshape(self.shape[:ax] + self.shape[ax + 1 :])

    # ----------------------------
    # Axis permutation
    # ----------------------------
    def permute(self, axes: Sequence[int]):
        """
        Reorder axes so that output axis ``i`` is input axis ``axes[i]``.

        Raises
        ------
        InvalidArgumentError
            If `axes` is not a permutation of ``range(ndim)``.
        """
        perm = tuple(normalize_axis("permute", a, self.ndim) for a in axes)
        if sorted(perm) != list(range(self.ndim)):
            raise InvalidArgumentError(
                "permute", f"{tuple(axes)} is not a permutation of {self.ndim} axes"
            )
        return type(self)._wrap(np.transpose(self._view(), perm))

    def swap_axes(self, axis1: int, axis2: int):
        """
        Exchange two axes, physically reordering the buffer.
        """
        a1 = normalize_axis("swap_axes", axis1, self.ndim)
        a2 = normalize_axis("swap_axes", axis2, self.ndim)
        return type(self)._wrap(np.swapaxes(self._view(), a1, a2))

    def transpose(self, axis1: int = -2, axis2: int = -1):
        """
        Swap two axes (the last two by default).

        Examples
        --------
        >>> NDArray([1, 2, 3, 4], shape=[2, 2]).transpose().to_nested()
        [[1.0, 3.0], [2.0, 4.0]]
        """
        return self.swap_axes(axis1, axis2)

    @property
    def T(self):
        """
        Transpose of the last two axes; rank < 2 arrays are returned as copies.
        """
        if self.ndim < 2:
            return self.copy()
        return self.swap_axes(-2, -1)

    # ----------------------------
    # Broadcasting
    # ----------------------------
    def broadcast_to(self, shape: Union[int, Sequence[int]]):
        """
        Materialise this array broadcast to `shape`.

        Raises
        ------
        ShapeMismatchError
            If this array's shape does not broadcast to exactly `shape`.
        """
        target = validate_shape("broadcast_to", normalize_shape("broadcast_to", shape))
        if (
            len(target) < self.ndim
            or broadcast_shapes("broadcast_to", self.shape, target) != target
        ):
            raise ShapeMismatchError(
                "broadcast_to", self.shape, target, detail="cannot broadcast to target"
            )
        return type(self)._wrap(np.broadcast_to(self._view(), target))

    # ----------------------------
    # Joining / splitting
    # ----------------------------
    @classmethod
    def concatenate(cls, arrays: Sequence[Any], axis: int = 0):
        """
        Join arrays along an existing axis.

        Raises
        ------
        InvalidArgumentError
            If `arrays` is empty.
        ShapeMismatchError
            If ranks differ or any non-axis dimension disagrees.
        """
        arrs = [cls._coerce(a) for a in arrays]
        if not arrs:
            raise InvalidArgumentError("concatenate", "need at least one array")
        ax = normalize_axis("concatenate", axis, arrs[0].ndim)
        check_concat_shapes("concatenate", [a.shape for a in arrs], ax)
        return cls._wrap(np.concatenate([a._view() for a in arrs], axis=ax), fresh=True)

    @classmethod
    def stack(cls, arrays: Sequence[Any], axis: int = 0):
        """
        Join equally shaped arrays along a new axis.
        """
        arrs = [cls._coerce(a) for a in arrays]
        if not arrs:
            raise InvalidArgumentError("stack", "need at least one array")
        first = arrs[0].shape
        for a in arrs[1:]:
            if a.shape != first:
                raise ShapeMismatchError("stack", first, a.shape, detail="all shapes must match")
        ax = normalize_axis("stack", axis, len(first) + 1)
        return cls._wrap(np.stack([a._view() for a in arrs], axis=ax), fresh=True)

    def split_points(self, sections: Union[int, Sequence[int]], axis: int = 0) -> List[int]:
        """
        Resolve `sections` into explicit split boundaries along `axis`.

        Parameters
        ----------
        sections : int or Sequence[int]
            Either the number of equal parts, or increasing split indices.
        axis : int
            Axis to split.

        Returns
        -------
        list[int]
            Boundaries ``[0, i1, ..., size]`` delimiting each part.

        Raises
        ------
        ShapeMismatchError
            If an equal split does not divide the axis evenly.
        InvalidArgumentError
            If the section count is not positive or the indices are not
            increasing within ``[0, size]``.
        """
        ax = normalize_axis("split", axis, self.ndim)
        size = self.shape[ax]
        if isinstance(sections, int):
            if sections <= 0:
                raise InvalidArgumentError("split", f"sections must be positive, got {sections}")
            if size % sections != 0:
                raise ShapeMismatchError(
                    "split",
                    self.shape,
                    detail=f"axis {ax} of size {size} does not divide into {sections} sections",
                )
            step = size // sections
            return [i * step for i in range(sections + 1)]

        points = [0] + [int(i) for i in sections] + [size]
        for lo, hi in zip(points, points[1:]):
            if lo > hi:
                raise InvalidArgumentError(
                    "split", f"split indices must be increasing within [0, {size}], got {list(sections)}"
                )
        return points

    def split(self, sections: Union[int, Sequence[int]], axis: int = 0) -> List[Any]:
        """
        Split into consecutive pieces along `axis`.

        See `split_points` for how `sections` is interpreted.
        """
        ax = normalize_axis("split", axis, self.ndim)
        points = self.split_points(sections, ax)
        return [self.slice_axis(ax, lo, hi) for lo, hi in zip(points, points[1:])]
