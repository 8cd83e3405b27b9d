"""
Memory/shape mixin: reshape, transpose, concatenation, stacking and
splitting of tensors.
"""

from typing import List, Sequence, Union

from ....domain._errors import InvalidArgumentError
from ....domain._tensor import ITensor
from ...functions import ConcatFn, ReshapeFn, SliceAxisFn, StackFn, TransposeFn, apply
from ...ndarray._shape import normalize_axis, normalize_shape


class TensorMixinMemory:
    """
    Mixin providing differentiable shape operations.
    """

    def reshape(self: ITensor, *shape: Union[int, Sequence[int]]) -> "ITensor":
        """
        Return a tensor with the same elements and a new shape.

        Accepts ``reshape(2, 3)`` or ``reshape((2, 3))``; at most one
        dimension may be ``-1``.
        """
        if len(shape) == 1 and not hasattr(shape[0], "__index__"):
            target = normalize_shape("reshape", shape[0])
        else:
            target = normalize_shape("reshape", shape)
        return apply(ReshapeFn, self, shape=target)

    def flatten(self: ITensor) -> "ITensor":
        return self.reshape(-1)

    def transpose(self: ITensor, axis1: int = -2, axis2: int = -1) -> "ITensor":
        """
        Swap two axes (the last two by default).
        """
        return apply(TransposeFn, self, axis1=axis1, axis2=axis2)

    @property
    def T(self: ITensor) -> "ITensor":
        """
        Transpose of the last two axes; rank < 2 tensors are returned as is.
        """
        if self.ndim < 2:
            return self
        return self.transpose(-2, -1)

    @classmethod
    def concat(cls, tensors: Sequence[ITensor], axis: int = 0) -> "ITensor":
        """
        Concatenate tensors along an existing axis.

        Raises
        ------
        InvalidArgumentError
            If `tensors` is empty.
        ShapeMismatchError
            If non-axis dimensions disagree.
        """
        ts = [cls._as_tensor(t) for t in tensors]
        if not ts:
            raise InvalidArgumentError("concat", "need at least one tensor")
        return apply(ConcatFn, *ts, axis=axis)

    @classmethod
    def stack(cls, tensors: Sequence[ITensor], axis: int = 0) -> "ITensor":
        """
        Stack equally shaped tensors along a new axis.
        """
        ts = [cls._as_tensor(t) for t in tensors]
        if not ts:
            raise InvalidArgumentError("stack", "need at least one tensor")
        return apply(StackFn, *ts, axis=axis)

    def slice_axis(self: ITensor, axis: int, start: int, stop: int) -> "ITensor":
        return apply(SliceAxisFn, self, axis=axis, start=start, stop=stop)

    def split(self: ITensor, sections: Union[int, Sequence[int]], axis: int = 0) -> List["ITensor"]:
        """
        Split into consecutive pieces along `axis`.

        Parameters
        ----------
        sections : int or Sequence[int]
            Number of equal parts (must divide the axis evenly), or increasing
            split indices.
        axis : int
            Axis to split.

        Returns
        -------
        list[Tensor]
            One differentiable slice per piece.
        """
        ax = normalize_axis("split", axis, self.ndim)
        points = self.data.split_points(sections, ax)
        return [self.slice_axis(ax, lo, hi) for lo, hi in zip(points, points[1:])]
