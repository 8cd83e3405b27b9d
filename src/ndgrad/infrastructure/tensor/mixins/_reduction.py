"""
Reduction mixin defining differentiable reductions for tensors.

All reductions accept ``axis=None`` (reduce every element to a rank-0 tensor)
or a single, possibly negative, axis, plus ``keepdims``.
"""

from typing import Optional

from ....domain._tensor import ITensor
from ...functions import MaxFn, MeanFn, SumFn, VarFn, apply


class TensorMixinReduction:
    """
    Mixin providing `sum`, `mean`, `max`, `min` and `var`.

    Notes
    -----
    Backward rules:
    - sum:  ``dx = broadcast(dz)``
    - mean: ``dx = broadcast(dz) / n``
    - max/min: ``dx = broadcast(dz) * mask`` (ties split evenly)
    - var:  ``dx = broadcast(dz) * 2 * (x - mean) / n`` (population variance)
    """

    def sum(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor":
        return apply(SumFn, self, axis=axis, keepdims=keepdims)

    def mean(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor":
        return apply(MeanFn, self, axis=axis, keepdims=keepdims)

    def max(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor":
        """
        Maximum over `axis`; the gradient flows only to the winning elements.
        """
        return apply(MaxFn, self, axis=axis, keepdims=keepdims, kind="max")

    def min(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor":
        return apply(MaxFn, self, axis=axis, keepdims=keepdims, kind="min")

    def var(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor":
        """
        Population variance (``ddof=0``) over `axis`.
        """
        return apply(VarFn, self, axis=axis, keepdims=keepdims)
