"""
Indexing mixin: row reads, gather/select, masked fill and the cross-entropy
loss entry point.
"""

from typing import Any

from ....domain._tensor import ITensor
from ...functions import GatherFn, IndexRowFn, MaskedFillFn, SelectFn, apply


class TensorMixinIndexing:
    """
    Mixin providing differentiable indexing operations.

    Index arguments may be ints, sequences, NumPy integer arrays or NDArrays
    of integral floats. They are constants of the graph and never receive
    gradients.
    """

    def index_row(self: ITensor, i: int) -> "ITensor":
        """
        Row `i` of the leading axis; the gradient is written back into that row.
        """
        return apply(IndexRowFn, self, index=i)

    def __getitem__(self: ITensor, i: int) -> "ITensor":
        return self.index_row(i)

    def gather(self: ITensor, indices: Any) -> "ITensor":
        """
        Embedding lookup: rows of the leading axis selected by `indices`.

        The result has shape ``indices.shape + self.shape[1:]``. Backward
        scatter-adds, so rows gathered more than once accumulate gradient.
        """
        return apply(GatherFn, self, indices=indices)

    def select(self: ITensor, *coords: Any) -> "ITensor":
        """
        Element gather by one coordinate array per axis.
        """
        return apply(SelectFn, self, coords=coords)

    def masked_fill(self: ITensor, condition: Any, value: float) -> "ITensor":
        """
        Keep elements where `condition` is non-zero; replace the others with
        `value`.

        Parameters
        ----------
        condition : Any
            Mask broadcastable to this tensor's shape.
        value : float
            Constant written where the mask is zero.

        Returns
        -------
        Tensor
            Tensor of this tensor's shape. Gradient flows only through the
            kept positions.
        """
        if hasattr(condition, "requires_grad"):
            condition = condition.data
        return apply(MaskedFillFn, self, condition=condition, value=value)

    def cross_entropy(self: ITensor, labels: Any) -> "ITensor":
        """
        Mean softmax cross-entropy of these ``(N, C)`` logits against
        `labels`. See `ndgrad.infrastructure._losses.cross_entropy`.
        """
        from ..._losses import cross_entropy

        return cross_entropy(self, labels)
