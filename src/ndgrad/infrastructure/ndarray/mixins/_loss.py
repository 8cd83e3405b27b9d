"""
Numerically stable softmax and cross-entropy kernels for NDArray.

These are forward-only conveniences on raw arrays (evaluation, tests). The
differentiable cross-entropy used for training is composed from Tensor
primitives in `ndgrad.infrastructure._losses`.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ....domain._errors import InvalidArgumentError, ShapeMismatchError
from .._shape import normalize_axis
from ._indexing import as_index_array


class NDArrayLossMixin:
    """
    Mixin providing `softmax`, `log_softmax` and `cross_entropy`.
    """

    def log_softmax(self, axis: int = -1):
        ax = normalize_axis("log_softmax", axis, self.ndim)
        v = self._view()
        shifted = v - v.max(axis=ax, keepdims=True)
        lse = np.log(np.exp(shifted).sum(axis=ax, keepdims=True))
        return type(self)._wrap(shifted - lse, fresh=True)

    def softmax(self, axis: int = -1):
        """
        Softmax along `axis`, computed after subtracting the per-group max.
        """
        ax = normalize_axis("softmax", axis, self.ndim)
        v = self._view()
        e = np.exp(v - v.max(axis=ax, keepdims=True))
        return type(self)._wrap(e / e.sum(axis=ax, keepdims=True), fresh=True)

    def cross_entropy(self, labels: Any):
        """
        Mean negative log-likelihood of `labels` under row-wise softmax.

        Parameters
        ----------
        labels : Any
            One integral class index per row (NDArray, sequence or NumPy
            array) of length ``N``.

        Returns
        -------
        NDArray
            Rank-0 array holding the batch-averaged loss.

        Raises
        ------
        InvalidArgumentError
            If the logits are not 2-D ``(N, C)`` or the batch is empty.
        ShapeMismatchError
            If the label count differs from ``N``.
        IndexOutOfRangeError
            If a label lies outside ``[0, C)``.
        """
        if self.ndim != 2:
            raise InvalidArgumentError(
                "cross_entropy", f"logits must be 2-D (N, C), got shape {self.shape}"
            )
        n, c = self.shape
        if n == 0:
            raise InvalidArgumentError("cross_entropy", "empty batch")
        y = as_index_array("cross_entropy", labels, c).reshape(-1)
        if y.shape[0] != n:
            raise ShapeMismatchError(
                "cross_entropy", self.shape, (y.shape[0],), detail="one label per row required"
            )
        logp = self.log_softmax(axis=1)._view()
        nll = -logp[np.arange(n), y]
        return type(self)._wrap(np.asarray(nll.mean()), fresh=True)
