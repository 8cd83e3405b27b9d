"""
Reduction kernels for NDArray.

Every reduction takes an optional `axis` (``None`` reduces all elements to a
rank-0 array) and a `keepdims` flag. Negative axes count from the end; an axis
outside ``[-rank, rank)`` raises `IndexOutOfRangeError`.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from ....domain._errors import InvalidArgumentError
from .._shape import normalize_optional_axis


class NDArrayReductionMixin:
    """
    Mixin providing `sum`, `mean`, `max`, `min`, `var`, `prod`, `argmax`,
    `argmin` and the gradient-routing helper `reduction_mask`.
    """

    def _reduce(self, op: str, kernel: Callable, axis: Optional[int], keepdims: bool):
        ax = normalize_optional_axis(op, axis, self.ndim)
        return type(self)._wrap(kernel(self._view(), axis=ax, keepdims=keepdims), fresh=True)

    def _require_nonempty(self, op: str, axis: Optional[int]) -> None:
        if self.numel() == 0:
            raise InvalidArgumentError(op, "reduction over an empty array")
        if axis is not None and self.shape[axis] == 0:
            raise InvalidArgumentError(op, f"reduction over empty axis {axis}")

    def reduced_size(self, axis: Optional[int] = None) -> int:
        """
        Return how many elements each output element of a reduction covers.

        Parameters
        ----------
        axis : Optional[int]
            Reduced axis, or None for a full reduction.

        Returns
        -------
        int
            ``numel()`` for a full reduction, else ``shape[axis]``.
        """
        ax = normalize_optional_axis("reduced_size", axis, self.ndim)
        return self.numel() if ax is None else self.shape[ax]

    def sum(self, axis: Optional[int] = None, keepdims: bool = False):
        """
        Sum of elements over `axis` (all elements when None).

        Examples
        --------
        >>> NDArray([1, 2, 3, 4], shape=[2, 2]).sum(axis=0).to_nested()
        [4.0, 6.0]
        """
        return self._reduce("sum", np.sum, axis, keepdims)

    def mean(self, axis: Optional[int] = None, keepdims: bool = False):
        ax = normalize_optional_axis("mean", axis, self.ndim)
        self._require_nonempty("mean", ax)
        return self._reduce("mean", np.mean, ax, keepdims)

    def max(self, axis: Optional[int] = None, keepdims: bool = False):
        ax = normalize_optional_axis("max", axis, self.ndim)
        self._require_nonempty("max", ax)
        return self._reduce("max", np.max, ax, keepdims)

    def min(self, axis: Optional[int] = None, keepdims: bool = False):
        ax = normalize_optional_axis("min", axis, self.ndim)
        self._require_nonempty("min", ax)
        return self._reduce("min", np.min, ax, keepdims)

    def var(self, axis: Optional[int] = None, keepdims: bool = False):
        """
        Population variance (``ddof=0``) over `axis`.
        """
        ax = normalize_optional_axis("var", axis, self.ndim)
        self._require_nonempty("var", ax)
        return self._reduce("var", np.var, ax, keepdims)

    def prod(self, axis: Optional[int] = None, keepdims: bool = False):
        return self._reduce("prod", np.prod, axis, keepdims)

    def argmax(self, axis: Optional[int] = None):
        """
        Positions of the maxima along `axis`, as an array of integral floats.

        With ``axis=None`` the position refers to the flattened array.
        """
        ax = normalize_optional_axis("argmax", axis, self.ndim)
        self._require_nonempty("argmax", ax)
        return type(self)._wrap(np.argmax(self._view(), axis=ax))

    def argmin(self, axis: Optional[int] = None):
        ax = normalize_optional_axis("argmin", axis, self.ndim)
        self._require_nonempty("argmin", ax)
        return type(self)._wrap(np.argmin(self._view(), axis=ax))

    def reduction_mask(self, axis: Optional[int] = None, kind: str = "max"):
        """
        Build the gradient-routing mask of a max/min reduction.

        The mask has this array's shape and holds ``1 / k`` at each of the
        ``k`` positions that attain the extremum of their reduction group, and
        0 elsewhere. Ties therefore split the upstream gradient evenly.

        Parameters
        ----------
        axis : Optional[int]
            Reduced axis, or None for a full reduction.
        kind : str
            Either ``"max"`` or ``"min"``.

        Returns
        -------
        NDArray
            Mask of shape ``self.shape`` whose entries in each group sum to 1.
        """
        if kind not in ("max", "min"):
            raise InvalidArgumentError("reduction_mask", f"kind must be 'max' or 'min', got {kind!r}")
        ax = normalize_optional_axis("reduction_mask", axis, self.ndim)
        self._require_nonempty("reduction_mask", ax)
        v = self._view()
        ext = v.max(axis=ax, keepdims=True) if kind == "max" else v.min(axis=ax, keepdims=True)
        hit = (v == ext).astype(np.float32)
        count = hit.sum(axis=ax, keepdims=True)
        return type(self)._wrap(hit / count, fresh=True)
