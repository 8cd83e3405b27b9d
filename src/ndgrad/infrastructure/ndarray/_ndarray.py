"""
Concrete NDArray implementation (NumPy flat-buffer backend).

This module provides `NDArray`, the dense N-dimensional value type at the
bottom of ndgrad. An `NDArray` is a contiguous 1-D `numpy.float32` buffer plus
a shape tuple; strides are derived from the shape on demand and never stored.

Design notes
------------
- NDArray operations are value-producing: every kernel returns a new array.
  The only mutating primitives are the explicit scatter-writes
  (`set_index`, `scatter_add_`) used to build gradient buffers in place.
- The flat buffer handed out through `data` is a read-only view, so callers
  cannot desynchronise data and shape by accident.
- Families of operations live in mixins (`mixins/`); this module holds
  construction, conversion and the private helpers every mixin relies on
  (`_wrap`, `_view`, `_coerce`).
"""

from __future__ import annotations

import numbers
from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np

from ...domain._errors import InvalidArgumentError, ShapeMismatchError
from ._shape import normalize_shape, numel, row_major_strides, validate_shape
from .mixins import (
    NDArrayArithmeticMixin,
    NDArrayIndexingMixin,
    NDArrayLinalgMixin,
    NDArrayLossMixin,
    NDArrayMemoryMixin,
    NDArrayReductionMixin,
    NDArrayUnaryMixin,
)

DTYPE = np.float32
"""Element type of every NDArray buffer."""

Number = Union[int, float]


def _parse_nested(obj: Any, depth: int, shape: list, flat: list, leaf_depth: list) -> None:
    """
    Recursively flatten nested sequences, inferring the shape by depth.

    Raises
    ------
    ShapeMismatchError
        If sibling sequences at the same depth disagree in length, or if
        numbers and sequences are mixed at one depth.
    TypeError
        If a leaf is not a real number.
    """
    if isinstance(obj, (list, tuple, np.ndarray)):
        n = len(obj)
        if leaf_depth[0] is not None and depth >= leaf_depth[0]:
            raise ShapeMismatchError(
                "NDArray", tuple(shape), detail=f"sequence found at leaf depth {depth}"
            )
        if len(shape) <= depth:
            shape.append(n)
        elif shape[depth] != n:
            raise ShapeMismatchError(
                "NDArray",
                tuple(shape),
                detail=f"ragged nested data: length {n} vs {shape[depth]} at depth {depth}",
            )
        for item in obj:
            _parse_nested(item, depth + 1, shape, flat, leaf_depth)
        return

    if not isinstance(obj, numbers.Real):
        raise TypeError(f"NDArray: unsupported element {obj!r} of type {type(obj).__name__}")

    if leaf_depth[0] is None:
        if depth < len(shape):
            raise ShapeMismatchError(
                "NDArray", tuple(shape), detail=f"number found at depth {depth}"
            )
        leaf_depth[0] = depth
    elif leaf_depth[0] != depth:
        raise ShapeMismatchError(
            "NDArray", tuple(shape), detail=f"number found at depth {depth}"
        )
    flat.append(float(obj))


class NDArray(
    NDArrayArithmeticMixin,
    NDArrayUnaryMixin,
    NDArrayReductionMixin,
    NDArrayLinalgMixin,
    NDArrayMemoryMixin,
    NDArrayIndexingMixin,
    NDArrayLossMixin,
):
    """
    Dense row-major N-dimensional float32 array.

    Parameters
    ----------
    data : Any
        Either nested numeric data (lists/tuples, a bare number for a rank-0
        array, or a NumPy array), or, when `shape` is given, a flat sequence of
        ``product(shape)`` numbers.
    shape : Optional[Sequence[int]], optional
        Target shape for flat `data`. When omitted, the shape is inferred from
        the nesting of `data`.

    Raises
    ------
    ShapeMismatchError
        If ``product(shape) != len(data)`` or nested data is ragged.

    Notes
    -----
    - ``_buffer`` is the private, contiguous 1-D float32 storage.
    - ``_shape`` is the logical shape; ``numel(_shape) == _buffer.size`` holds
      for every instance.
    """

    __array_priority__ = 100

    def __init__(self, data: Any, shape: Optional[Sequence[int]] = None) -> None:
        if shape is not None:
            target = validate_shape("NDArray", normalize_shape("NDArray", shape))
            flat = np.array(
                data.data if isinstance(data, NDArray) else data, dtype=DTYPE
            ).reshape(-1)
            if flat.size != numel(target):
                raise ShapeMismatchError(
                    "NDArray",
                    (flat.size,),
                    target,
                    detail=f"{flat.size} values cannot fill shape {target}",
                )
            self._buffer = flat
            self._shape = target
            return

        if isinstance(data, NDArray):
            self._buffer = data._buffer.copy()
            self._shape = data._shape
            return

        if isinstance(data, np.ndarray) and data.dtype != object:
            arr = np.array(data, dtype=DTYPE)
            self._buffer = arr.reshape(-1)
            self._shape = tuple(int(d) for d in arr.shape)
            return

        dims: list = []
        flat_list: list = []
        _parse_nested(data, 0, dims, flat_list, [None])
        self._buffer = np.array(flat_list, dtype=DTYPE)
        self._shape = tuple(dims)

    # ------------------------------------------------------------------
    # Private helpers shared by the mixins
    # ------------------------------------------------------------------
    @classmethod
    def _wrap(cls, arr: Any, *, fresh: bool = False) -> "NDArray":
        """
        Build an NDArray around a NumPy result without re-validating it.

        Parameters
        ----------
        arr : Any
            NumPy array (or scalar) holding the result.
        fresh : bool, optional
            If True, `arr` is a newly allocated result that nothing else
            references, and may be adopted without copying. Otherwise the data
            is copied so the new NDArray never aliases another buffer.
        """
        if fresh:
            a = np.asarray(arr, dtype=DTYPE)
            if not a.flags.c_contiguous:
                a = a.copy(order="C")
        else:
            a = np.array(arr, dtype=DTYPE, copy=True, order="C")
        obj = cls.__new__(cls)
        obj._buffer = a.reshape(-1)
        obj._shape = tuple(int(d) for d in a.shape)
        return obj

    def _view(self) -> np.ndarray:
        """
        Return a shaped NumPy view over the private buffer (internal use only).
        """
        return self._buffer.reshape(self._shape)

    @classmethod
    def _coerce(cls, value: Any) -> "NDArray":
        """
        Convert an operand (NDArray, number, nested data, NumPy array) into an
        NDArray.
        """
        if isinstance(value, NDArray):
            return value
        if isinstance(value, numbers.Real):
            return cls._wrap(np.array(value, dtype=DTYPE), fresh=True)
        if hasattr(value, "data") and isinstance(getattr(value, "data"), NDArray):
            # Tensor-like operands expose their value as `.data`.
            return value.data
        return cls(value)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "NDArray":
        """
        Create an NDArray holding a float32 copy of `arr`.
        """
        return cls._wrap(np.asarray(arr))

    @classmethod
    def zeros(cls, shape: Union[int, Sequence[int]]) -> "NDArray":
        """
        Create an array of zeros.
        """
        s = validate_shape("zeros", normalize_shape("zeros", shape))
        return cls._wrap(np.zeros(s, dtype=DTYPE), fresh=True)

    @classmethod
    def ones(cls, shape: Union[int, Sequence[int]]) -> "NDArray":
        """
        Create an array of ones.
        """
        s = validate_shape("ones", normalize_shape("ones", shape))
        return cls._wrap(np.ones(s, dtype=DTYPE), fresh=True)

    @classmethod
    def full(cls, shape: Union[int, Sequence[int]], value: Number) -> "NDArray":
        """
        Create an array filled with `value`.
        """
        s = validate_shape("full", normalize_shape("full", shape))
        return cls._wrap(np.full(s, value, dtype=DTYPE), fresh=True)

    @classmethod
    def arange(
        cls, start: Number, stop: Optional[Number] = None, step: Number = 1
    ) -> "NDArray":
        """
        Create a 1-D array of evenly spaced values, like ``range``.

        ``NDArray.arange(n)`` yields ``[0, 1, ..., n - 1]``.
        """
        if step == 0:
            raise InvalidArgumentError("arange", "step must be non-zero")
        if stop is None:
            start, stop = 0, start
        return cls._wrap(np.arange(start, stop, step, dtype=DTYPE), fresh=True)

    def zeros_like(self) -> "NDArray":
        """
        Return an array of zeros with this array's shape.
        """
        return type(self).zeros(self._shape)

    def ones_like(self) -> "NDArray":
        """
        Return an array of ones with this array's shape.
        """
        return type(self).ones(self._shape)

    def copy(self) -> "NDArray":
        return type(self)._wrap(self._view())

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the array shape.

        Returns
        -------
        tuple[int, ...]
            The array's shape.
        """
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return int(self._buffer.size)

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    @property
    def strides(self) -> tuple[int, ...]:
        """
        Return row-major strides in elements, derived from the shape.
        """
        return row_major_strides(self._shape)

    @property
    def data(self) -> np.ndarray:
        """
        Return the flat backing buffer as a read-only 1-D view.

        Returns
        -------
        numpy.ndarray
            A float32 view of length ``numel()`` that cannot be written to.
        """
        view = self._buffer.view()
        view.flags.writeable = False
        return view

    def numel(self) -> int:
        """
        Return the total number of elements.
        """
        return int(self._buffer.size)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return a shaped float32 NumPy copy of the array.
        """
        return self._view().copy()

    def to_nested(self) -> Any:
        """
        Expand the flat buffer back into nested Python lists.

        A rank-0 array expands to a bare float.
        """
        return self._view().tolist()

    tolist = to_nested

    def item(self) -> float:
        """
        Return the single element of a one-element array as a Python float.

        Raises
        ------
        InvalidArgumentError
            If the array holds more than one element.
        """
        if self._buffer.size != 1:
            raise InvalidArgumentError(
                "item", f"only one-element arrays convert to float, got shape {self._shape}"
            )
        return float(self._buffer[0])

    def __float__(self) -> float:
        return self.item()

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self._view().copy()
        return arr if dtype is None else arr.astype(dtype)

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        if not self._shape:
            raise TypeError("len() of a rank-0 NDArray")
        return self._shape[0]

    def __iter__(self) -> Iterator["NDArray"]:
        if not self._shape:
            raise TypeError("iteration over a rank-0 NDArray")
        for i in range(self._shape[0]):
            yield self.index_row(i)

    def __getitem__(self, index: int) -> "NDArray":
        return self.index_row(index)

    def __eq__(self, other: object) -> bool:
        """
        Structural equality: same shape and identical elements.

        Use `equal` for an elementwise comparison mask.
        """
        if not isinstance(other, NDArray):
            try:
                other = NDArray(other)
            except (TypeError, ShapeMismatchError):
                return NotImplemented
        return self._shape == other._shape and bool(
            np.array_equal(self._buffer, other._buffer)
        )

    __hash__ = None

    def allclose(self, other: Any, rtol: float = 1e-5, atol: float = 1e-6) -> bool:
        """
        Return True if shapes match and all elements are close.
        """
        other = self._coerce(other)
        return self._shape == other._shape and bool(
            np.allclose(self._buffer, other._buffer, rtol=rtol, atol=atol)
        )

    def __repr__(self) -> str:
        body = np.array2string(self._view(), separator=", ", threshold=64)
        return f"NDArray({body}, shape={self._shape})"

    def __str__(self) -> str:
        return np.array2string(self._view(), separator=", ", threshold=64)
