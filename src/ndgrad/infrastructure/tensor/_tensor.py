"""
Concrete Tensor implementation (autograd graph node over NDArray).

This module provides `Tensor`, which satisfies the domain-level `ITensor`
protocol. A tensor owns:
- an `NDArray` value (`data`),
- a `requires_grad` flag and, when set, a gradient buffer of identical shape
  initialised to zeros,
- a nullable reference to the `Context` (`operation`) that produced it,
- a multiset of consumer edges (`children`), each ``(consumer, slot)``.

Design notes
------------
- Operators live in mixins (`mixins/`) and record primitives through
  `ndgrad.infrastructure.functions.apply`.
- Parents are held strongly by the `Context`; consumers are held weakly by
  edges, so the reference graph is acyclic. `zero_grad_tree` is the explicit
  teardown of a graph.
- The backward scheduler (`mixins/_backward.py`) dispatches on
  ``self._state``, a `BackwardState`.
"""

from __future__ import annotations

import weakref
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from ...domain._backward_state import BackwardState
from ...domain._errors import InvalidOperationError
from ...domain._tensor import ITensor
from ..ndarray import NDArray
from ._tensor_context import Context, Edge
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinBackward,
    TensorMixinIndexing,
    TensorMixinMemory,
    TensorMixinReduction,
    TensorMixinUnary,
)

Number = Union[int, float]


class Tensor(
    TensorMixinArithmetic,
    TensorMixinUnary,
    TensorMixinReduction,
    TensorMixinMemory,
    TensorMixinIndexing,
    TensorMixinBackward,
    ITensor,
):
    """
    Autograd graph node wrapping an `NDArray`.

    Parameters
    ----------
    data : Any
        Nested numeric data, a flat sequence (with `shape`), an `NDArray`, a
        NumPy array, or a Python number for a rank-0 tensor. The value is
        copied.
    shape : Optional[Sequence[int]], optional
        Shape for flat `data`.
    requires_grad : bool, optional
        Whether gradients should be accumulated for this tensor. Defaults to
        False.

    Notes
    -----
    - ``_grad`` is an NDArray of ``data.shape`` iff ``requires_grad``.
    - ``_operation`` is the producing `Context`, None for leaves.
    - ``_children`` holds `Edge` records; dead edges are pruned lazily.
    """

    __array_priority__ = 200

    def __init__(
        self,
        data: Any,
        shape: Optional[Sequence[int]] = None,
        *,
        requires_grad: bool = False,
    ) -> None:
        if isinstance(data, Tensor):
            data = data.data
        value = NDArray(data, shape) if shape is not None or not isinstance(data, NDArray) else data.copy()
        self._init_node(value, requires_grad)

    def _init_node(self, value: NDArray, requires_grad: bool) -> None:
        self._data: NDArray = value
        self._requires_grad: bool = bool(requires_grad)
        self._grad: Optional[NDArray] = value.zeros_like() if requires_grad else None
        self._operation: Optional[Context] = None
        self._children: List[Edge] = []
        self._state: BackwardState = BackwardState.PENDING

    @classmethod
    def _from_array(cls, value: NDArray, *, requires_grad: bool = False) -> "Tensor":
        """
        Wrap an NDArray without copying it (internal use by `apply`).
        """
        obj = cls.__new__(cls)
        obj._init_node(value, requires_grad)
        return obj

    @classmethod
    def _as_tensor(cls, x: Any) -> "Tensor":
        """
        Return `x` unchanged if it is a Tensor, else lift it to a constant
        tensor that does not require gradients.
        """
        if isinstance(x, Tensor):
            return x
        return cls._from_array(NDArray._coerce(x), requires_grad=False)

    # ----------------------------
    # Factories
    # ----------------------------
    @classmethod
    def zeros(cls, shape: Union[int, Sequence[int]], *, requires_grad: bool = False) -> "Tensor":
        return cls._from_array(NDArray.zeros(shape), requires_grad=requires_grad)

    @classmethod
    def ones(cls, shape: Union[int, Sequence[int]], *, requires_grad: bool = False) -> "Tensor":
        return cls._from_array(NDArray.ones(shape), requires_grad=requires_grad)

    @classmethod
    def from_numpy(cls, arr: np.ndarray, *, requires_grad: bool = False) -> "Tensor":
        """
        Create a tensor holding a float32 copy of `arr`.
        """
        return cls._from_array(NDArray.from_numpy(arr), requires_grad=requires_grad)

    # ----------------------------
    # Properties
    # ----------------------------
    @property
    def data(self) -> NDArray:
        """
        Return the value held by this tensor.
        """
        return self._data

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the tensor shape.

        Returns
        -------
        tuple[int, ...]
            The tensor's shape.
        """
        return self._data.shape

    @property
    def ndim(self) -> int:
        return self._data.ndim

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this tensor should accumulate gradients.
        """
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        """
        Enable or disable gradient tracking on a leaf tensor.

        Raises
        ------
        InvalidOperationError
            If the tensor was produced by an operation.
        """
        if self._operation is not None:
            raise InvalidOperationError(
                "requires_grad", "can only be changed on leaf tensors; use detach()"
            )
        self._requires_grad = bool(value)
        self._grad = self._data.zeros_like() if value else None

    @property
    def grad(self) -> Optional[NDArray]:
        """
        Return the accumulated gradient, or None when gradients are not tracked.
        """
        return self._grad

    @property
    def operation(self) -> Optional[Context]:
        """
        Return the operation record that produced this tensor (None for leaves).
        """
        return self._operation

    @property
    def children(self) -> tuple[Edge, ...]:
        """
        Return the live consumer edges of this tensor.
        """
        return tuple(self._live_edges())

    @property
    def state(self) -> BackwardState:
        return self._state

    @property
    def is_leaf(self) -> bool:
        return self._operation is None

    # ----------------------------
    # Graph bookkeeping
    # ----------------------------
    def _add_edge(self, consumer: "Tensor", slot: int) -> None:
        """
        Record that `consumer`'s operation reads this tensor at input `slot`.

        Taking part in a new forward pass re-opens a tensor whose backward has
        already fired (e.g. a parameter reused in the next training step).
        """
        if self._state is BackwardState.FIRED:
            self._state = BackwardState.PENDING
        self._children.append(Edge(weakref.ref(consumer), slot))

    def _remove_edge(self, consumer: "Tensor", slot: int) -> None:
        for i, edge in enumerate(self._children):
            if edge.matches(consumer, slot):
                del self._children[i]
                return

    def _live_edges(self) -> List[Edge]:
        self._children = [e for e in self._children if e.is_alive()]
        return self._children

    def zero_grad(self) -> None:
        """
        Reset the gradient buffer to zeros and the backward state to PENDING.
        """
        if self._requires_grad:
            self._grad = self._data.zeros_like()
        self._state = BackwardState.PENDING

    def zero_grad_tree(self) -> None:
        """
        Reset gradients of this tensor and of every tensor that led to it,
        and tear the graph down.

        Every visited tensor is zeroed, loses its producing operation (it
        becomes a leaf) and drops its consumer edges. Calling this twice is
        harmless.
        """
        stack: List[Tensor] = [self]
        seen: set[int] = set()
        while stack:
            t = stack.pop()
            if id(t) in seen:
                continue
            seen.add(id(t))
            t.zero_grad()
            if t._operation is not None:
                stack.extend(t._operation.parents)
            t._operation = None
            t._children = []

    def detach(self) -> "Tensor":
        """
        Return a tensor sharing this value but cut from the graph.
        """
        return type(self)._from_array(self._data, requires_grad=False)

    # ----------------------------
    # Conversion
    # ----------------------------
    def numel(self) -> int:
        return self._data.numel()

    def item(self) -> float:
        """
        Return the single element of a one-element tensor as a Python float.
        """
        return self._data.item()

    def to_numpy(self) -> np.ndarray:
        return self._data.to_numpy()

    def tolist(self) -> Any:
        return self._data.to_nested()

    def __float__(self) -> float:
        return self.item()

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        flag = ", requires_grad=True" if self._requires_grad else ""
        return f"Tensor({self._data}, shape={self.shape}{flag})"
