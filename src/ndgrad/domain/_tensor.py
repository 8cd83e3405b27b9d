"""
Array and tensor interface definitions.

This module defines the domain-level interfaces for array-like and
tensor-like objects using structural typing. The interfaces capture the
backend-agnostic properties that `Function` implementations, mixins and the
autograd engine rely on, so those layers can type against a contract instead
of the concrete NumPy-backed classes.

Notes
-----
- `INDArray` describes a plain value container (no autograd state).
- `ITensor` describes a graph node: an `INDArray` plus gradient bookkeeping.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class INDArray(Protocol):
    """
    Dense N-dimensional array interface.

    An `INDArray` is a flat, row-major buffer of 32-bit floats paired with a
    shape. Implementations are value-producing: operations return new arrays
    and never mutate their operands (except the explicit scatter primitives).
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the array.

        Returns
        -------
        tuple[int, ...]
            The array's shape.
        """
        ...

    @property
    def ndim(self) -> int:
        """
        Return the rank (number of dimensions) of the array.
        """
        ...

    @property
    def data(self) -> Any:
        """
        Return the flat, read-only backing buffer.

        Returns
        -------
        Any
            A 1-D backend buffer of length `numel()`.
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements in the array.

        Returns
        -------
        int
            Product of all dimensions in the array shape.
        """
        ...

    def reshape(self, new_shape: Sequence[int]) -> "INDArray":
        """
        Return an array with the same elements and a new shape.
        """
        ...

    def sum(self, axis: Optional[int] = None, keepdims: bool = False) -> "INDArray":
        """
        Sum elements, over all axes or along `axis`.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return a shaped backend-native copy of the array.
        """
        ...


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor (graph node) interface.

    An `ITensor` wraps an `INDArray` value and, when it participates in
    automatic differentiation, a gradient buffer of identical shape, a
    reference to the operation record that produced it, and the consumer
    edges used to schedule gradient delivery.

    Notes
    -----
    - The protocol includes autograd-facing hooks (`backward`, `grad`,
      `requires_grad`) because the engine and the operator mixins expect
      them to exist.
    """

    @property
    def data(self) -> INDArray:
        """
        Return the value held by this tensor.
        """
        ...

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            The tensor's shape.
        """
        ...

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this tensor should accumulate gradients.

        Returns
        -------
        bool
            True if gradients should be tracked/accumulated, False otherwise.
        """
        ...

    @property
    def grad(self) -> Optional[INDArray]:
        """
        Return the accumulated gradient (None when gradients are not tracked).
        """
        ...

    def backward(self, grad: Optional[Any] = None) -> None:
        """
        Backpropagate from this tensor through its computation graph.

        Parameters
        ----------
        grad : Optional[Any], optional
            Gradient w.r.t. this tensor. Defaults to ones of this tensor's shape.
        """
        ...

    def zero_grad(self) -> None:
        """
        Reset the gradient buffer to zeros.
        """
        ...

    def zero_grad_tree(self) -> None:
        """
        Reset gradients of this tensor and every tensor that led to it, and
        detach each of them from its producing operation.
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements in the tensor.
        """
        ...
