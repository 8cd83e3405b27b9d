from typing import Any, NamedTuple, Optional, Sequence, Type
from dataclasses import dataclass, field
import weakref

from ...domain._function import Function
from ...domain._tensor import INDArray, ITensor


@dataclass
class Context:
    """
    Operation record attached to a Tensor produced by a differentiable op.

    A `Context` records the information required to compute gradients for one
    invocation of a `Function` during backpropagation.

    Attributes
    ----------
    function : Type[Function]
        The `Function` subclass whose `backward` maps the output gradient to
        one gradient per parent.
    parents : Sequence[ITensor]
        The input tensors, in slot order. Gradients are produced for these
        parents during the backward pass.
    saved_arrays : list[INDArray]
        Arrays explicitly saved during the forward pass for use in backward
        (e.g. the forward `exp` output, a max mask, the raw operands).
    saved_meta : dict[str, Any]
        Non-array metadata required by forward/backward (e.g. shapes, axes,
        indices, fill values).
    needs_input_grad : tuple[bool, ...]
        Per-parent flag telling `backward` which gradients will be consumed.
    """

    function: Type[Function]
    parents: Sequence["ITensor"]
    saved_arrays: list["INDArray"] = field(default_factory=list)
    saved_meta: dict[str, Any] = field(default_factory=dict)
    needs_input_grad: tuple = ()

    def save_for_backward(self, *arrays: "INDArray") -> None:
        """
        Save arrays for use during the backward computation.

        Parameters
        ----------
        *arrays : NDArray
            Any number of arrays to be stored in `saved_arrays`.
        """
        self.saved_arrays.extend(arrays)


class Edge(NamedTuple):
    """
    One consumer edge of a tensor: "my value feeds input `slot` of the
    operation that produced `consumer`".

    The consumer is held through a weak reference, so an output that the
    caller discarded stops counting towards fan-in.
    """

    consumer: weakref.ref
    slot: int

    def target(self) -> Optional[ITensor]:
        return self.consumer()

    def is_alive(self) -> bool:
        return self.consumer() is not None

    def matches(self, consumer: ITensor, slot: int) -> bool:
        return self.consumer() is consumer and self.slot == slot
