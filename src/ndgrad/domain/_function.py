"""
Autograd function interface definitions.

This module defines the abstract base class for differentiable operations
used in the automatic differentiation system. Concrete subclasses of
`Function` implement both the forward computation and its corresponding
backward gradient computation on raw arrays.

Graph bookkeeping (parents, consumer edges, gradient buffers) is not the
concern of a `Function`: it is performed by the infrastructure `apply`
helper, which builds the per-invocation `Context`, runs `forward`, and wires
the output tensor into the graph. This keeps every primitive a closed,
statically typed `{forward, backward}` pair.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from ._tensor import INDArray


class Function(ABC):
    """
    Abstract base class for differentiable operations.

    A `Function` represents one kind of node in the computation graph and
    encapsulates both:
    - the forward computation (arrays in, array out)
    - the backward (gradient) computation (upstream gradient in, one
      gradient per input out)

    Subclasses must implement both `forward` and `backward` as static methods.
    Any intermediate values required for gradient computation should be stored
    on the provided `ctx` object during the forward pass.

    Notes
    -----
    - Methods are declared as `@staticmethod` to avoid implicit state on the
      function object itself.
    - The `ctx` argument acts as a per-invocation operation record, allowing
      safe reuse of `Function` classes across multiple computation graphs.
    """

    @staticmethod
    @abstractmethod
    def forward(ctx, *inputs: Any) -> INDArray:
        """
        Perform the forward computation.

        Parameters
        ----------
        ctx : Context
            A mutable context object used to store intermediate values
            required for gradient computation.
        *inputs : NDArray
            Input array(s) of the operation, in parent order.

        Returns
        -------
        NDArray
            The array resulting from the forward computation.
        """
        ...

    @staticmethod
    @abstractmethod
    def backward(ctx, grad_out: INDArray) -> Tuple[Optional[INDArray], ...]:
        """
        Compute gradients with respect to the inputs.

        Parameters
        ----------
        ctx : Context
            The context object populated during the forward pass.
        grad_out : NDArray
            Gradient of the loss with respect to the output.

        Returns
        -------
        tuple[NDArray | None, ...]
            Gradients with respect to each parent, in parent order. Entries
            may be None for parents that do not require gradients.
        """
        ...
