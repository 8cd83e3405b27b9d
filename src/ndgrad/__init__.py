"""
ndgrad: a dense N-dimensional array with reverse-mode automatic
differentiation.

Quick start
-----------
>>> from ndgrad import Tensor
>>> x = Tensor([[1.0, 2.0], [3.0, 4.0]], requires_grad=True)
>>> loss = (x * x).sum()
>>> loss.backward()
>>> x.grad.to_nested()
[[2.0, 4.0], [6.0, 8.0]]
"""

from .domain import (
    BackwardState,
    Function,
    INDArray,
    ITensor,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidOperationError,
    NDArrayArithmeticError,
    NDGradError,
    ShapeMismatchError,
)
from .infrastructure import DTYPE, Context, Edge, NDArray, Tensor, cross_entropy, tanh

__version__ = "0.1.0"

__all__ = [
    NDArray.__name__,
    Tensor.__name__,
    Context.__name__,
    Edge.__name__,
    Function.__name__,
    BackwardState.__name__,
    INDArray.__name__,
    ITensor.__name__,
    tanh.__name__,
    cross_entropy.__name__,
    "DTYPE",
    NDGradError.__name__,
    ShapeMismatchError.__name__,
    IndexOutOfRangeError.__name__,
    InvalidArgumentError.__name__,
    InvalidOperationError.__name__,
    NDArrayArithmeticError.__name__,
]
