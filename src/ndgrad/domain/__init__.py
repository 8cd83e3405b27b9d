"""
Domain layer: interfaces, error taxonomy and dispatch utilities.

Nothing in this package depends on a numerical backend.
"""

from ._errors import (
    NDGradError,
    ShapeMismatchError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidOperationError,
    NDArrayArithmeticError,
)
from ._backward_state import BackwardState
from ._function import Function
from ._tensor import INDArray, ITensor

__all__ = [
    NDGradError.__name__,
    ShapeMismatchError.__name__,
    IndexOutOfRangeError.__name__,
    InvalidArgumentError.__name__,
    InvalidOperationError.__name__,
    NDArrayArithmeticError.__name__,
    BackwardState.__name__,
    Function.__name__,
    INDArray.__name__,
    ITensor.__name__,
]
