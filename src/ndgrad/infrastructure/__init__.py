"""
Infrastructure layer: NumPy-backed arrays, tensors and differentiable
primitives.
"""

from .ndarray import DTYPE, NDArray
from .tensor import Context, Edge, Tensor
from ._activations import tanh
from ._losses import cross_entropy

__all__ = [
    NDArray.__name__,
    "DTYPE",
    Tensor.__name__,
    Context.__name__,
    Edge.__name__,
    tanh.__name__,
    cross_entropy.__name__,
]
