"""
Dense N-dimensional array backend.

Public API
----------
- ``NDArray``: flat float32 buffer + shape, with broadcasting math,
  reductions, matmul, shape operations and gather/scatter.
- ``DTYPE``: the element type of every array.
"""

from ._ndarray import DTYPE, NDArray
from ._shape import broadcast_shapes

__all__ = [
    NDArray.__name__,
    "DTYPE",
    broadcast_shapes.__name__,
]
