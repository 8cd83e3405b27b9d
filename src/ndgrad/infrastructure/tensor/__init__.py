"""
Autograd tensors.

Public API
----------
- ``Tensor``: graph node over an `NDArray` with reverse-mode backward.
- ``Context``: per-invocation operation record.
- ``Edge``: weak ``(consumer, slot)`` consumer edge.
"""

from ._tensor_context import Context, Edge
from ._tensor import Tensor

__all__ = [
    Tensor.__name__,
    Context.__name__,
    Edge.__name__,
]
