"""
Operator mixins composed into `Tensor`.

Importing `_backward` registers the backward scheduler's control paths with
the tensor control-path manager as a side effect.
"""

from ._arithmetic import TensorMixinArithmetic
from ._unary import TensorMixinUnary
from ._reduction import TensorMixinReduction
from ._memory import TensorMixinMemory
from ._indexing import TensorMixinIndexing
from ._backward import TensorMixinBackward

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinUnary.__name__,
    TensorMixinReduction.__name__,
    TensorMixinMemory.__name__,
    TensorMixinIndexing.__name__,
    TensorMixinBackward.__name__,
]
