"""
Differentiable primitives and graph wiring.

Each primitive is a `Function` subclass with static ``forward(ctx, *arrays)``
and ``backward(ctx, grad_out)`` methods operating on `NDArray` values. The
`apply` helper turns one invocation into a graph node.
"""

from ._apply import apply
from ._unbroadcast import unbroadcast
from ._arithmetic import AddFn, NegFn, MulFn, DivFn, PowFn
from ._unary import ExpFn, LogFn, SqrtFn
from ._linalg import MatMulFn
from ._reduction import SumFn, MeanFn, MaxFn, VarFn
from ._memory import ReshapeFn, TransposeFn, ConcatFn, StackFn
from ._indexing import MaskedFillFn, IndexRowFn, SliceAxisFn, GatherFn, SelectFn

__all__ = [
    apply.__name__,
    unbroadcast.__name__,
    AddFn.__name__,
    NegFn.__name__,
    MulFn.__name__,
    DivFn.__name__,
    PowFn.__name__,
    ExpFn.__name__,
    LogFn.__name__,
    SqrtFn.__name__,
    MatMulFn.__name__,
    SumFn.__name__,
    MeanFn.__name__,
    MaxFn.__name__,
    VarFn.__name__,
    ReshapeFn.__name__,
    TransposeFn.__name__,
    ConcatFn.__name__,
    StackFn.__name__,
    MaskedFillFn.__name__,
    IndexRowFn.__name__,
    SliceAxisFn.__name__,
    GatherFn.__name__,
    SelectFn.__name__,
]
