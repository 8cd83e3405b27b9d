"""
Operation-family mixins composed into `NDArray`.

Each mixin groups one family of kernels and relies only on the private
helpers provided by the concrete class (`_wrap`, `_view`, `_coerce`).
"""

from ._arithmetic import NDArrayArithmeticMixin
from ._unary import NDArrayUnaryMixin
from ._reduction import NDArrayReductionMixin
from ._linalg import NDArrayLinalgMixin
from ._memory import NDArrayMemoryMixin
from ._indexing import NDArrayIndexingMixin, as_index_array
from ._loss import NDArrayLossMixin

__all__ = [
    NDArrayArithmeticMixin.__name__,
    NDArrayUnaryMixin.__name__,
    NDArrayReductionMixin.__name__,
    NDArrayLinalgMixin.__name__,
    NDArrayMemoryMixin.__name__,
    NDArrayIndexingMixin.__name__,
    NDArrayLossMixin.__name__,
    as_index_array.__name__,
]
