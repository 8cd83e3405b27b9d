"""
Loss functions for ndgrad.

`cross_entropy` is composed from differentiable tensor primitives rather than
implemented as a dedicated `Function`, so its backward pass is assembled from
the Exp, Sum, Log, Select and Mean backward rules.

Design notes
------------
- Logits are shifted by their per-row maximum before exponentiation. The
  shift is taken from the raw values and enters the graph as a constant; it
  does not change the loss value or its gradient.
- The result is a rank-0 tensor intended as the root of `backward()`.
"""

from typing import Any

from ..domain._errors import InvalidArgumentError, ShapeMismatchError
from ..domain._tensor import ITensor
from .ndarray import NDArray
from .ndarray.mixins import as_index_array


def cross_entropy(logits: ITensor, labels: Any) -> ITensor:
    """
    Mean softmax cross-entropy over a batch.

    Implements:

        z      = logits - max(logits, axis=1)
        logp   = z - log(sum(exp(z), axis=1))
        loss   = -mean(logp[i, labels[i]])

    Parameters
    ----------
    logits : Tensor
        Unnormalised class scores of shape ``(N, C)``.
    labels : Any
        ``N`` integral class indices (NDArray, sequence or NumPy array).

    Returns
    -------
    Tensor
        Rank-0 loss tensor.

    Raises
    ------
    InvalidArgumentError
        If `logits` is not 2-D or the batch is empty.
    ShapeMismatchError
        If the label count differs from ``N``.
    IndexOutOfRangeError
        If a label lies outside ``[0, C)``.
    """
    if logits.ndim != 2:
        raise InvalidArgumentError(
            "cross_entropy", f"logits must be 2-D (N, C), got shape {logits.shape}"
        )
    n, c = logits.shape
    if n == 0:
        raise InvalidArgumentError("cross_entropy", "empty batch")

    y = as_index_array("cross_entropy", labels, c).reshape(-1)
    if y.shape[0] != n:
        raise ShapeMismatchError(
            "cross_entropy", logits.shape, (y.shape[0],), detail="one label per row required"
        )

    shift = logits.data.max(axis=1, keepdims=True)
    z = logits - shift
    log_norm = z.exp().sum(axis=1, keepdims=True).log()
    log_probs = z - log_norm
    picked = log_probs.select(NDArray.arange(n), y)
    return -picked.mean()
