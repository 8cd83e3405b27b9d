"""
Gradient un-broadcasting.

When an elementwise operation broadcast an operand from shape ``s`` to the
output shape, the operand's gradient is the output gradient summed back over
every broadcast axis.
"""

from typing import Sequence

from ...domain._errors import ShapeMismatchError
from ..ndarray import NDArray


def unbroadcast(grad: NDArray, target_shape: Sequence[int]) -> NDArray:
    """
    Reduce `grad` to `target_shape` by summing over broadcast axes.

    Parameters
    ----------
    grad : NDArray
        Gradient with respect to a broadcast result.
    target_shape : Sequence[int]
        Shape of the operand before broadcasting.

    Returns
    -------
    NDArray
        Gradient with shape exactly `target_shape`.

    Notes
    -----
    1. Leading axes are summed away while ``grad.ndim > len(target_shape)``.
    2. Every remaining axis where ``target_shape[axis] == 1`` but the gradient
       is larger is summed with ``keepdims=True``.
    """
    target = tuple(target_shape)
    g = grad
    while g.ndim > len(target):
        g = g.sum(axis=0)

    for axis, size in enumerate(target):
        if size == 1 and g.shape[axis] != 1:
            g = g.sum(axis=axis, keepdims=True)

    if g.shape != target:
        raise ShapeMismatchError(
            "unbroadcast", grad.shape, target, detail="gradient does not reduce to target"
        )
    return g
