"""
Activation functions composed from differentiable primitives.

Activations here have no `Function` of their own: they are built from
existing tensor operators, so their gradients come from the primitives'
backward rules and the graph records each intermediate step.
"""

from ..domain._tensor import ITensor


def tanh(x: ITensor) -> ITensor:
    """
    Hyperbolic tangent.

    Computed as

        tanh(x) = 2 / (1 + exp(-2x)) - 1

    which equals ``(e^x - e^-x) / (e^x + e^-x)`` but needs a single ``exp``.

    Parameters
    ----------
    x : Tensor
        Input tensor.

    Returns
    -------
    Tensor
        ``tanh(x)`` elementwise, with values in ``[-1, 1]``.

    Notes
    -----
    For ``x < -44`` the float32 ``exp(-2x)`` overflows to ``inf``; the
    forward value still saturates to ``-1``.
    """
    return 2.0 / (1.0 + (x * -2.0).exp()) - 1.0
