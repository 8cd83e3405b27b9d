"""
Backward scheduling states of a tensor.

A tensor that requires gradients moves through these states during one
backward pass:

    PENDING ──deliver──▶ RECEIVING ──last edge──▶ ARMED ──▶ FIRED
       │                                             ▲
       └──────────── last edge / backward() ─────────┘

`zero_grad()` returns a tensor to `PENDING`. Reusing a `FIRED` tensor as the
input of a new operation also returns it to `PENDING`, so parameters can take
part in the next forward pass.
"""

from enum import Enum


class BackwardState(Enum):
    """
    Enumeration of backward scheduling states.

    Attributes
    ----------
    PENDING : BackwardState
        No consumer gradient has arrived yet.
    RECEIVING : BackwardState
        Some, but not all, live consumer edges have delivered.
    ARMED : BackwardState
        Every live consumer edge has delivered; the gradient is complete.
    FIRED : BackwardState
        The producing operation's backward has run for this pass.
    """

    PENDING = "pending"
    RECEIVING = "receiving"
    ARMED = "armed"
    FIRED = "fired"
