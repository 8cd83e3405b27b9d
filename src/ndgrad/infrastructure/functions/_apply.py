"""
Graph wiring for differentiable operations.

`apply` is the single place where a `Function` invocation becomes part of the
computation graph. `Function` subclasses stay pure array-in/array-out; this
helper builds the `Context`, runs the forward kernel, and connects the output
tensor to its inputs.
"""

from typing import Any, Type

from ...domain._function import Function
from ...domain._tensor import ITensor
from ..tensor._tensor_context import Context


def apply(function: Type[Function], *tensors: ITensor, **meta: Any) -> ITensor:
    """
    Run `function` on `tensors` and record the result in the graph.

    Parameters
    ----------
    function : Type[Function]
        The differentiable primitive to invoke.
    *tensors : Tensor
        Input tensors in slot order. At least one is required.
    **meta : Any
        Non-tensor parameters (axes, shapes, indices, fill values). They are
        stored in ``ctx.saved_meta`` before `forward` runs.

    Returns
    -------
    Tensor
        The output tensor. It requires gradients iff any input does, in which
        case it carries the `Context` as its `operation` and every
        grad-requiring input gains a ``(output, slot)`` consumer edge.

    Notes
    -----
    Errors raised by `forward` propagate unchanged; nothing is wired into the
    graph when the forward computation fails.
    """
    if not tensors:
        raise TypeError(f"{function.__name__}: at least one input tensor is required")

    ctx = Context(function=function, parents=tuple(tensors))
    ctx.saved_meta.update(meta)
    ctx.needs_input_grad = tuple(bool(t.requires_grad) for t in tensors)

    out_data = function.forward(ctx, *(t.data for t in tensors))

    requires_grad = any(ctx.needs_input_grad)
    Tensor = type(tensors[0])
    out = Tensor._from_array(out_data, requires_grad=requires_grad)

    if requires_grad:
        out._operation = ctx
        for slot, t in enumerate(tensors):
            if t.requires_grad:
                t._add_edge(out, slot)

    return out
