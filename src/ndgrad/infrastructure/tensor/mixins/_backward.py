"""
Reverse-mode backward scheduler (fan-in countdown) for tensors.

Each tensor that requires gradients keeps a multiset of consumer edges. A
gradient arriving through an edge is accumulated and the edge is removed.
Once no live edge remains the tensor's gradient is complete: it becomes
ARMED and then FIRED, which runs its operation's backward exactly once and
delivers one gradient to each grad-requiring parent through that parent's
``(self, slot)`` edge.

Per-state behaviour of the two scheduler entry points is registered through
`tensor_control_path_manager`, keyed on ``self._state``:

==========  ============================  ==============================
state       ``_enter`` (backward root)    ``_deliver`` (from a consumer)
==========  ============================  ==============================
PENDING     accumulate, count down        accumulate, count down
RECEIVING   accumulate, count down        accumulate, count down
ARMED       InvalidOperationError         InvalidOperationError
FIRED       InvalidOperationError         InvalidOperationError
==========  ============================  ==============================

Firing is driven by an explicit work list in `backward`, so graph depth is
not limited by the interpreter recursion limit.
"""

from typing import Any, List, Optional, Tuple

from ....domain._backward_state import BackwardState
from ....domain._errors import InvalidOperationError, ShapeMismatchError
from ....domain._tensor import ITensor
from .._tensor_builder import tensor_control_path_manager


def _raise_invalid_state(method: Any, state: BackwardState) -> None:
    if state is BackwardState.FIRED:
        raise InvalidOperationError(
            "backward",
            "gradient already propagated through this tensor; call zero_grad() "
            "or build a new graph before running backward again",
        )
    raise InvalidOperationError(
        "backward", f"{method.__name__} is not valid in state {state.name}"
    )


class TensorMixinBackward:
    """
    Mixin implementing `backward` and the state-dispatched scheduler hooks.
    """

    def backward(self: ITensor, grad: Optional[Any] = None) -> None:
        """
        Backpropagate from this tensor through its computation graph.

        Parameters
        ----------
        grad : Optional[Any], optional
            Gradient with respect to this tensor (NDArray, Tensor, NumPy
            array or nested data). Defaults to ones of this tensor's shape.

        Raises
        ------
        InvalidOperationError
            If this tensor does not require gradients, or if its backward has
            already fired without an intervening `zero_grad`.
        ShapeMismatchError
            If `grad` does not have this tensor's shape.

        Notes
        -----
        A root that still has live consumer edges only accumulates the seed
        and waits in RECEIVING; it fires once the last consumer delivers.
        Gradients accumulate into ``grad`` of every reached tensor.
        """
        if not self.requires_grad:
            raise InvalidOperationError(
                "backward", "tensor does not require gradients"
            )
        seed = self._seed_grad(grad)
        ready: List[ITensor] = [self] if self._enter(seed) else []
        while ready:
            node = ready.pop()
            for parent, g, slot in node._fire():
                if parent._deliver(g, node, slot):
                    ready.append(parent)

    def _seed_grad(self: ITensor, grad: Optional[Any]):
        if grad is None:
            return self.data.ones_like()
        if hasattr(grad, "requires_grad"):
            grad = grad.data
        g = self.data._coerce(grad)
        if g.shape != self.shape:
            raise ShapeMismatchError(
                "backward", self.shape, g.shape, detail="seed gradient must match the tensor"
            )
        return g

    def _enter(self: ITensor, grad) -> bool:
        """
        Start backward at this tensor with seed gradient `grad` (state-dispatched).

        Returns
        -------
        bool
            True if no live consumer edge remains and the tensor is ARMED.
        """
        ...

    def _deliver(self: ITensor, grad, consumer: ITensor, slot: int) -> bool:
        """
        Receive `grad` from input `slot` of `consumer`'s operation
        (state-dispatched).

        Returns
        -------
        bool
            True if this delivery completed the fan-in and the tensor is now
            ARMED and ready to fire.
        """
        ...

    def _fire(self: ITensor) -> List[Tuple[ITensor, Any, int]]:
        """
        Run the operation backward of an ARMED tensor.

        Returns
        -------
        list[tuple[Tensor, NDArray, int]]
            ``(parent, gradient, slot)`` for each parent requiring gradients.
        """
        if self._state is not BackwardState.ARMED:
            _raise_invalid_state(self._fire, self._state)
        self._state = BackwardState.FIRED

        ctx = self._operation
        if ctx is None:
            return []

        grads = ctx.function.backward(ctx, self._grad)
        if len(grads) != len(ctx.parents):
            raise InvalidOperationError(
                ctx.function.__name__,
                f"backward returned {len(grads)} gradients for {len(ctx.parents)} inputs",
            )

        out = []
        for slot, (parent, g) in enumerate(zip(ctx.parents, grads)):
            if g is not None and parent.requires_grad:
                out.append((parent, g, slot))
        return out

    def _accumulate(self: ITensor, grad) -> None:
        if grad.shape != self.shape:
            raise ShapeMismatchError(
                "backward", self.shape, grad.shape, detail="gradient shape differs from tensor"
            )
        self._grad = grad if self._grad is None else self._grad + grad


# ----------------------------------------------------------------------
# Control paths
# ----------------------------------------------------------------------
TMB = TensorMixinBackward


@tensor_control_path_manager(TMB, TMB._enter, BackwardState.PENDING, _raise_invalid_state)
def tensor_enter_pending(self: ITensor, grad) -> bool:
    """
    Seed the root. Consumers still alive must deliver before it can fire.
    """
    self._accumulate(grad)
    if self._live_edges():
        self._state = BackwardState.RECEIVING
        return False
    self._state = BackwardState.ARMED
    return True


@tensor_control_path_manager(TMB, TMB._enter, BackwardState.RECEIVING, _raise_invalid_state)
def tensor_enter_receiving(self: ITensor, grad) -> bool:
    self._accumulate(grad)
    if self._live_edges():
        return False
    self._state = BackwardState.ARMED
    return True


@tensor_control_path_manager(TMB, TMB._deliver, BackwardState.PENDING, _raise_invalid_state)
def tensor_deliver_pending(self: ITensor, grad, consumer: ITensor, slot: int) -> bool:
    """
    First gradient from a consumer: accumulate and start counting down.
    """
    self._accumulate(grad)
    self._remove_edge(consumer, slot)
    if self._live_edges():
        self._state = BackwardState.RECEIVING
        return False
    self._state = BackwardState.ARMED
    return True


@tensor_control_path_manager(TMB, TMB._deliver, BackwardState.RECEIVING, _raise_invalid_state)
def tensor_deliver_receiving(self: ITensor, grad, consumer: ITensor, slot: int) -> bool:
    self._accumulate(grad)
    self._remove_edge(consumer, slot)
    if self._live_edges():
        return False
    self._state = BackwardState.ARMED
    return True
