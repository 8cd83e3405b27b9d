"""
Array- and autograd-related exceptions for ndgrad.

This module defines the error taxonomy raised by `NDArray` kernels and by the
autograd engine. Every error derives from :class:`NDGradError` and from the
builtin exception that best describes it, so callers may catch either the
framework-specific type or the generic Python one (e.g. ``ValueError``).

All errors are raised synchronously at the point of violation. They represent
programmer or usage errors (incompatible shapes, out-of-range axes, invalid
backward calls); there is no retry or partial-result path.
"""

from typing import Any, Optional


class NDGradError(Exception):
    """
    Base class for all ndgrad errors.
    """


class ShapeMismatchError(NDGradError, ValueError):
    """
    Raised when operand shapes are incompatible.

    Typical causes are non-broadcastable elementwise operands, a matmul inner
    dimension mismatch, a reshape that does not preserve the element count,
    or a concatenation whose non-axis dimensions disagree.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "add", "matmul").
    shapes : tuple[tuple[int, ...], ...]
        The offending shapes, in operand order.
    """

    def __init__(self, op: str, *shapes: Any, detail: Optional[str] = None) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name.
        *shapes : tuple[int, ...]
            Shapes involved in the failed operation.
        detail : Optional[str], optional
            Extra human-readable explanation appended to the message.
        """
        self.op = op
        self.shapes = tuple(tuple(s) if isinstance(s, (tuple, list)) else s for s in shapes)
        msg = f"{op}: incompatible shapes " + " vs ".join(repr(s) for s in self.shapes)
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class IndexOutOfRangeError(NDGradError, IndexError):
    """
    Raised when an axis or an index lies outside its valid bounds.

    Attributes
    ----------
    op : str
        The operation name.
    index : Any
        The offending axis or index value.
    bound : int
        The exclusive upper bound (rank for axes, dimension size for indices).
    """

    def __init__(self, op: str, index: Any, bound: int, *, kind: str = "axis") -> None:
        self.op = op
        self.index = index
        self.bound = bound
        super().__init__(
            f"{op}: {kind} {index!r} is out of range for bound {bound} "
            f"(valid range [{-bound}, {bound}))"
        )


class InvalidArgumentError(NDGradError, ValueError):
    """
    Raised when an argument value is malformed (e.g. more than one ``-1`` in a
    reshape target).
    """

    def __init__(self, op: str, message: str) -> None:
        self.op = op
        super().__init__(f"{op}: {message}")


class InvalidOperationError(NDGradError, RuntimeError):
    """
    Raised when an autograd operation is used in an invalid state.

    This covers calling ``backward`` on a tensor that does not track
    gradients, and calling ``backward`` a second time on a tensor whose
    operation has already fired without an intervening ``zero_grad``.
    """

    def __init__(self, op: str, message: str) -> None:
        self.op = op
        super().__init__(f"{op}: {message}")


class NDArrayArithmeticError(NDGradError, ArithmeticError):
    """
    Raised for numerically invalid elementwise operations.

    Examples are division by zero, the logarithm of a non-positive value, the
    square root of a negative value, or a power whose result is undefined.

    Attributes
    ----------
    op : str
        The operation name (e.g., "div", "log").
    """

    def __init__(self, op: str, message: str) -> None:
        self.op = op
        super().__init__(f"{op}: {message}")
