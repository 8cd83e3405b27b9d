"""
State-based method dispatch (a.k.a. "control-path" templating) via decorators.

This module provides a small mechanism for routing a single method call to one
of several registered implementations based on the runtime value of a state
attribute on the receiving object.

Core idea
---------
- You define a *base* method on a class (its signature becomes the canonical
  one, and its docstring documents the contract).
- You then register one implementation ("control path") per state value,
  each keyed by ``(ClassName, MethodName, StateVal)``.
- At runtime, the installed wrapper reads the state attribute of ``self`` and
  dispatches to the matching implementation.

Intended use-cases
------------------
- Implementing state machines where behavior changes by state without large
  if/elif chains (e.g. the autograd backward scheduler, whose tensors move
  through pending/receiving/armed/fired states).

Important notes
---------------
- This design mutates the class: the first time you decorate a control path,
  the original method name is replaced with a wrapper that performs dispatch.
- Registered implementations are stored in a closure-local mapping owned by
  `create_path_builder()`. Different builders do not share mappings.
- Implementations are called like ordinary instance methods:
  ``impl(self, *args, **kwargs)``.
"""

from typing import (
    Callable,
    Hashable,
    Optional,
    Union,
    Dict,
    Type,
    Any,
)
from typing_extensions import ParamSpec, TypeVar
from collections import namedtuple
from functools import wraps

P = ParamSpec("P")
R = TypeVar("R")


def create_path_builder(state_attr: str = "_state") -> Callable[
    [
        Type,
        Callable[P, R],
        Hashable,
        Optional[Union[Exception, Callable[[Callable[P, R], Any], None]]],
    ],
    Callable[[Callable[P, R]], Callable[P, R]],
]:
    """
    Create and return a "path builder" used to register stateful control paths.

    The returned function (`templator`) is used like this:

        decorator = create_path_builder("_state")

        class Machine:
            _state = "A"
            def step(self, x: int) -> int: ...

        @decorator(Machine, Machine.step, "A")
        def step_a(self, x: int) -> int:
            ...

        @decorator(Machine, Machine.step, "B")
        def step_b(self, x: int) -> int:
            ...

    When `Machine().step(...)` is called, it dispatches to `step_a` or
    `step_b` depending on ``self._state``.

    Parameters
    ----------
    state_attr : str, optional
        Name of the attribute read on ``self`` to select a control path.
        Defaults to ``"_state"``.

    Returns
    -------
    Callable
        A function with signature:

            (cls, method, state, trap_exception=None) -> decorator

        where `decorator(sub_method)` registers `sub_method` for that control
        path and replaces `cls.method` with a dispatcher wrapper.
    """

    MethodKey = namedtuple(
        "MethodKey",
        [
            "ClassName",
            "MethodName",
            "StateVal",
        ],
    )
    """
    Tuple-like key used to uniquely identify a control path.

    Fields
    ------
    ClassName : str
        The owning class name.
    MethodName : str
        The base method name being templated.
    StateVal : Hashable
        The state value that selects this implementation.
    """

    methods_map: Dict[MethodKey, Callable] = {}
    """Mapping from (class, method, state) keys to registered implementations."""

    def templator(
        cls: Type,
        method: Callable[P, R],
        state: Hashable,
        trap_exception: Optional[
            Union[Exception, Callable[[Callable[P, R], Any], None]]
        ] = None,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator that registers a control path implementation.

        Parameters
        ----------
        cls : Type
            The class whose method should be wrapped for state-based dispatch.
            The wrapper is installed on this class under `method.__name__`.
        method : Callable[P, R]
            The base method being templated. Its signature and metadata (name,
            docstring, annotations) are used for the installed wrapper via
            `functools.wraps(method)`.
        state : Hashable
            The state value that selects the decorated implementation.
        trap_exception : Optional[Union[Exception, Callable[[Callable[P, R], Any], None]]]
            Controls what happens when a dispatch target is missing:

            - If `None`, the wrapper raises `NotImplementedError`.
            - If an exception class, the wrapper raises ``trap_exception()``.
            - If another callable, it is invoked as
              ``trap_exception(method, state)`` and is expected to raise.

        Returns
        -------
        Callable[[Callable[P, R]], Callable[P, R]]
            A decorator registering `sub_method` for `(cls, method, state)`.

        Raises
        ------
        TypeError
            If `state` is not hashable.
        """
        try:
            hash(state)
        except TypeError:
            raise TypeError(f"The argument for 'state' must be hashable. Got {state!r}")

        smk: MethodKey = MethodKey(cls.__name__, method.__name__, state)

        def decorator(sub_method: Callable[P, R]) -> Callable[P, R]:
            methods_map[smk] = sub_method

            # Re-registration must wrap the original base method, not a wrapper.
            base = getattr(method, "__control_path_base__", method)

            @wraps(base)
            def wrapper(self: Any, *args: P.args, **kwargs: P.kwargs) -> Any:
                if not hasattr(self, state_attr):
                    raise NotImplementedError(
                        "{} is missing attribute {}".format(type(self), repr(state_attr))
                    )
                cur = getattr(self, state_attr)
                if sm := methods_map.get(MethodKey(cls.__name__, base.__name__, cur)):
                    return sm(self, *args, **kwargs)
                if not trap_exception:
                    raise NotImplementedError(
                        "Missing control path (state={}) for {}".format(
                            repr(cur), repr(base)
                        )
                    )
                if isinstance(trap_exception, type) and issubclass(
                    trap_exception, BaseException
                ):
                    raise trap_exception()
                trap_exception(base, cur)
                raise NotImplementedError(
                    "Missing control path (state={}) for {}".format(repr(cur), repr(base))
                )

            wrapper.__control_path_base__ = base
            setattr(cls, base.__name__, wrapper)
            return sub_method

        return decorator

    return templator
