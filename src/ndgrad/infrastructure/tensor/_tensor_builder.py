"""
Tensor control-path manager for backward-state dispatch.

This module defines the shared control-path manager used to register and
resolve state-specific implementations of the Tensor backward scheduler.

The manager is created by specializing the generic `create_path_builder`
utility with the state attribute name ``"_state"``. Method dispatch is
therefore performed on the runtime value of ``self._state`` (a
`BackwardState`) of Tensor objects.

Typical usage
-------------
    @tensor_control_path_manager(Mixin, Mixin._deliver, BackwardState.PENDING)
    def deliver_pending(self, grad, consumer, slot): ...

Notes
-----
- All control paths registered via this manager share a single internal
  registry.
"""

from ...domain.utils._control_path import create_path_builder

# Control-path manager that dispatches Tensor methods based on `self._state`
tensor_control_path_manager = create_path_builder("_state")
