"""
Lifecycle — initialization state shared by the Core Agent and the Bridge.

Components move UNINITIALIZED -> INITIALIZING -> INITIALIZED and never go
back. Operations only check the binary "initialized" flag.
"""

from __future__ import annotations

from enum import Enum


class LifecycleState(str, Enum):
    """Initialization states of a component."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"


class UninitializedError(RuntimeError):
    """Raised when an operation runs before its component was initialized."""

    def __init__(self, component: str, operation: str = ""):
        self.component = component
        self.operation = operation
        message = f"{component} not initialized"
        if operation:
            message = f"{message} (called {operation})"
        super().__init__(message)


class Lifecycle:
    """Mixin tracking a component's initialization state."""

    component_name: str = "Component"

    def __init__(self) -> None:
        self._state: LifecycleState = LifecycleState.UNINITIALIZED

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is LifecycleState.INITIALIZED

    def _begin_initialization(self) -> None:
        self._state = LifecycleState.INITIALIZING

    def _finish_initialization(self) -> None:
        self._state = LifecycleState.INITIALIZED

    def _require_initialized(self, operation: str = "") -> None:
        if not self.initialized:
            raise UninitializedError(self.component_name, operation)
