"""
Errors - Exception taxonomy for the engine.

Only misuse of the engine itself is reported through these classes.
Failures raised by actions, middleware, observers or awaited values
propagate unchanged.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine_core.lifecycle import LifecycleState


class StactionError(Exception):
    """Base class for engine errors."""


class LifecycleError(StactionError):
    """Raised when init is called outside the uninitialized state."""

    def __init__(self, state: LifecycleState):
        self.state = state
        super().__init__(
            f"Staction cannot be initialized: current state is '{state.value}'"
        )


class NotInitializedError(StactionError):
    """Raised when the action registry is used before init has built it."""

    def __init__(self, message: str = "Staction has not been initialized"):
        super().__init__(message)


class UnknownActionError(StactionError, AttributeError, KeyError):
    """Raised when an action name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown action: {name}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class MiddlewareConfigError(StactionError):
    """Raised when middleware entries fail validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Middleware configuration failed with {len(errors)} error(s)")


class EngineRegistrationError(StactionError):
    """Raised when a debug registration name is already taken."""
