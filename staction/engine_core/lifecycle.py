"""
Lifecycle - Initialization states of an engine.

    uninitialized -> initializing -> initialized
                                  -> initerror

initialized and initerror are terminal: any further init call is
rejected without a transition.
"""

from enum import Enum


class LifecycleState(str, Enum):
    """Initialization state of an engine."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"
    INITERROR = "initerror"  # Initializer raised
