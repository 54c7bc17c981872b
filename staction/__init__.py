"""
Staction - Action-driven state engine.

Callers register named actions and an initializer. Each action call:
- Runs pre middleware
- Runs the action body with a state accessor, the sibling actions and
  a per-call aux slot
- Turns whatever the body produces (a value, an awaitable, a generator,
  an async generator or an updater function) into ordered state commits
- Runs post middleware
- Resolves to the resulting state and aux value

Every commit notifies one observer.
"""

from .config import EngineConfig
from .engine import Staction
from .engine_core import (
    ActionContext,
    ActionRegistry,
    DispatchResult,
    LifecycleState,
    MiddlewareEntry,
    MiddlewareParams,
    MiddlewarePhase,
    ResultKind,
    classify_result,
)
from .errors import (
    EngineRegistrationError,
    LifecycleError,
    MiddlewareConfigError,
    NotInitializedError,
    StactionError,
    UnknownActionError,
)

__version__ = "0.1.0"

__all__ = [
    "Staction",
    "EngineConfig",
    "ActionContext",
    "ActionRegistry",
    "DispatchResult",
    "LifecycleState",
    "MiddlewareEntry",
    "MiddlewareParams",
    "MiddlewarePhase",
    "ResultKind",
    "classify_result",
    "StactionError",
    "LifecycleError",
    "NotInitializedError",
    "MiddlewareConfigError",
    "UnknownActionError",
    "EngineRegistrationError",
]
