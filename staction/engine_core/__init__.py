"""
Engine Core - Result normalization and dispatch pipeline.

The core is the runtime that:
1. Classifies whatever an action produces
2. Reduces it to one or more state commits
3. Runs pre/post middleware around every action
4. Keeps a per-dispatch aux slot
"""

from .lifecycle import LifecycleState
from .commit import CommitSink, CommitObserver
from .result import ResultKind, ResultNormalizer, classify_result
from .middleware import MiddlewareChain, MiddlewareEntry, MiddlewareParams, MiddlewarePhase
from .dispatcher import ActionContext, AuxSlot, DispatchContext, DispatchResult, Dispatcher
from .registry import ActionRegistry, build_registry

__all__ = [
    "LifecycleState",
    "CommitSink",
    "CommitObserver",
    "ResultKind",
    "ResultNormalizer",
    "classify_result",
    "MiddlewareChain",
    "MiddlewareEntry",
    "MiddlewareParams",
    "MiddlewarePhase",
    "ActionContext",
    "AuxSlot",
    "DispatchContext",
    "DispatchResult",
    "Dispatcher",
    "ActionRegistry",
    "build_registry",
]
