"""
Action Dispatcher - Runs one action end to end.

A dispatch:
1. Creates a fresh DispatchContext with an empty aux slot
2. Runs the pre middleware phase
3. Calls the action body with an ActionContext
4. Normalizes the body's result (committing as it goes)
5. Runs the post middleware phase
6. Returns DispatchResult(state, aux)

Nested dispatches (an action awaiting actions.other()) get their own
context and aux slot. Their commits are visible to the caller as soon
as they return because all dispatches share one CommitSink.
"""

from __future__ import annotations
import functools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .commit import CommitSink
from .middleware import MiddlewareChain, MiddlewarePhase
from .result import ResultNormalizer

if TYPE_CHECKING:
    from .registry import ActionRegistry

logger = logging.getLogger(__name__)


@dataclass
class AuxSlot:
    """
    Side-channel value owned by a single dispatch.

    Calling the slot updates it:
    - with a plain value, the value replaces the slot
    - with a callable, the callable gets the current value (None at
      first) and its result is stored
    """
    value: Any = None

    def __call__(self, update: Any) -> Any:
        if callable(update):
            self.value = update(self.value)
        else:
            self.value = update
        return self.value


@dataclass
class ActionContext:
    """First argument passed to every action body."""
    state: Callable[[], Any]
    actions: ActionRegistry
    aux: AuxSlot
    name: str


@dataclass
class DispatchContext:
    """Per-call record of a dispatch."""
    name: str
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    aux: AuxSlot = field(default_factory=AuxSlot)


@dataclass
class DispatchResult:
    """What an awaited action resolves to."""
    state: Any
    aux: Any = None


class Dispatcher:
    """
    Wraps action bodies and runs them through the pipeline.

    The dispatcher does not own state: it reads and writes it through
    the CommitSink shared with the normalizer and middleware chain.
    """

    def __init__(
        self,
        sink: CommitSink,
        normalizer: ResultNormalizer,
        middleware: MiddlewareChain,
    ):
        self.sink = sink
        self.normalizer = normalizer
        self.middleware = middleware
        self.actions: ActionRegistry | None = None

        # Diagnostics
        self.logging_enabled = True
        self.log_state = False

    def wrap(
        self, name: str, body: Callable[..., Any]
    ) -> Callable[..., Awaitable[DispatchResult]]:
        """Close over an action body, producing the callable exposed in the registry."""

        @functools.wraps(body)
        async def action(*args: Any, **kwargs: Any) -> DispatchResult:
            return await self.dispatch(name, body, *args, **kwargs)

        return action

    async def dispatch(
        self, name: str, body: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> DispatchResult:
        """Run one action with its middleware."""
        context = DispatchContext(name=name, args=args, kwargs=kwargs)
        self._log_dispatch(context)

        await self.middleware.run_phase(MiddlewarePhase.PRE, context)

        action_context = ActionContext(
            state=self.sink.get_state,
            actions=self.actions,
            aux=context.aux,
            name=context.name,
        )
        result = body(action_context, *context.args, **context.kwargs)
        await self.normalizer.normalize(result)

        await self.middleware.run_phase(MiddlewarePhase.POST, context)

        return DispatchResult(state=self.sink.state, aux=context.aux.value)

    def _log_dispatch(self, context: DispatchContext) -> None:
        if not self.logging_enabled:
            return
        if self.log_state:
            logger.info("action: %s %r", context.name, self.sink.state)
        else:
            logger.info("action: %s", context.name)
