"""
Staction - The engine facade.

Wires the core components together and owns the initialization
lifecycle:

    engine = Staction()
    await engine.init(actions, initializer, observer)
    result = await engine.actions.inc()
    result.state, result.aux

init() wraps every action before calling the initializer, so the
initializer may already dispatch actions. The observer is stored last
and is not called for the initial state.
"""

from __future__ import annotations
import inspect
import logging
import uuid
from typing import Any, Callable, Iterable, Mapping

from .config import EngineConfig
from .engine_core.commit import CommitObserver, CommitSink
from .engine_core.dispatcher import Dispatcher
from .engine_core.lifecycle import LifecycleState
from .engine_core.middleware import MiddlewareChain, MiddlewareEntry
from .engine_core.registry import ActionRegistry, build_registry
from .engine_core.result import ResultNormalizer
from .errors import LifecycleError, NotInitializedError

logger = logging.getLogger(__name__)


class Staction:
    """
    A single-owner state container driven by named actions.

    Each instance is independent: several engines can live in one
    process without sharing anything.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.engine_id = str(uuid.uuid4())

        self._init_state = LifecycleState.UNINITIALIZED
        self._actions: ActionRegistry | None = None

        self._sink = CommitSink()
        self._normalizer = ResultNormalizer(self._sink)
        self._middleware = MiddlewareChain(self._normalizer)
        self._dispatcher = Dispatcher(self._sink, self._normalizer, self._middleware)
        self._dispatcher.logging_enabled = self.config.logging_enabled
        self._dispatcher.log_state = self.config.log_state

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def init(
        self,
        actions: Mapping[str, Callable[..., Any]],
        initializer: Callable[[ActionRegistry], Any],
        observer: CommitObserver,
    ) -> None:
        """
        Initialize the engine once.

        Args:
            actions: Action name to action body
            initializer: Called with the action registry, returns the
                initial state (or an awaitable of it)
            observer: Called with (state, actions) on every later commit

        Raises:
            LifecycleError: If init has already been called
        """
        if self._init_state != LifecycleState.UNINITIALIZED:
            error = LifecycleError(self._init_state)
            logger.warning("%s", error)
            raise error

        self._init_state = LifecycleState.INITIALIZING
        try:
            self._actions = build_registry(actions, self._dispatcher.wrap)
            self._dispatcher.actions = self._actions
            self._sink.actions = self._actions

            initial_state = initializer(self._actions)
            # An awaitable may resolve to another awaitable
            while inspect.isawaitable(initial_state):
                initial_state = await initial_state
            self._sink.seed(initial_state)

            self._sink.observer = observer
        except Exception:
            self._init_state = LifecycleState.INITERROR
            logger.exception("Staction initialization failed")
            raise

        self._init_state = LifecycleState.INITIALIZED

    @property
    def initialized(self) -> bool:
        return self._init_state == LifecycleState.INITIALIZED

    @property
    def init_state(self) -> LifecycleState:
        return self._init_state

    # -------------------------------------------------------------------------
    # State and actions
    # -------------------------------------------------------------------------

    @property
    def actions(self) -> ActionRegistry:
        """The wrapped actions. Available once init has built them."""
        if self._actions is None:
            raise NotInitializedError("Staction actions are not available before init")
        return self._actions

    @property
    def action_names(self) -> list[str]:
        if self._actions is None:
            return []
        return sorted(self._actions)

    @property
    def state(self) -> Any:
        return self._sink.state

    def get_state(self) -> Any:
        """Return the current state."""
        return self._sink.get_state()

    @property
    def commit_count(self) -> int:
        """Number of commits since the engine was created."""
        return self._sink.commit_count

    # -------------------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------------------

    def set_middleware(self, entries: Iterable[MiddlewareEntry | Mapping[str, Any]]) -> None:
        """Replace all middleware. See MiddlewareChain.set_middleware."""
        self._middleware.set_middleware(entries)

    @property
    def middleware(self) -> MiddlewareChain:
        return self._middleware

    # -------------------------------------------------------------------------
    # Debugging assists
    # -------------------------------------------------------------------------

    def enable_logging(self) -> str:
        self._dispatcher.logging_enabled = True
        return "Staction logging is enabled"

    def disable_logging(self) -> str:
        self._dispatcher.logging_enabled = False
        return "Staction logging is disabled"

    def enable_state_when_logging(self) -> None:
        self._dispatcher.log_state = True

    def disable_state_when_logging(self) -> None:
        self._dispatcher.log_state = False

    @property
    def logging_enabled(self) -> bool:
        return self._dispatcher.logging_enabled

    @property
    def log_state(self) -> bool:
        return self._dispatcher.log_state

    def __repr__(self) -> str:
        return f"Staction(engine_id={self.engine_id!r}, init_state={self._init_state.value!r})"
