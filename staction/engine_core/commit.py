"""
Commit Sink - The single owner of the current state.

Every state change in the engine ends here:
1. The held state is replaced wholesale (never patched)
2. The commit observer is called with (state, actions)

Observer errors are not caught; they surface in whichever dispatch
produced the commit, after the new state is already held.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .registry import ActionRegistry

CommitObserver = Callable[[Any, "ActionRegistry"], None]


class CommitSink:
    """
    Holds the current state and notifies the observer on every commit.

    Other components read the state only through get_state(),
    never through a copy of their own.
    """

    def __init__(self, state: Any = None, observer: CommitObserver | None = None):
        self._state = state
        self.observer = observer
        self.actions: ActionRegistry | None = None
        self.commit_count = 0

    @property
    def state(self) -> Any:
        return self._state

    def get_state(self) -> Any:
        """Accessor handed to actions and middleware."""
        return self._state

    def commit(self, state: Any) -> Any:
        """Replace the state and notify the observer."""
        self._state = state
        self.commit_count += 1
        # No observer yet while the initializer is still running
        if self.observer is not None:
            self.observer(state, self.actions)
        return state

    def seed(self, state: Any) -> None:
        """Set the initial state without notifying."""
        self._state = state
