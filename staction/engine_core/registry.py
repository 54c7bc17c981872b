"""
Action Registry - The wrapped actions exposed to callers and to actions.

Built once during init and never changed afterwards. Entries are
reachable by key (actions["inc"]) and by attribute (actions.inc).

The registry carries no public methods of its own, so any action name
(get, keys, items, ...) resolves to the wrapped action. Iterate it for
the names; use `name in actions` to test membership.
"""

from __future__ import annotations
import logging
from typing import Any, Awaitable, Callable, Iterator, Mapping

from ..errors import UnknownActionError
from .dispatcher import DispatchResult

logger = logging.getLogger(__name__)

WrappedAction = Callable[..., Awaitable[DispatchResult]]


class ActionRegistry:
    """Read-only collection of action name to dispatching callable."""

    __slots__ = ("_actions",)

    def __init__(self, actions: Mapping[str, WrappedAction] | None = None):
        object.__setattr__(self, "_actions", dict(actions or {}))

    def __getitem__(self, name: str) -> WrappedAction:
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(name) from None

    def __getattr__(self, name: str) -> WrappedAction:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ActionRegistry is read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __repr__(self) -> str:
        return f"ActionRegistry({sorted(self._actions)!r})"


def build_registry(
    bodies: Mapping[str, Any],
    wrap: Callable[[str, Callable[..., Any]], WrappedAction],
) -> ActionRegistry:
    """
    Wrap every callable in bodies.

    Non-callable values are skipped.
    """
    wrapped: dict[str, WrappedAction] = {}
    for name, body in bodies.items():
        if not callable(body):
            logger.debug("skipping non-callable action %s", name)
            continue
        wrapped[name] = wrap(name, body)
    return ActionRegistry(wrapped)
