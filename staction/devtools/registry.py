"""
Engine Registry - Opt-in registration of engines for debugging.

Engines are never attached to anything implicitly. A caller that wants
an engine reachable from a debugger or REPL registers it:

    from staction.devtools import attach, default_registry
    attach(engine, "cart")
    default_registry.describe("cart")

Any number of engines can be registered; names must be unique within
a registry.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..errors import EngineRegistrationError
from .schemas import EngineSnapshot, RegistrySnapshot

if TYPE_CHECKING:
    from ..engine import Staction

logger = logging.getLogger(__name__)


class EngineRegistry:
    """
    Tracks engines by name.

    Holds strong references until unregister() is called.
    """

    def __init__(self):
        self._engines: dict[str, Staction] = {}

    def register(self, engine: Staction, name: str | None = None) -> str:
        """
        Register an engine.

        The name defaults to engine.config.name, then engine.engine_id.

        Returns:
            The name the engine was registered under

        Raises:
            EngineRegistrationError: If the name is already taken
        """
        name = name or engine.config.name or engine.engine_id
        if name in self._engines:
            raise EngineRegistrationError(f"An engine is already registered as '{name}'")
        self._engines[name] = engine
        logger.debug("registered engine %s as %s", engine.engine_id, name)
        return name

    def unregister(self, name: str) -> Staction | None:
        """Remove an engine. Returns it, or None if the name is unknown."""
        return self._engines.pop(name, None)

    def get(self, name: str) -> Staction | None:
        return self._engines.get(name)

    def list_engines(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._engines)

    def describe(self, name: str) -> EngineSnapshot | None:
        engine = self._engines.get(name)
        if engine is None:
            return None
        return snapshot_engine(engine, name=name)

    def describe_all(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            engines=[snapshot_engine(engine, name=name) for name, engine in self._engines.items()]
        )

    def clear(self) -> None:
        self._engines.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._engines

    def __len__(self) -> int:
        return len(self._engines)


def snapshot_engine(engine: Staction, name: str | None = None) -> EngineSnapshot:
    """Capture the inspectable parts of an engine."""
    return EngineSnapshot(
        engine_id=engine.engine_id,
        name=name or engine.config.name,
        init_state=engine.init_state,
        initialized=engine.initialized,
        action_names=engine.action_names,
        pre_middleware=len(engine.middleware.pre),
        post_middleware=len(engine.middleware.post),
        commit_count=engine.commit_count,
        logging_enabled=engine.logging_enabled,
        log_state=engine.log_state,
        state=engine.get_state(),
    )


default_registry = EngineRegistry()


def attach(engine: Staction, name: str | None = None) -> str:
    """Register an engine with the default registry."""
    return default_registry.register(engine, name)


def detach(name: str) -> Staction | None:
    """Remove an engine from the default registry."""
    return default_registry.unregister(name)
