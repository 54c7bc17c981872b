"""
Devtools - Explicit debugging hooks.

Nothing here is used by the engine itself; callers opt in by
registering engines.
"""

from .registry import EngineRegistry, attach, default_registry, detach, snapshot_engine
from .schemas import EngineSnapshot, RegistrySnapshot

__all__ = [
    "EngineRegistry",
    "attach",
    "default_registry",
    "detach",
    "snapshot_engine",
    "EngineSnapshot",
    "RegistrySnapshot",
]
