"""
Pydantic Schemas for engine inspection.

Snapshots are plain data: they can be printed, dumped to JSON or
compared in tests without holding a reference to the live engine.
"""

from __future__ import annotations
from typing import Any

from pydantic import BaseModel, Field

from ..engine_core.lifecycle import LifecycleState


class EngineSnapshot(BaseModel):
    """Point-in-time view of one engine."""
    engine_id: str
    name: str | None = None
    init_state: LifecycleState
    initialized: bool
    action_names: list[str] = Field(default_factory=list)
    pre_middleware: int = Field(0, description="Number of pre-phase entries")
    post_middleware: int = Field(0, description="Number of post-phase entries")
    commit_count: int = 0
    logging_enabled: bool = True
    log_state: bool = False
    state: Any = None

    model_config = {"arbitrary_types_allowed": True}


class RegistrySnapshot(BaseModel):
    """All engines in a registry."""
    engines: list[EngineSnapshot] = Field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.engines if e.name is not None]
