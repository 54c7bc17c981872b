"""
Pytest fixtures for Staction tests.
"""

import asyncio

import pytest

from ..engine import Staction
from ..config import EngineConfig
from ..engine_core.commit import CommitSink
from ..engine_core.result import ResultNormalizer


class CommitRecorder:
    """Commit observer that remembers every state it was given."""

    def __init__(self):
        self.states = []
        self.actions = None

    def __call__(self, state, actions):
        self.states.append(state)
        self.actions = actions

    @property
    def count(self) -> int:
        return len(self.states)


async def sleep(delay: float = 0.01):
    await asyncio.sleep(delay)


@pytest.fixture
def recorder() -> CommitRecorder:
    return CommitRecorder()


@pytest.fixture
def engine() -> Staction:
    """A fresh engine with dispatch logging off."""
    return Staction(config=EngineConfig(logging_enabled=False))


@pytest.fixture
def sink(recorder: CommitRecorder) -> CommitSink:
    """A sink holding {'count': 0} and reporting to the recorder."""
    return CommitSink(state={"count": 0}, observer=recorder)


@pytest.fixture
def normalizer(sink: CommitSink) -> ResultNormalizer:
    return ResultNormalizer(sink)


@pytest.fixture
def counter_actions() -> dict:
    """Basic counter actions used across tests."""

    def inc(ctx, by=1):
        return {"count": ctx.state()["count"] + by}

    def reset(ctx):
        return {"count": 0}

    return {"inc": inc, "reset": reset}
