"""
Result Normalizer - Turns whatever an action produces into state commits.

An action (or middleware) may produce:
1. An awaitable - awaited, then its result is normalized again
2. An iterator (usually a generator) - one commit per step, plus the
   generator's return value if it has one
3. An async iterator (usually an async generator) - one commit per
   awaited step
4. A callable - called with the current state, result committed as is
5. Anything else - committed as is; None re-commits the current state

Classification goes by capability, in that order. Lists, dicts, tuples
and strings are iterable but not iterators, so they are plain values.
"""

from __future__ import annotations
import inspect
import logging
from collections.abc import AsyncIterator, Iterator
from enum import Enum
from typing import Any, Awaitable, Callable

from .commit import CommitSink

logger = logging.getLogger(__name__)


class ResultKind(Enum):
    """Closed set of shapes an action result can take."""
    DEFERRED = "deferred"
    SEQUENCE = "sequence"
    ASYNC_SEQUENCE = "async_sequence"
    UPDATER = "updater"
    VALUE = "value"


def classify_result(value: Any) -> ResultKind:
    """Determine how a produced value is reduced to state."""
    if inspect.isawaitable(value):
        return ResultKind.DEFERRED
    if isinstance(value, Iterator):
        return ResultKind.SEQUENCE
    if isinstance(value, AsyncIterator):
        return ResultKind.ASYNC_SEQUENCE
    if callable(value):
        return ResultKind.UPDATER
    return ResultKind.VALUE


class ResultNormalizer:
    """
    Reduces produced values to commits on a CommitSink.

    normalize() is recursive and re-entrant: a generator may yield a
    coroutine, a coroutine may return a generator, and so on.
    """

    def __init__(self, sink: CommitSink):
        self.sink = sink

    async def normalize(self, value: Any) -> Any:
        """
        Normalize a produced value, committing as it goes.

        Returns the state current after the last commit.
        """
        kind = classify_result(value)
        logger.debug("normalizing %s result", kind.value)
        handler = self._get_handler(kind)
        return await handler(value)

    def _get_handler(self, kind: ResultKind) -> Callable[[Any], Awaitable[Any]]:
        handlers = {
            ResultKind.DEFERRED: self._handle_deferred,
            ResultKind.SEQUENCE: self._handle_sequence,
            ResultKind.ASYNC_SEQUENCE: self._handle_async_sequence,
            ResultKind.UPDATER: self._handle_updater,
            ResultKind.VALUE: self._handle_value,
        }
        return handlers[kind]

    async def _handle_deferred(self, deferred: Awaitable[Any]) -> Any:
        resolved = await deferred
        return await self.normalize(resolved)

    async def _handle_sequence(self, producer: Iterator[Any]) -> Any:
        try:
            while True:
                try:
                    step = next(producer)
                except StopIteration as stop:
                    # Generator return value
                    if stop.value is not None:
                        await self.normalize(stop.value)
                    break
                await self.normalize(step)
        finally:
            close = getattr(producer, "close", None)
            if close is not None:
                close()
        return self.sink.state

    async def _handle_async_sequence(self, producer: AsyncIterator[Any]) -> Any:
        try:
            while True:
                try:
                    step = await anext(producer)
                except StopAsyncIteration:
                    break
                await self.normalize(step)
        finally:
            aclose = getattr(producer, "aclose", None)
            if aclose is not None:
                await aclose()
        return self.sink.state

    async def _handle_updater(self, updater: Callable[[Any], Any]) -> Any:
        return self.sink.commit(updater(self.sink.state))

    async def _handle_value(self, value: Any) -> Any:
        if value is None:
            return self.sink.commit(self.sink.state)
        return self.sink.commit(value)
