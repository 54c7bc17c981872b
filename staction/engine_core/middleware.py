"""
Middleware Chain - Hooks run before and after every action.

Middleware entries are grouped into two phases:
- pre: run in registration order before the action body
- post: run in registration order after the action's result is committed

Each entry's return value goes through the ResultNormalizer, so
middleware can produce state just like an action can. An entry that
returns None abstains: the current state is re-committed unchanged.

The first failing entry aborts the phase; later entries never run.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from pydantic import BaseModel, ValidationError

from ..errors import MiddlewareConfigError
from .result import ResultNormalizer

if TYPE_CHECKING:
    from .dispatcher import DispatchContext

logger = logging.getLogger(__name__)


class MiddlewarePhase(str, Enum):
    """When a middleware entry runs relative to the action body."""
    PRE = "pre"
    POST = "post"


class MiddlewareEntry(BaseModel):
    """A single middleware hook."""
    phase: MiddlewarePhase
    method: Callable[..., Any]
    meta: Any = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


@dataclass
class MiddlewareParams:
    """What a middleware method is called with."""
    state: Callable[[], Any]
    name: str
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    meta: Any = None


class MiddlewareChain:
    """
    Holds the pre and post phases and runs them.

    Phases are tuples replaced wholesale by set_middleware(), so a phase
    already running keeps the entries it started with.
    """

    def __init__(self, normalizer: ResultNormalizer):
        self.normalizer = normalizer
        self._pre: tuple[MiddlewareEntry, ...] = ()
        self._post: tuple[MiddlewareEntry, ...] = ()

    @property
    def pre(self) -> tuple[MiddlewareEntry, ...]:
        return self._pre

    @property
    def post(self) -> tuple[MiddlewareEntry, ...]:
        return self._post

    def entries(self, phase: MiddlewarePhase) -> tuple[MiddlewareEntry, ...]:
        if phase == MiddlewarePhase.PRE:
            return self._pre
        return self._post

    def set_middleware(self, entries: Iterable[MiddlewareEntry | Mapping[str, Any]]) -> None:
        """
        Replace all middleware.

        Entries may be MiddlewareEntry instances or mappings with
        phase/method/meta keys. If any entry is invalid nothing is
        replaced and MiddlewareConfigError lists every problem.
        """
        validated: list[MiddlewareEntry] = []
        errors: list[str] = []

        for index, entry in enumerate(entries):
            if isinstance(entry, MiddlewareEntry):
                validated.append(entry)
                continue
            try:
                validated.append(MiddlewareEntry.model_validate(entry))
            except ValidationError as e:
                for error in e.errors():
                    location = ".".join(str(part) for part in error["loc"]) or "entry"
                    errors.append(f"middleware[{index}].{location}: {error['msg']}")

        if errors:
            raise MiddlewareConfigError(errors)

        self._pre = tuple(e for e in validated if e.phase == MiddlewarePhase.PRE)
        self._post = tuple(e for e in validated if e.phase == MiddlewarePhase.POST)
        logger.debug(
            "middleware set: %d pre, %d post", len(self._pre), len(self._post)
        )

    async def run_phase(
        self,
        phase: MiddlewarePhase,
        context: DispatchContext,
    ) -> Any:
        """
        Run every entry of a phase in order for one dispatch.

        Returns the state current after the phase.
        """
        sink = self.normalizer.sink
        entries = self.entries(phase)

        for index, entry in enumerate(entries):
            logger.debug("%s middleware %d for action %s", phase.value, index, context.name)
            params = MiddlewareParams(
                state=sink.get_state,
                name=context.name,
                args=context.args,
                kwargs=dict(context.kwargs),
                meta=entry.meta,
            )
            result = entry.method(params)
            if result is None:
                # Abstention keeps the state rather than erasing it
                sink.commit(sink.state)
            else:
                await self.normalizer.normalize(result)

        return sink.state
